"""Tests for the kopf handlers and engine wiring."""

from __future__ import annotations

from unittest.mock import Mock, patch

import kopf
import pytest

from managed_resource_operator.config import OperatorConfig
from managed_resource_operator.engine import ReconcileEngine
from managed_resource_operator.handlers.managed import ManagedResourceHandler, handle_rds_instance
from managed_resource_operator.handlers.shared import build_engine
from managed_resource_operator.models import ReconcileResult, RecordIdentifier
from managed_resource_operator.services.aws.eks import EKSClusterClient
from managed_resource_operator.store import KubernetesRecordStore


def make_memo(kind: str, result: ReconcileResult) -> Mock:
    engine = Mock()
    engine.reconcile.return_value = result
    memo = Mock()
    memo.engines = {kind: engine}
    memo.config = OperatorConfig()
    return memo


META = {"name": "orders-db", "namespace": "shop", "uid": "u1"}


class TestManagedResourceHandler:
    """Test cases for ManagedResourceHandler.handle."""

    def test_done_returns(self):
        """Test that a converged record ends the handler normally."""
        memo = make_memo("RDSInstance", ReconcileResult.done())

        ManagedResourceHandler("RDSInstance").handle(META, memo, retry=0)

        memo.engines["RDSInstance"].reconcile.assert_called_once_with(RecordIdentifier("shop", "orders-db"))

    def test_poll_raises_temporary_error(self):
        """Test that polling maps onto a delayed kopf retry."""
        memo = make_memo("RDSInstance", ReconcileResult.retry_after(30))

        with pytest.raises(kopf.TemporaryError) as exc_info:
            ManagedResourceHandler("RDSInstance").handle(META, memo, retry=0)
        assert exc_info.value.delay == 30

    def test_permanent_failure(self):
        """Test that a non-retryable failure stops kopf retries."""
        memo = make_memo("RDSInstance", ReconcileResult.fail_permanently("bad request"))

        with pytest.raises(kopf.PermanentError):
            ManagedResourceHandler("RDSInstance").handle(META, memo, retry=0)

    def test_decorated_handler_dispatches_by_kind(self):
        """Test that the registered RDS handler uses the RDS engine."""
        memo = make_memo("RDSInstance", ReconcileResult.done())

        handle_rds_instance(meta=META, memo=memo, retry=0, body={}, spec={})

        memo.engines["RDSInstance"].reconcile.assert_called_once()


class TestBuildEngine:
    """Test cases for build_engine."""

    @patch("managed_resource_operator.handlers.shared.make_connector")
    def test_build_engine_wiring(self, mock_make_connector):
        """Test that the engine is wired with a store, connector and publisher."""
        custom_api = Mock()
        core_api = Mock()
        config = OperatorConfig(poll_interval=10)

        engine = build_engine("EKSCluster", "eksclusters", EKSClusterClient, config, custom_api, core_api)

        assert isinstance(engine, ReconcileEngine)
        assert engine.kind == "EKSCluster"
        assert engine.config is config
        assert isinstance(engine.store, KubernetesRecordStore)
        assert engine.store.plural == "eksclusters"
        assert engine.publisher.api is core_api
        mock_make_connector.assert_called_once_with(custom_api, core_api, EKSClusterClient)
