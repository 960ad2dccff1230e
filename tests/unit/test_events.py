"""Tests for Kubernetes event utilities."""

from __future__ import annotations

from unittest.mock import patch

from managed_resource_operator.models import ManagedResourceRecord
from managed_resource_operator.utils.events import emit_event, emit_record_event


class TestEmitEvent:
    """Test cases for emit_event function."""

    @patch("managed_resource_operator.utils.events.kopf.event")
    def test_emit_event_normal(self, mock_event):
        """Test emitting normal event."""
        body = {"metadata": {"name": "prod", "namespace": "default"}}

        emit_event(body, "ExternalResourceCreating", "EKSCluster eks-1 is being created")

        mock_event.assert_called_once_with(
            body,
            reason="ExternalResourceCreating",
            message="EKSCluster eks-1 is being created",
            type="Normal",
        )

    @patch("managed_resource_operator.utils.events.kopf.event")
    def test_emit_event_warning(self, mock_event):
        """Test emitting warning event."""
        body = {"metadata": {"name": "prod", "namespace": "default"}}

        emit_event(body, "ReconcileFailed", "Failed to connect to provider", type_="Warning")

        assert mock_event.call_args.kwargs["type"] == "Warning"


class TestEmitRecordEvent:
    """Test cases for emit_record_event function."""

    @patch("managed_resource_operator.utils.events.kopf.event")
    def test_event_refers_to_record(self, mock_event):
        """Test that the event body identifies the record by kind, name and uid."""
        record = ManagedResourceRecord.from_dict(
            {
                "apiVersion": "aws.cloud37.dev/v1alpha1",
                "kind": "RDSInstance",
                "metadata": {"name": "orders-db", "namespace": "shop", "uid": "u-42"},
                "spec": {},
            }
        )

        emit_record_event(record, "ExternalResourceReady", "RDSInstance rds-u-42 is running")

        body = mock_event.call_args.args[0]
        assert body["apiVersion"] == "aws.cloud37.dev/v1alpha1"
        assert body["kind"] == "RDSInstance"
        assert body["metadata"] == {"name": "orders-db", "namespace": "shop", "uid": "u-42"}
        assert mock_event.call_args.kwargs["reason"] == "ExternalResourceReady"
