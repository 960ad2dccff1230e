"""Handlers for EKSCluster and RDSInstance records."""

from __future__ import annotations

from typing import Any

import kopf

from ..constants import API_GROUP_VERSION, KIND_EKS_CLUSTER, KIND_RDS_INSTANCE
from ..models import RecordIdentifier
from .base import BaseHandler


class ManagedResourceHandler(BaseHandler):
    """Delivers reconcile triggers for one kind to its engine."""

    def handle(
        self,
        meta: dict[str, Any],
        memo: kopf.Memo,
        retry: int,
    ) -> None:
        """Reconcile the record and signal kopf whether to call again."""
        engine = memo.engines[self.kind]
        identifier = RecordIdentifier(meta.get("namespace", "default"), meta["name"])
        result = self.reconcile_with_metrics(meta, lambda: engine.reconcile(identifier))
        if result.error is not None:
            self.log_info(meta, result.error, event="reconcile", reason="Failed", requeue=result.requeue)
        self.raise_for_result(result, memo.config, retry)


_cluster_handler = ManagedResourceHandler(KIND_EKS_CLUSTER)
_instance_handler = ManagedResourceHandler(KIND_RDS_INSTANCE)


# Deletion handlers are optional so kopf adds no finalizer of its own; the
# engine's finalizer keeps the record alive until external cleanup is done.
@kopf.on.resume(API_GROUP_VERSION, KIND_EKS_CLUSTER)
@kopf.on.create(API_GROUP_VERSION, KIND_EKS_CLUSTER)
@kopf.on.update(API_GROUP_VERSION, KIND_EKS_CLUSTER)
@kopf.on.delete(API_GROUP_VERSION, KIND_EKS_CLUSTER, optional=True)
def handle_eks_cluster(
    meta: dict[str, Any],
    memo: kopf.Memo,
    retry: int,
    **kwargs: Any,
) -> None:
    """Handle EKSCluster reconciliation."""
    _cluster_handler.handle(meta, memo, retry)


@kopf.on.resume(API_GROUP_VERSION, KIND_RDS_INSTANCE)
@kopf.on.create(API_GROUP_VERSION, KIND_RDS_INSTANCE)
@kopf.on.update(API_GROUP_VERSION, KIND_RDS_INSTANCE)
@kopf.on.delete(API_GROUP_VERSION, KIND_RDS_INSTANCE, optional=True)
def handle_rds_instance(
    meta: dict[str, Any],
    memo: kopf.Memo,
    retry: int,
    **kwargs: Any,
) -> None:
    """Handle RDSInstance reconciliation."""
    _instance_handler.handle(meta, memo, retry)
