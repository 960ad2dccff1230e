"""Main entry point for the Managed Resource Operator."""

from __future__ import annotations

import logging
import os
from typing import Any

import kopf
from kubernetes import client

from . import handlers  # noqa: F401
from . import health
from . import logging as structured_logging
from .config import OperatorConfig
from .constants import (
    KIND_EKS_CLUSTER,
    KIND_RDS_INSTANCE,
    PLURAL_EKS_CLUSTER,
    PLURAL_RDS_INSTANCE,
)
from .handlers.shared import build_engine, load_kubernetes_config
from .services.aws.eks import EKSClusterClient
from .services.aws.rds import RDSInstanceClient
from .tracing import initialize_tracing
from .utils.cache import set_cache_ttl

logger = logging.getLogger(__name__)


@kopf.on.startup()
def configure(settings: kopf.OperatorSettings, memo: kopf.Memo, **_: Any) -> None:
    """Configure the operator and wire one reconcile engine per managed kind."""
    structured_logging.setup_structured_logging()
    initialize_tracing()

    operator_config = OperatorConfig.from_env()

    # Use annotations for kopf's own bookkeeping; status belongs to the engine
    settings.persistence.progress_storage = kopf.AnnotationsProgressStorage()
    settings.persistence.diffbase_storage = kopf.AnnotationsDiffBaseStorage()

    settings.posting.level = logging.INFO
    settings.networking.request_timeout = 30.0
    settings.execution.max_workers = operator_config.max_workers

    set_cache_ttl(operator_config.cache_ttl)
    load_kubernetes_config()
    custom_api = client.CustomObjectsApi()
    core_api = client.CoreV1Api()

    memo.config = operator_config
    memo.engines = {
        KIND_EKS_CLUSTER: build_engine(
            KIND_EKS_CLUSTER, PLURAL_EKS_CLUSTER, EKSClusterClient, operator_config, custom_api, core_api
        ),
        KIND_RDS_INSTANCE: build_engine(
            KIND_RDS_INSTANCE, PLURAL_RDS_INSTANCE, RDSInstanceClient, operator_config, custom_api, core_api
        ),
    }

    health.start_metrics_server(operator_config.metrics_port)
    health.mark_ready()
    logger.info("Operator configured with poll interval %ss", operator_config.poll_interval)


@kopf.on.cleanup()
def cleanup(**_: Any) -> None:
    """Stop reporting readiness while the operator shuts down."""
    health.mark_not_ready()


def run() -> None:
    """Run the operator in the current process."""
    namespace = os.getenv("WATCH_NAMESPACE")
    if namespace:
        kopf.run(namespaces=[namespace])
    else:
        kopf.run(clusterwide=True)
