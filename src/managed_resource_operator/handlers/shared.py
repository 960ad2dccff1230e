"""Shared wiring for handlers: Kubernetes clients and engine construction."""

from __future__ import annotations

from kubernetes import client, config

from ..config import OperatorConfig
from ..connection import SecretConnectionPublisher
from ..builders.provider import make_connector
from ..engine import ReconcileEngine
from ..services.aws.base import AWSResourceClient
from ..store import KubernetesRecordStore
from ..utils.events import emit_record_event


def load_kubernetes_config() -> None:
    """Load in-cluster config, falling back to the local kubeconfig."""
    try:
        config.load_incluster_config()
    except config.ConfigException:
        config.load_kube_config()


def build_engine(
    kind: str,
    plural: str,
    client_cls: type[AWSResourceClient],
    operator_config: OperatorConfig,
    custom_api: client.CustomObjectsApi,
    core_api: client.CoreV1Api,
) -> ReconcileEngine:
    """Wire a reconcile engine for one managed resource kind."""
    return ReconcileEngine(
        kind=kind,
        store=KubernetesRecordStore(custom_api, plural),
        connect=make_connector(custom_api, core_api, client_cls),
        publisher=SecretConnectionPublisher(core_api),
        config=operator_config,
        record_event=emit_record_event,
    )
