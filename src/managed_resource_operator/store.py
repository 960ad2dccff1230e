"""Persistence of managed resource records in the Kubernetes API."""

from __future__ import annotations

import logging
from typing import Protocol

from kubernetes import client

from . import metrics
from .constants import API_GROUP, API_VERSION, FIELD_MANAGER
from .models import ManagedResourceRecord, RecordIdentifier

logger = logging.getLogger(__name__)


class ConflictError(Exception):
    """The record changed since it was read; retry from a fresh read."""


class RecordStore(Protocol):
    """Fetch and compare-and-swap persist of records of one kind."""

    def get(self, identifier: RecordIdentifier) -> ManagedResourceRecord | None:
        """Return the record, or None if it no longer exists."""
        ...

    def update(self, record: ManagedResourceRecord) -> ManagedResourceRecord | None:
        """Persist the record; return the stored version, or None if it is gone.

        Raises:
            ConflictError: If the record's resource version is stale
        """
        ...


class KubernetesRecordStore:
    """RecordStore backed by namespaced custom objects.

    The whole object, status included, is written with one replace call that
    carries ``metadata.resourceVersion``, so a concurrent writer makes the
    write fail with 409 instead of being overwritten.
    """

    def __init__(self, api: client.CustomObjectsApi, plural: str) -> None:
        self.api = api
        self.plural = plural

    def get(self, identifier: RecordIdentifier) -> ManagedResourceRecord | None:
        try:
            obj = self.api.get_namespaced_custom_object(
                group=API_GROUP,
                version=API_VERSION,
                namespace=identifier.namespace,
                plural=self.plural,
                name=identifier.name,
            )
        except client.exceptions.ApiException as e:
            metrics.api_call_total.labels(api_type="k8s", operation=f"get_{self.plural}", result="error").inc()
            if e.status == 404:
                return None
            raise
        metrics.api_call_total.labels(api_type="k8s", operation=f"get_{self.plural}", result="success").inc()
        return ManagedResourceRecord.from_dict(obj)

    def update(self, record: ManagedResourceRecord) -> ManagedResourceRecord | None:
        try:
            obj = self.api.replace_namespaced_custom_object(
                group=API_GROUP,
                version=API_VERSION,
                namespace=record.namespace,
                plural=self.plural,
                name=record.name,
                body=record.to_dict(),
                field_manager=FIELD_MANAGER,
            )
        except client.exceptions.ApiException as e:
            metrics.api_call_total.labels(api_type="k8s", operation=f"update_{self.plural}", result="error").inc()
            if e.status == 409:
                raise ConflictError(f"{record.kind} {record.identifier} was modified concurrently") from e
            if e.status == 404:
                logger.debug("%s %s disappeared while persisting", record.kind, record.identifier)
                return None
            raise
        metrics.api_call_total.labels(api_type="k8s", operation=f"update_{self.plural}", result="success").inc()
        return ManagedResourceRecord.from_dict(obj)
