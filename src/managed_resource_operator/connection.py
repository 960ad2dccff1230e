"""Publication of connection credentials for usable external resources."""

from __future__ import annotations

import logging
from typing import Protocol

from kubernetes import client

from . import metrics
from .constants import (
    CONTROLLER_NAME,
    LABEL_MANAGED_BY,
    LABEL_RESOURCE_KIND,
    LABEL_RESOURCE_NAME,
    SECRET_CA_CERT_KEY,
    SECRET_CLIENT_CERT_KEY,
    SECRET_CLIENT_KEY_KEY,
    SECRET_ENDPOINT_KEY,
    SECRET_PASSWORD_KEY,
    SECRET_USERNAME_KEY,
)
from .models import ConnectionDetails, ManagedResourceRecord
from .utils.secrets import upsert_secret

logger = logging.getLogger(__name__)


class ConnectionPublisher(Protocol):
    def publish(self, record: ManagedResourceRecord, connection: ConnectionDetails) -> dict[str, str]:
        """Persist connection details for the record and return a reference to them."""
        ...


def connection_secret_data(connection: ConnectionDetails) -> dict[str, bytes]:
    """Map connection details onto the fixed six-key secret schema."""
    return {
        SECRET_ENDPOINT_KEY: connection.endpoint.encode("utf-8"),
        SECRET_USERNAME_KEY: connection.username.encode("utf-8"),
        SECRET_PASSWORD_KEY: connection.password.encode("utf-8"),
        SECRET_CA_CERT_KEY: connection.ca_certificate,
        SECRET_CLIENT_CERT_KEY: connection.client_certificate,
        SECRET_CLIENT_KEY_KEY: connection.client_key,
    }


class SecretConnectionPublisher:
    """Publishes connection details as an Opaque Secret owned by the record."""

    def __init__(self, api: client.CoreV1Api) -> None:
        self.api = api

    def publish(self, record: ManagedResourceRecord, connection: ConnectionDetails) -> dict[str, str]:
        secret_name = record.connection_secret_name
        labels = {
            LABEL_MANAGED_BY: CONTROLLER_NAME,
            LABEL_RESOURCE_KIND: record.kind.lower(),
            LABEL_RESOURCE_NAME: record.name,
        }
        try:
            upsert_secret(
                self.api,
                record.namespace,
                secret_name,
                connection_secret_data(connection),
                labels=labels,
                owner_references=[record.owner_reference()],
            )
        except Exception:
            metrics.connection_secret_published_total.labels(kind=record.kind, result="error").inc()
            raise
        metrics.connection_secret_published_total.labels(kind=record.kind, result="success").inc()
        logger.debug("Published connection secret %s/%s", record.namespace, secret_name)
        return {"name": secret_name, "namespace": record.namespace}
