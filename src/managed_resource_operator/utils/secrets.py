"""Utilities for reading and writing Kubernetes secrets."""

from __future__ import annotations

import base64
import binascii
from typing import Any

from kubernetes import client

from ..constants import FIELD_MANAGER


def _decode(value: str | bytes) -> str:
    # Handle both string and bytes (different versions of kubernetes client)
    if isinstance(value, bytes):
        return value.decode("utf-8")
    try:
        return base64.b64decode(value, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return value


def get_secret_value(
    api: client.CoreV1Api,
    namespace: str,
    secret_name: str,
    key: str,
) -> str:
    """Get a value from a Kubernetes secret.

    Args:
        api: Kubernetes API client
        namespace: Namespace of the secret
        secret_name: Name of the secret
        key: Key in the secret

    Returns:
        Secret value

    Raises:
        ValueError: If secret or key not found
    """
    try:
        secret = api.read_namespaced_secret(name=secret_name, namespace=namespace)
    except client.exceptions.ApiException as e:
        if e.status == 404:
            raise ValueError(f"Secret '{secret_name}' not found in namespace '{namespace}'") from e
        raise

    data = secret.data or {}
    if key not in data:
        raise ValueError(f"Key '{key}' not found in secret '{secret_name}'")
    return _decode(data[key])


def encode_secret_data(data: dict[str, bytes]) -> dict[str, str]:
    """Base64-encode byte values for the ``data`` field of a Secret."""
    return {k: base64.b64encode(v).decode("ascii") for k, v in data.items()}


def _owner_reference(ref: dict[str, Any]) -> client.V1OwnerReference:
    return client.V1OwnerReference(
        api_version=ref["apiVersion"],
        kind=ref["kind"],
        name=ref["name"],
        uid=ref["uid"],
        controller=ref.get("controller"),
        block_owner_deletion=ref.get("blockOwnerDeletion"),
    )


def upsert_secret(
    api: client.CoreV1Api,
    namespace: str,
    secret_name: str,
    data: dict[str, bytes],
    labels: dict[str, str] | None = None,
    owner_references: list[dict[str, Any]] | None = None,
) -> None:
    """Create a Kubernetes secret, replacing its data if it already exists.

    Args:
        api: Kubernetes API client
        namespace: Namespace for the secret
        secret_name: Name of the secret
        data: Secret data as raw bytes (base64 encoded on the wire)
        labels: Labels for the secret
        owner_references: Owner references for the secret
    """
    secret = client.V1Secret(
        metadata=client.V1ObjectMeta(
            name=secret_name,
            namespace=namespace,
            labels=labels or {},
            owner_references=[_owner_reference(ref) for ref in owner_references or []],
        ),
        type="Opaque",
        data=encode_secret_data(data),
    )

    try:
        api.create_namespaced_secret(
            namespace=namespace,
            body=secret,
            field_manager=FIELD_MANAGER,
        )
    except client.exceptions.ApiException as e:
        if e.status != 409:
            raise
        api.replace_namespaced_secret(
            name=secret_name,
            namespace=namespace,
            body=secret,
            field_manager=FIELD_MANAGER,
        )
