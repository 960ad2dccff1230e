"""Utilities for emitting Kubernetes events about records."""

from __future__ import annotations

from typing import Any

import kopf

from ..models import ManagedResourceRecord


def emit_event(
    body: dict[str, Any],
    reason: str,
    message: str,
    type_: str = "Normal",
) -> None:
    """Emit a Kubernetes event.

    Args:
        body: Object the event refers to (apiVersion, kind, metadata)
        reason: Event reason
        message: Event message
        type_: Event type (Normal or Warning)
    """
    kopf.event(
        body,
        reason=reason,
        message=message,
        type=type_,
    )


def emit_record_event(
    record: ManagedResourceRecord,
    reason: str,
    message: str,
    type_: str = "Normal",
) -> None:
    """Emit a Kubernetes event attached to a managed resource record."""
    emit_event(
        {
            "apiVersion": record.api_version,
            "kind": record.kind,
            "metadata": {
                "name": record.name,
                "namespace": record.namespace,
                "uid": record.uid,
            },
        },
        reason,
        message,
        type_,
    )
