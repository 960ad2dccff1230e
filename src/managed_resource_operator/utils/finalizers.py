"""Finalizer helpers with set semantics over a record's finalizer list."""

from __future__ import annotations

from ..models import ManagedResourceRecord


def has_finalizer(record: ManagedResourceRecord, token: str) -> bool:
    return token in record.finalizers


def add_finalizer(record: ManagedResourceRecord, token: str) -> bool:
    """Add a finalizer token. Returns True if the record changed."""
    if token in record.finalizers:
        return False
    record.finalizers.append(token)
    return True


def remove_finalizer(record: ManagedResourceRecord, token: str) -> bool:
    """Remove every occurrence of a finalizer token. Returns True if the record changed."""
    if token not in record.finalizers:
        return False
    record.finalizers = [f for f in record.finalizers if f != token]
    return True
