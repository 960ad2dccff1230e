"""Tests for finalizer helpers."""

from __future__ import annotations

from managed_resource_operator.constants import FINALIZER
from managed_resource_operator.models import ManagedResourceRecord, RecordIdentifier
from managed_resource_operator.utils.finalizers import add_finalizer, has_finalizer, remove_finalizer


def make_record(finalizers: list[str]) -> ManagedResourceRecord:
    return ManagedResourceRecord(
        api_version="aws.cloud37.dev/v1alpha1",
        kind="EKSCluster",
        identifier=RecordIdentifier("default", "prod"),
        uid="u1",
        finalizers=list(finalizers),
    )


class TestFinalizers:
    """Test cases for finalizer set semantics."""

    def test_add_when_missing(self):
        """Test that the token is appended once."""
        record = make_record(["other.example.com"])

        assert add_finalizer(record, FINALIZER) is True
        assert record.finalizers == ["other.example.com", FINALIZER]
        assert has_finalizer(record, FINALIZER)

    def test_add_is_idempotent(self):
        """Test that adding an existing token changes nothing."""
        record = make_record([FINALIZER])

        assert add_finalizer(record, FINALIZER) is False
        assert record.finalizers == [FINALIZER]

    def test_remove_keeps_foreign_tokens(self):
        """Test that only our token is removed."""
        record = make_record(["other.example.com", FINALIZER])

        assert remove_finalizer(record, FINALIZER) is True
        assert record.finalizers == ["other.example.com"]

    def test_remove_absent(self):
        """Test that removing an absent token is a no-op."""
        record = make_record([])

        assert remove_finalizer(record, FINALIZER) is False
        assert record.finalizers == []
