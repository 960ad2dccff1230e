"""Data model for managed resource records and reconcile results."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any

from .constants import RECLAIM_DELETE, RECLAIM_RETAIN


@dataclass(frozen=True)
class RecordIdentifier:
    """Namespace and name of a record; the key reconcile triggers carry."""

    namespace: str
    name: str

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"


@dataclass
class ReconcileResult:
    """Outcome of one reconcile call, consumed by the dispatcher.

    ``requeue_after`` implies ``requeue``. ``error`` carries the surfaced
    failure message; an error without ``requeue`` is terminal until the
    record's spec changes.
    """

    requeue: bool = False
    requeue_after: float | None = None
    error: str | None = None

    def __post_init__(self) -> None:
        if self.requeue_after is not None:
            self.requeue = True

    @classmethod
    def done(cls) -> ReconcileResult:
        return cls()

    @classmethod
    def retry(cls, error: str | None = None) -> ReconcileResult:
        return cls(requeue=True, error=error)

    @classmethod
    def retry_after(cls, delay: float) -> ReconcileResult:
        return cls(requeue=True, requeue_after=delay)

    @classmethod
    def fail_permanently(cls, error: str) -> ReconcileResult:
        return cls(requeue=False, error=error)


@dataclass
class ConnectionDetails:
    """Connection attributes of a usable external resource."""

    endpoint: str = ""
    username: str = ""
    password: str = ""
    ca_certificate: bytes = b""
    client_certificate: bytes = b""
    client_key: bytes = b""


@dataclass
class ObservedResource:
    """External resource state as reported by a provider client."""

    state: str
    ready: bool = False
    provider_id: str = ""
    connection: ConnectionDetails | None = None


@dataclass
class RecordStatus:
    """Observed status of a managed resource record."""

    message: str = ""
    state: str = ""
    external_name: str = ""
    provider_resource_id: str = ""
    conditions: list[dict[str, Any]] = field(default_factory=list)
    connection_secret_ref: dict[str, str] | None = None
    observed_generation: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> RecordStatus:
        data = data or {}
        return cls(
            message=data.get("message", ""),
            state=data.get("state", ""),
            external_name=data.get("externalName", ""),
            provider_resource_id=data.get("providerResourceID", ""),
            conditions=copy.deepcopy(data.get("conditions") or []),
            connection_secret_ref=copy.deepcopy(data.get("connectionSecretRef")),
            observed_generation=data.get("observedGeneration"),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "message": self.message,
            "state": self.state,
            "externalName": self.external_name,
            "providerResourceID": self.provider_resource_id,
            "conditions": copy.deepcopy(self.conditions),
        }
        if self.connection_secret_ref is not None:
            data["connectionSecretRef"] = dict(self.connection_secret_ref)
        if self.observed_generation is not None:
            data["observedGeneration"] = self.observed_generation
        return data


@dataclass
class ManagedResourceRecord:
    """Durable representation of one externally provisioned resource."""

    api_version: str
    kind: str
    identifier: RecordIdentifier
    uid: str
    spec: dict[str, Any] = field(default_factory=dict)
    status: RecordStatus = field(default_factory=RecordStatus)
    finalizers: list[str] = field(default_factory=list)
    deletion_requested_at: str | None = None
    resource_version: str | None = None
    generation: int | None = None
    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)
    # Metadata as read, so fields not modeled here (ownerReferences,
    # managedFields, ...) survive a full replace.
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.identifier.name

    @property
    def namespace(self) -> str:
        return self.identifier.namespace

    @property
    def reclaim_policy(self) -> str:
        policy = self.spec.get("reclaimPolicy") or RECLAIM_DELETE
        if policy not in (RECLAIM_DELETE, RECLAIM_RETAIN):
            raise ValueError(f"Unsupported reclaimPolicy: {policy}")
        return policy

    @property
    def location(self) -> str | None:
        return self.spec.get("region") or None

    @property
    def provider_ref(self) -> dict[str, Any]:
        return self.spec.get("providerRef") or {}

    @property
    def connection_secret_name(self) -> str:
        ref = self.spec.get("writeConnectionSecretToRef") or {}
        return ref.get("name") or self.name

    @classmethod
    def from_dict(cls, obj: dict[str, Any]) -> ManagedResourceRecord:
        """Build a record from a Kubernetes custom object."""
        meta = obj.get("metadata", {})
        return cls(
            api_version=obj.get("apiVersion", ""),
            kind=obj.get("kind", ""),
            identifier=RecordIdentifier(meta.get("namespace", "default"), meta["name"]),
            uid=meta.get("uid", ""),
            spec=copy.deepcopy(obj.get("spec") or {}),
            status=RecordStatus.from_dict(obj.get("status")),
            finalizers=list(dict.fromkeys(meta.get("finalizers") or [])),
            deletion_requested_at=meta.get("deletionTimestamp"),
            resource_version=meta.get("resourceVersion"),
            generation=meta.get("generation"),
            labels=dict(meta.get("labels") or {}),
            annotations=dict(meta.get("annotations") or {}),
            metadata=copy.deepcopy(meta),
        )

    def to_dict(self) -> dict[str, Any]:
        """Render the record as a Kubernetes custom object.

        Modeled fields are applied on top of the metadata that was read.
        """
        meta = copy.deepcopy(self.metadata)
        meta.update(
            name=self.name,
            namespace=self.namespace,
            uid=self.uid,
            finalizers=list(self.finalizers),
        )
        optional = {
            "resourceVersion": self.resource_version,
            "generation": self.generation,
            "deletionTimestamp": self.deletion_requested_at,
            "labels": dict(self.labels) or None,
            "annotations": dict(self.annotations) or None,
        }
        for key, value in optional.items():
            if value is None:
                meta.pop(key, None)
            else:
                meta[key] = value
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "metadata": meta,
            "spec": copy.deepcopy(self.spec),
            "status": self.status.to_dict(),
        }

    def owner_reference(self) -> dict[str, Any]:
        """Owner reference pointing at this record, for derived objects."""
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "name": self.name,
            "uid": self.uid,
            "controller": True,
            "blockOwnerDeletion": True,
        }
