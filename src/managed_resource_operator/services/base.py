"""Base external resource client interface."""

from __future__ import annotations

from typing import Any, Protocol

from ..models import ObservedResource


class ExternalResourceClient(Protocol):
    """Protocol for clients that provision one type of external resource.

    Implementations raise ``services.errors`` exceptions for every
    failure.
    """

    kind: str
    name_prefix: str

    def create(self, name: str, spec: dict[str, Any]) -> ObservedResource:
        """Request creation of the external resource."""
        ...

    def get(self, location: str | None, name: str) -> ObservedResource:
        """Observe the external resource."""
        ...

    def delete(self, location: str | None, name: str) -> None:
        """Request deletion of the external resource."""
        ...
