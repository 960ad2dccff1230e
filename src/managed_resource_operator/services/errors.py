"""Error taxonomy for external resource operations.

Provider clients raise these instead of SDK-specific exceptions so the
reconcile engine can decide between absorbing, retrying and giving up
without knowing which cloud it is talking to.
"""

from __future__ import annotations


class ExternalAPIError(Exception):
    """Base class for classified external API failures."""

    retryable = True

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.code = code


class NotFoundError(ExternalAPIError):
    """The external resource does not exist."""


class AlreadyExistsError(ExternalAPIError):
    """The external resource already exists; a previous create went through."""


class BadRequestError(ExternalAPIError):
    """The request is permanently invalid; retrying will not converge."""

    retryable = False


class TransientError(ExternalAPIError):
    """Network, throttling or unknown failure; safe to retry later."""


class ClientConnectionError(Exception):
    """Credentials or connectivity could not be established for a provider."""
