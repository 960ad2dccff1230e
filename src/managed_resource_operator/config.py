"""Operator configuration loaded from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass


class ConfigurationError(Exception):
    """Raised when configuration validation fails."""

    pass


DEFAULT_POLL_INTERVAL_SECONDS = 30.0
DEFAULT_RETRY_MIN_DELAY_SECONDS = 5.0
DEFAULT_RETRY_MAX_DELAY_SECONDS = 300.0
DEFAULT_RETRY_BACKOFF = 2.0
DEFAULT_MAX_WORKERS = 4
DEFAULT_METRICS_PORT = 8080
DEFAULT_CACHE_TTL_SECONDS = 30.0


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e


@dataclass(frozen=True)
class OperatorConfig:
    """Runtime configuration for the operator.

    The poll interval is fixed between status checks while an external
    resource is provisioning. Failed reconciles are retried with exponential
    backoff between ``retry_min_delay`` and ``retry_max_delay``.
    """

    poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS
    retry_min_delay: float = DEFAULT_RETRY_MIN_DELAY_SECONDS
    retry_max_delay: float = DEFAULT_RETRY_MAX_DELAY_SECONDS
    retry_backoff: float = DEFAULT_RETRY_BACKOFF
    max_workers: int = DEFAULT_MAX_WORKERS
    metrics_port: int = DEFAULT_METRICS_PORT
    cache_ttl: float = DEFAULT_CACHE_TTL_SECONDS

    def __post_init__(self) -> None:
        if self.poll_interval <= 0:
            raise ConfigurationError("poll_interval must be positive")
        if self.retry_min_delay <= 0:
            raise ConfigurationError("retry_min_delay must be positive")
        if self.retry_max_delay < self.retry_min_delay:
            raise ConfigurationError("retry_max_delay must be >= retry_min_delay")
        if self.retry_backoff < 1.0:
            raise ConfigurationError("retry_backoff must be >= 1.0")
        if self.max_workers < 1:
            raise ConfigurationError("max_workers must be >= 1")
        if not 0 < self.metrics_port < 65536:
            raise ConfigurationError(f"metrics_port out of range: {self.metrics_port}")
        if self.cache_ttl < 0:
            raise ConfigurationError("cache_ttl must not be negative")

    @classmethod
    def from_env(cls) -> OperatorConfig:
        """Build configuration from environment variables."""
        return cls(
            poll_interval=_float_env("POLL_INTERVAL_SECONDS", DEFAULT_POLL_INTERVAL_SECONDS),
            retry_min_delay=_float_env("RETRY_MIN_DELAY_SECONDS", DEFAULT_RETRY_MIN_DELAY_SECONDS),
            retry_max_delay=_float_env("RETRY_MAX_DELAY_SECONDS", DEFAULT_RETRY_MAX_DELAY_SECONDS),
            retry_backoff=_float_env("RETRY_BACKOFF", DEFAULT_RETRY_BACKOFF),
            max_workers=_int_env("MAX_WORKERS", DEFAULT_MAX_WORKERS),
            metrics_port=_int_env("METRICS_PORT", DEFAULT_METRICS_PORT),
            cache_ttl=_float_env("K8S_CACHE_TTL_SECONDS", DEFAULT_CACHE_TTL_SECONDS),
        )

    def retry_delay(self, attempt: int) -> float:
        """Backoff delay for the given zero-based retry attempt."""
        delay = self.retry_min_delay * (self.retry_backoff ** max(attempt, 0))
        return min(delay, self.retry_max_delay)
