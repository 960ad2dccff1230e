"""Shared plumbing for boto3-backed external resource clients."""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable, TypeVar

import boto3
from botocore.config import Config

from ... import metrics
from .errors import classify_error

logger = logging.getLogger(__name__)

_T = TypeVar("_T")


class AWSResourceClient:
    """Base class holding one boto3 session and lazily created regional clients."""

    kind = ""
    name_prefix = ""
    service_name = ""

    def __init__(
        self,
        region: str,
        access_key: str,
        secret_key: str,
        session_token: str | None = None,
        endpoint: str | None = None,
        session: boto3.session.Session | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            region: Default region, used when a record names no location
            access_key: Access key ID
            secret_key: Secret access key
            session_token: Optional session token for temporary credentials
            endpoint: Optional endpoint override for AWS-compatible APIs
            session: Pre-built session, mainly for tests
        """
        self.region = region
        self.endpoint = endpoint
        self.session = session or boto3.session.Session(
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            aws_session_token=session_token,
            region_name=region,
        )
        self._config = Config(retries={"max_attempts": 3, "mode": "standard"})
        self._clients: dict[tuple[str, str], Any] = {}
        self._clients_lock = threading.Lock()

    def client_for(self, service: str, location: str | None = None) -> Any:
        """Return a cached boto3 client for the service in the given region."""
        region = location or self.region
        key = (service, region)
        with self._clients_lock:
            if key not in self._clients:
                self._clients[key] = self.session.client(
                    service,
                    region_name=region,
                    endpoint_url=self.endpoint,
                    config=self._config,
                )
            return self._clients[key]

    def call(self, operation: str, fn: Callable[[], _T]) -> _T:
        """Run one external operation, recording metrics and classifying errors.

        Args:
            operation: Logical operation name ("create", "get", "delete")
            fn: Zero-argument callable performing the SDK call

        Raises:
            ExternalAPIError: Classified failure
        """
        start_time = time.time()
        try:
            result = fn()
        except Exception as e:
            classified = classify_error(e, operation)
            metrics.external_operations_total.labels(
                kind=self.kind, operation=operation, result=type(classified).__name__
            ).inc()
            logger.debug("%s %s failed: %s", self.kind, operation, classified)
            if classified is e:
                raise
            raise classified from e
        else:
            metrics.external_operations_total.labels(
                kind=self.kind, operation=operation, result="success"
            ).inc()
            return result
        finally:
            metrics.external_operation_duration_seconds.labels(
                kind=self.kind, operation=operation
            ).observe(time.time() - start_time)
