"""Base handler class with common functionality for managed resource handlers."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable

import kopf

from .. import metrics
from ..config import OperatorConfig
from ..constants import CONTROLLER_NAME
from ..logging import log_resource_event
from ..models import ReconcileResult
from ..utils.context import with_correlation_id
from ..utils.errors import sanitize_exception


class BaseHandler:
    """Base class for handlers that drive a reconcile engine from kopf."""

    def __init__(self, kind: str):
        """Initialize base handler.

        Args:
            kind: The Kubernetes resource kind (e.g., "EKSCluster", "RDSInstance")
        """
        self.kind = kind
        self.logger = logging.getLogger(__name__)

    def _log(
        self,
        meta: dict[str, Any],
        message: str,
        event: str,
        reason: str,
        level: int,
        **kwargs: Any,
    ) -> None:
        log_resource_event(
            self.logger,
            controller=CONTROLLER_NAME,
            resource_kind=self.kind,
            resource_name=meta.get("name", "unknown"),
            namespace=meta.get("namespace", "default"),
            uid=meta.get("uid", "unknown"),
            event=event,
            reason=reason,
            message=message,
            level=level,
            **kwargs,
        )

    def log_info(self, meta: dict[str, Any], message: str, event: str = "info", reason: str = "Info", **kwargs: Any) -> None:
        self._log(meta, message, event, reason, logging.INFO, **kwargs)

    def log_error(
        self,
        meta: dict[str, Any],
        message: str,
        error: Exception | None = None,
        event: str = "error",
        reason: str = "Error",
        **kwargs: Any,
    ) -> None:
        """Log an error-level structured message, with sanitized error details."""
        if error is not None:
            kwargs["error"] = sanitize_exception(error)
            kwargs["error_type"] = type(error).__name__
        self._log(meta, message, event, reason, logging.ERROR, **kwargs)

    def reconcile_with_metrics(
        self,
        meta: dict[str, Any],
        reconcile_fn: Callable[[], ReconcileResult],
    ) -> ReconcileResult:
        """Execute one reconcile with metrics, correlation ID and error logging.

        Args:
            meta: Kubernetes resource metadata
            reconcile_fn: Function performing the reconcile

        Returns:
            The reconcile result
        """
        start_time = time.time()
        with with_correlation_id():
            try:
                result = reconcile_fn()
            except Exception as e:
                metrics.error_total.labels(kind=self.kind, error_type=type(e).__name__).inc()
                metrics.reconcile_total.labels(kind=self.kind, result="exception").inc()
                self.log_error(meta, "Reconciliation raised", error=e, reason="ReconciliationFailed")
                raise
            finally:
                metrics.reconcile_duration_seconds.labels(kind=self.kind).observe(time.time() - start_time)

            metrics.reconcile_total.labels(kind=self.kind, result=result_label(result)).inc()
            if result.error is not None:
                metrics.error_total.labels(kind=self.kind, error_type="ReconcileFailed").inc()
            return result

    def raise_for_result(self, result: ReconcileResult, config: OperatorConfig, retry: int) -> None:
        """Translate a reconcile result into kopf's retry signals.

        Args:
            result: Result returned by the engine
            config: Operator configuration with backoff settings
            retry: kopf's zero-based retry counter for this handler

        Raises:
            kopf.TemporaryError: When the engine asks to be called again
            kopf.PermanentError: When the engine failed without asking for a retry
        """
        if result.requeue_after is not None:
            raise kopf.TemporaryError(
                result.error or f"{self.kind} not ready yet",
                delay=result.requeue_after,
            )
        if result.requeue:
            raise kopf.TemporaryError(
                result.error or f"{self.kind} requeued",
                delay=config.retry_delay(retry),
            )
        if result.error is not None:
            raise kopf.PermanentError(result.error)


def result_label(result: ReconcileResult) -> str:
    if result.error is not None:
        return "retry" if result.requeue else "failed"
    if result.requeue:
        return "requeue"
    return "success"
