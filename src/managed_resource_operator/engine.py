"""Reconcile engine for externally provisioned resources.

Each call to :meth:`ReconcileEngine.reconcile` reads one record, decides
which branch applies (delete, create or sync), performs at most a couple of
external calls and writes the record back once. Waiting for the external
system is never done in-process: the result asks the dispatcher to call
again after a delay.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from .config import OperatorConfig
from .connection import ConnectionPublisher
from .constants import (
    CONTROLLER_NAME,
    COND_CREATING,
    COND_READY,
    EVENT_REASON_RECONCILE_FAILED,
    EVENT_REASON_RESOURCE_CREATING,
    EVENT_REASON_RESOURCE_DELETED,
    EVENT_REASON_RESOURCE_READY,
    EVENT_REASON_RESOURCE_RETAINED,
    FINALIZER,
    RECLAIM_RETAIN,
    REASON_CLIENT_CONNECTION_FAILED,
    REASON_CONNECTION_SECRET_FAILED,
    REASON_CREATE_FAILED,
    REASON_DELETE_FAILED,
    REASON_SYNC_FAILED,
)
from .logging import log_resource_event
from .models import ManagedResourceRecord, ReconcileResult, RecordIdentifier, RecordStatus
from .services.base import ExternalResourceClient
from .services.errors import AlreadyExistsError, BadRequestError, NotFoundError
from .store import ConflictError, RecordStore
from .tracing import set_span_status, trace_span
from .utils.conditions import active_condition, set_creating, set_failed, set_ready, unset_all_conditions
from .utils.errors import sanitize_exception
from .utils.finalizers import add_finalizer, has_finalizer, remove_finalizer

logger = logging.getLogger(__name__)

ERROR_CLIENT_CONNECTION = "Failed to connect to provider"
ERROR_CREATING = "Failed to create external resource"
ERROR_SYNCING = "Failed to observe external resource"
ERROR_CONNECTION_SECRET = "Failed to create/update connection secret"
ERROR_DELETING = "Failed to delete external resource"

Connector = Callable[[ManagedResourceRecord], ExternalResourceClient]
EventRecorder = Callable[[ManagedResourceRecord, str, str, str], None]


def _log(
    record: ManagedResourceRecord,
    event: str,
    reason: str,
    message: str,
    level: int = logging.INFO,
    **kwargs: object,
) -> None:
    log_resource_event(
        logger,
        controller=CONTROLLER_NAME,
        resource_kind=record.kind,
        resource_name=record.name,
        namespace=record.namespace,
        uid=record.uid,
        event=event,
        reason=reason,
        message=message,
        level=level,
        **kwargs,
    )


def external_name_for(record: ManagedResourceRecord, client: ExternalResourceClient) -> str:
    """Derive the external name from the record's UID, never from user input."""
    return f"{client.name_prefix}{record.uid}"


def fail(
    record: ManagedResourceRecord,
    reason: str,
    summary: str,
    error: BaseException,
    retry: bool = True,
) -> ReconcileResult:
    """Set the Failed condition on the record and return the matching retry decision."""
    message = f"{summary}: {sanitize_exception(error)}"
    set_failed(record.status, reason, message, record.generation)
    _log(record, "failed", reason, message, level=logging.WARNING, error_type=type(error).__name__, retry=retry)
    if retry:
        return ReconcileResult.retry(message)
    return ReconcileResult.fail_permanently(message)


def create_external(
    record: ManagedResourceRecord,
    client: ExternalResourceClient,
    poll_interval: float,
) -> ReconcileResult:
    """Request creation of the external resource and start polling for it.

    An AlreadyExists answer means an earlier attempt got through before its
    record update was persisted, so it is handled exactly like success.
    """
    name = external_name_for(record, client)
    observed = None
    try:
        observed = client.create(name, record.spec)
    except AlreadyExistsError:
        _log(record, "create", "AlreadyExists", f"External resource {name} already exists")
    except BadRequestError as e:
        return fail(record, REASON_CREATE_FAILED, ERROR_CREATING, e, retry=False)
    except Exception as e:
        return fail(record, REASON_CREATE_FAILED, ERROR_CREATING, e)

    record.status.external_name = name
    if observed is not None:
        record.status.state = observed.state or record.status.state
        record.status.provider_resource_id = observed.provider_id or record.status.provider_resource_id
    set_creating(record.status, f"{record.kind} {name} is being created", record.generation)
    _log(record, "create", "Creating", f"Requested creation of {name}", external_name=name)
    return ReconcileResult.retry_after(poll_interval)


def sync_external(
    record: ManagedResourceRecord,
    client: ExternalResourceClient,
    publisher: ConnectionPublisher,
    poll_interval: float,
) -> ReconcileResult:
    """Observe the external resource and publish its connection once usable."""
    name = record.status.external_name
    try:
        observed = client.get(record.location, name)
    except Exception as e:
        return fail(record, REASON_SYNC_FAILED, ERROR_SYNCING, e)

    record.status.state = observed.state
    if observed.provider_id:
        record.status.provider_resource_id = observed.provider_id

    if not observed.ready or observed.connection is None:
        _log(record, "sync", "Waiting", f"{name} is {observed.state or 'unknown'}", level=logging.DEBUG)
        return ReconcileResult.retry_after(poll_interval)

    try:
        secret_ref = publisher.publish(record, observed.connection)
    except Exception as e:
        return fail(record, REASON_CONNECTION_SECRET_FAILED, ERROR_CONNECTION_SECRET, e)

    record.status.connection_secret_ref = secret_ref
    record.status.observed_generation = record.generation
    set_ready(record.status, f"{record.kind} {name} is running", record.generation)
    return ReconcileResult.done()


def delete_external(
    record: ManagedResourceRecord,
    client: ExternalResourceClient,
    finalizer: str = FINALIZER,
) -> ReconcileResult:
    """Delete the external resource per reclaim policy, then release the finalizer."""
    name = record.status.external_name
    try:
        policy = record.reclaim_policy
    except ValueError as e:
        return fail(record, REASON_DELETE_FAILED, ERROR_DELETING, e, retry=False)

    if policy == RECLAIM_RETAIN:
        _log(record, "delete", "Retained", f"Reclaim policy Retain, leaving {name or 'nothing'} in place")
    elif name:
        try:
            client.delete(record.location, name)
        except NotFoundError:
            _log(record, "delete", "NotFound", f"External resource {name} is already gone")
        except Exception as e:
            return fail(record, REASON_DELETE_FAILED, ERROR_DELETING, e)

    unset_all_conditions(record.status)
    if policy == RECLAIM_RETAIN:
        record.status.message = f"{record.kind} {name} retained"
    else:
        record.status.message = f"{record.kind} {name} deleted"
    remove_finalizer(record, finalizer)
    return ReconcileResult.done()


class ReconcileEngine:
    """Per-record state machine converging one kind of external resource.

    The engine holds no locks; the dispatcher must not run two reconciles
    for the same identifier at once.
    """

    def __init__(
        self,
        kind: str,
        store: RecordStore,
        connect: Connector,
        publisher: ConnectionPublisher,
        config: OperatorConfig | None = None,
        finalizer: str = FINALIZER,
        record_event: EventRecorder | None = None,
    ) -> None:
        self.kind = kind
        self.store = store
        self.connect = connect
        self.publisher = publisher
        self.config = config or OperatorConfig()
        self.finalizer = finalizer
        self.record_event = record_event

    def reconcile(self, identifier: RecordIdentifier) -> ReconcileResult:
        """Run one reconcile for the record with the given identifier."""
        with trace_span("reconcile", kind=self.kind, attributes={"record": str(identifier)}):
            result = self._reconcile(identifier)
            set_span_status(result.error is None, result.error)
            return result

    def _reconcile(self, identifier: RecordIdentifier) -> ReconcileResult:
        try:
            record = self.store.get(identifier)
        except Exception as e:
            message = f"Failed to read {self.kind} {identifier}: {sanitize_exception(e)}"
            logger.warning(message)
            return ReconcileResult.retry(message)
        if record is None:
            logger.debug("%s %s not found, nothing to do", self.kind, identifier)
            return ReconcileResult.done()

        before = record.to_dict()
        try:
            client = self.connect(record)
        except Exception as e:
            result = fail(record, REASON_CLIENT_CONNECTION_FAILED, ERROR_CLIENT_CONNECTION, e)
            return self._finish(record, before, result)

        if record.deletion_requested_at:
            with trace_span("delete", kind=self.kind):
                return self._finish(record, before, delete_external(record, client, self.finalizer))

        if not has_finalizer(record, self.finalizer):
            add_finalizer(record, self.finalizer)
            try:
                stored = self.store.update(record)
            except ConflictError as e:
                return ReconcileResult.retry(str(e))
            except Exception as e:
                return self._persist_failed(record, e)
            if stored is None:
                return ReconcileResult.done()
            record = stored
            before = record.to_dict()

        if not record.status.external_name:
            with trace_span("create", kind=self.kind):
                result = create_external(record, client, self.config.poll_interval)
            return self._finish(record, before, result)

        with trace_span("sync", kind=self.kind):
            result = sync_external(record, client, self.publisher, self.config.poll_interval)
        return self._finish(record, before, result)

    def _finish(
        self,
        record: ManagedResourceRecord,
        before: dict[str, Any],
        result: ReconcileResult,
    ) -> ReconcileResult:
        """Persist the branch's mutations, then report lifecycle transitions."""
        if record.to_dict() == before:
            return result

        try:
            self.store.update(record)
        except ConflictError as e:
            logger.info("%s", e)
            return ReconcileResult.retry(str(e))
        except Exception as e:
            return self._persist_failed(record, e)

        self._emit_transition(record, before, result)
        return result

    def _persist_failed(self, record: ManagedResourceRecord, error: Exception) -> ReconcileResult:
        message = f"Failed to persist {record.kind} {record.identifier}: {sanitize_exception(error)}"
        logger.warning(message)
        return ReconcileResult.retry(message)

    def _emit_transition(
        self,
        record: ManagedResourceRecord,
        before: dict[str, Any],
        result: ReconcileResult,
    ) -> None:
        if self.record_event is None:
            return

        previous = active_condition(RecordStatus.from_dict(before.get("status")))
        current = active_condition(record.status)

        if result.error is not None:
            self.record_event(record, EVENT_REASON_RECONCILE_FAILED, result.error, "Warning")
        elif current == COND_CREATING and previous != COND_CREATING:
            self.record_event(record, EVENT_REASON_RESOURCE_CREATING, record.status.message, "Normal")
        elif current == COND_READY and previous != COND_READY:
            self.record_event(record, EVENT_REASON_RESOURCE_READY, record.status.message, "Normal")
        elif record.deletion_requested_at and not has_finalizer(record, self.finalizer):
            reason = (
                EVENT_REASON_RESOURCE_RETAINED
                if record.spec.get("reclaimPolicy") == RECLAIM_RETAIN
                else EVENT_REASON_RESOURCE_DELETED
            )
            self.record_event(record, reason, record.status.message, "Normal")
