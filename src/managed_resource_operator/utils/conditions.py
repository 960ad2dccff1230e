"""Utilities for managing record conditions.

The lifecycle conditions Creating, Ready and Failed are mutually exclusive:
setting one removes the other two in the same mutation.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from ..constants import (
    COND_CREATING,
    COND_FAILED,
    COND_READY,
    LIFECYCLE_CONDITIONS,
    REASON_CREATING,
    REASON_READY,
)
from ..models import RecordStatus


def update_condition(
    conditions: list[dict[str, Any]],
    condition_type: str,
    status: str,
    reason: str,
    message: str,
    observed_generation: int | None = None,
) -> list[dict[str, Any]]:
    """Update or add a condition to the conditions list.

    Args:
        conditions: List of existing conditions
        condition_type: Type of condition
        status: Status of condition ("True", "False", "Unknown")
        reason: Reason for the condition
        message: Human-readable message
        observed_generation: Generation when condition was observed

    Returns:
        Updated list of conditions
    """
    now = datetime.now(timezone.utc).isoformat()

    new_condition = {
        "type": condition_type,
        "status": status,
        "reason": reason,
        "message": message,
        "lastTransitionTime": now,
    }
    if observed_generation is not None:
        new_condition["observedGeneration"] = observed_generation

    for idx, cond in enumerate(conditions):
        if cond.get("type") == condition_type:
            # Only update lastTransitionTime if status changed
            if cond.get("status") == status:
                new_condition["lastTransitionTime"] = cond.get("lastTransitionTime", now)
            conditions[idx] = new_condition
            return conditions

    conditions.append(new_condition)
    return conditions


def get_condition(conditions: list[dict[str, Any]], condition_type: str) -> dict[str, Any] | None:
    """Return the condition of the given type, if present."""
    for cond in conditions:
        if cond.get("type") == condition_type:
            return cond
    return None


def unset_all_conditions(status: RecordStatus) -> None:
    """Remove every lifecycle condition from the status."""
    status.conditions = [c for c in status.conditions if c.get("type") not in LIFECYCLE_CONDITIONS]


def _set_exclusive(
    status: RecordStatus,
    condition_type: str,
    reason: str,
    message: str,
    observed_generation: int | None,
) -> None:
    previous = get_condition(status.conditions, condition_type)
    unset_all_conditions(status)
    if previous is not None:
        status.conditions.append(previous)
    update_condition(status.conditions, condition_type, "True", reason, message, observed_generation)
    status.message = message


def set_creating(status: RecordStatus, message: str, observed_generation: int | None = None) -> None:
    """Mark the external resource as being created."""
    _set_exclusive(status, COND_CREATING, REASON_CREATING, message, observed_generation)


def set_ready(status: RecordStatus, message: str, observed_generation: int | None = None) -> None:
    """Mark the external resource as ready for use."""
    _set_exclusive(status, COND_READY, REASON_READY, message, observed_generation)


def set_failed(
    status: RecordStatus,
    reason: str,
    message: str,
    observed_generation: int | None = None,
) -> None:
    """Mark the last reconcile as failed with the given reason."""
    _set_exclusive(status, COND_FAILED, reason, message, observed_generation)


def active_condition(status: RecordStatus) -> str | None:
    """Return the lifecycle condition type currently set, if any."""
    for cond in status.conditions:
        if cond.get("type") in LIFECYCLE_CONDITIONS and cond.get("status") == "True":
            return cond["type"]
    return None
