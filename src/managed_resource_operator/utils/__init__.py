"""Utility functions for the Managed Resource Operator."""

from .cache import get_cached_object, invalidate_cache, make_cache_key, set_cached_object
from .conditions import set_creating, set_failed, set_ready, unset_all_conditions, update_condition
from .context import get_correlation_id, with_correlation_id
from .errors import sanitize_exception
from .finalizers import add_finalizer, has_finalizer, remove_finalizer
from .secrets import get_secret_value, upsert_secret

__all__ = [
    "update_condition",
    "set_creating",
    "set_ready",
    "set_failed",
    "unset_all_conditions",
    "add_finalizer",
    "remove_finalizer",
    "has_finalizer",
    "get_secret_value",
    "upsert_secret",
    "get_cached_object",
    "set_cached_object",
    "invalidate_cache",
    "make_cache_key",
    "get_correlation_id",
    "with_correlation_id",
    "sanitize_exception",
]
