"""TTL cache for Kubernetes objects that are read on every reconcile."""

from __future__ import annotations

import os
import threading
import time
from typing import Any, Optional

_cache: dict[str, tuple[Any, float]] = {}
_lock = threading.Lock()
_cache_ttl: float = float(os.getenv("K8S_CACHE_TTL_SECONDS", "30.0"))


def set_cache_ttl(ttl: float) -> None:
    """Override the cache TTL in seconds; zero disables caching."""
    global _cache_ttl
    _cache_ttl = ttl


def get_cached_object(key: str) -> Optional[Any]:
    """Get an object from cache if it hasn't expired.

    Args:
        key: Cache key (typically "kind:namespace:name")

    Returns:
        Cached object or None if not found or expired
    """
    with _lock:
        entry = _cache.get(key)
        if entry is None:
            return None
        obj, timestamp = entry
        if time.time() - timestamp > _cache_ttl:
            del _cache[key]
            return None
        return obj


def set_cached_object(key: str, obj: Any) -> None:
    """Store an object in cache with current timestamp."""
    if _cache_ttl <= 0:
        return
    with _lock:
        _cache[key] = (obj, time.time())


def invalidate_cache(pattern: Optional[str] = None) -> None:
    """Invalidate cache entries.

    Args:
        pattern: Optional substring to match keys (if None, clears all)
    """
    with _lock:
        if pattern is None:
            _cache.clear()
            return
        for key in [k for k in _cache if pattern in k]:
            del _cache[key]


def make_cache_key(kind: str, namespace: str, name: str) -> str:
    return f"{kind}:{namespace}:{name}"
