"""Builder for authenticated external resource clients."""

from __future__ import annotations

import threading
from typing import Any, Callable

from kubernetes import client

from .. import metrics
from ..constants import API_GROUP, API_VERSION, COND_READY, KIND_PROVIDER, PLURAL_PROVIDER
from ..models import ManagedResourceRecord
from ..services.aws.base import AWSResourceClient
from ..services.errors import ClientConnectionError
from ..utils.cache import get_cached_object, make_cache_key, set_cached_object
from ..utils.conditions import get_condition
from ..utils.secrets import get_secret_value


def get_provider_with_cache(
    api: client.CustomObjectsApi,
    provider_name: str,
    provider_ns: str,
) -> dict[str, Any]:
    """Get a Provider custom object, served from cache when fresh.

    Raises:
        client.exceptions.ApiException: If provider not found or API error
    """
    cache_key = make_cache_key(KIND_PROVIDER, provider_ns, provider_name)
    cached_provider = get_cached_object(cache_key)
    if cached_provider is not None:
        metrics.api_call_total.labels(api_type="k8s", operation="get_provider", result="cache_hit").inc()
        return cached_provider

    try:
        provider_obj = api.get_namespaced_custom_object(
            group=API_GROUP,
            version=API_VERSION,
            namespace=provider_ns,
            plural=PLURAL_PROVIDER,
            name=provider_name,
        )
    except client.exceptions.ApiException:
        metrics.api_call_total.labels(api_type="k8s", operation="get_provider", result="error").inc()
        raise
    metrics.api_call_total.labels(api_type="k8s", operation="get_provider", result="success").inc()
    set_cached_object(cache_key, provider_obj)
    return provider_obj


def provider_client_kwargs(provider_obj: dict[str, Any], core_api: client.CoreV1Api) -> dict[str, Any]:
    """Resolve a Provider custom object into client constructor arguments.

    Raises:
        ValueError: If the provider configuration is invalid or not ready
    """
    spec = provider_obj.get("spec", {})
    meta = provider_obj.get("metadata", {})
    namespace = meta.get("namespace", "default")
    name = meta.get("name", "unknown")

    ready = get_condition(provider_obj.get("status", {}).get("conditions", []), COND_READY)
    if ready is not None and ready.get("status") == "False":
        raise ValueError(f"Provider {name} is not ready: {ready.get('message', '')}")

    region = spec.get("region")
    if not region:
        raise ValueError(f"Provider {name} has no region")

    auth = spec.get("auth", {})
    access_key_ref = auth.get("accessKeySecretRef", {})
    secret_key_ref = auth.get("secretKeySecretRef", {})
    if not access_key_ref.get("name") or not secret_key_ref.get("name"):
        raise ValueError("accessKeySecretRef and secretKeySecretRef are required")

    access_key = get_secret_value(
        core_api, namespace, access_key_ref["name"], access_key_ref.get("key", "access-key")
    )
    secret_key = get_secret_value(
        core_api, namespace, secret_key_ref["name"], secret_key_ref.get("key", "secret-key")
    )

    session_token = None
    session_token_ref = auth.get("sessionTokenSecretRef") or {}
    if session_token_ref.get("name"):
        session_token = get_secret_value(
            core_api, namespace, session_token_ref["name"], session_token_ref.get("key", "session-token")
        )

    return {
        "region": region,
        "access_key": access_key,
        "secret_key": secret_key,
        "session_token": session_token,
        "endpoint": spec.get("endpoint"),
    }


def make_connector(
    custom_api: client.CustomObjectsApi,
    core_api: client.CoreV1Api,
    client_cls: type[AWSResourceClient],
) -> Callable[[ManagedResourceRecord], AWSResourceClient]:
    """Return a function that connects a record to its provider's client.

    Clients are reused per provider while its resolved settings are
    unchanged; rotated credentials build a fresh client. Every failure is
    raised as ClientConnectionError.
    """
    clients: dict[tuple[str, str], tuple[tuple[Any, ...], AWSResourceClient]] = {}
    lock = threading.Lock()

    def client_for(provider_ns: str, provider_name: str, kwargs: dict[str, Any]) -> AWSResourceClient:
        key = (provider_ns, provider_name)
        settings = tuple(sorted(kwargs.items()))
        with lock:
            cached = clients.get(key)
            if cached is not None and cached[0] == settings:
                return cached[1]
            resource_client = client_cls(**kwargs)
            clients[key] = (settings, resource_client)
            return resource_client

    def connect(record: ManagedResourceRecord) -> AWSResourceClient:
        provider_ref = record.provider_ref
        provider_name = provider_ref.get("name")
        if not provider_name:
            raise ClientConnectionError("providerRef.name is required")
        provider_ns = provider_ref.get("namespace") or record.namespace

        try:
            provider_obj = get_provider_with_cache(custom_api, provider_name, provider_ns)
            kwargs = provider_client_kwargs(provider_obj, core_api)
            return client_for(provider_ns, provider_name, kwargs)
        except client.exceptions.ApiException as e:
            if e.status == 404:
                raise ClientConnectionError(
                    f"Provider {provider_ns}/{provider_name} not found"
                ) from e
            raise ClientConnectionError(f"Failed to read provider {provider_ns}/{provider_name}: {e.reason}") from e
        except ValueError as e:
            raise ClientConnectionError(str(e)) from e

    return connect
