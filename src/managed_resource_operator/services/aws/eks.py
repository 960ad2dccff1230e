"""EKS cluster client."""

from __future__ import annotations

import base64
import binascii
import logging
from typing import Any

from ...builders.cluster import create_cluster_request_from_spec
from ...constants import KIND_EKS_CLUSTER
from ...models import ConnectionDetails, ObservedResource
from ..errors import BadRequestError
from .base import AWSResourceClient

logger = logging.getLogger(__name__)

CLUSTER_STATE_ACTIVE = "ACTIVE"


def _decode_ca(data: str | None) -> bytes:
    if not data:
        return b""
    try:
        return base64.b64decode(data)
    except (binascii.Error, ValueError):
        return data.encode("utf-8")


class EKSClusterClient(AWSResourceClient):
    """Provisions EKS control planes."""

    kind = KIND_EKS_CLUSTER
    name_prefix = "eks-"
    service_name = "eks"

    def create(self, name: str, spec: dict[str, Any]) -> ObservedResource:
        """Create a cluster named ``name`` in ``spec.region``."""
        try:
            request = create_cluster_request_from_spec(name, spec)
        except ValueError as e:
            raise BadRequestError(str(e)) from e

        eks = self.client_for(self.service_name, spec.get("region"))
        response = self.call("create", lambda: eks.create_cluster(**request))
        logger.info("Requested creation of EKS cluster %s", name)
        return self._observe(response.get("cluster", {}))

    def get(self, location: str | None, name: str) -> ObservedResource:
        """Describe the cluster and derive its connection details once ACTIVE."""
        eks = self.client_for(self.service_name, location)
        response = self.call("get", lambda: eks.describe_cluster(name=name))
        return self._observe(response.get("cluster", {}))

    def delete(self, location: str | None, name: str) -> None:
        eks = self.client_for(self.service_name, location)
        self.call("delete", lambda: eks.delete_cluster(name=name))
        logger.info("Requested deletion of EKS cluster %s", name)

    def _observe(self, cluster: dict[str, Any]) -> ObservedResource:
        state = cluster.get("status", "")
        ready = state == CLUSTER_STATE_ACTIVE
        connection = None
        if ready:
            # EKS authenticates with IAM tokens; there is no static user or client certificate.
            connection = ConnectionDetails(
                endpoint=cluster.get("endpoint", ""),
                ca_certificate=_decode_ca(cluster.get("certificateAuthority", {}).get("data")),
            )
        return ObservedResource(
            state=state,
            ready=ready,
            provider_id=cluster.get("arn", ""),
            connection=connection,
        )
