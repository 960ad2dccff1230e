"""Builder for EKS cluster create requests."""

from __future__ import annotations

from typing import Any


def create_cluster_request_from_spec(name: str, spec: dict[str, Any]) -> dict[str, Any]:
    """Create keyword arguments for ``eks.create_cluster`` from an EKSCluster spec.

    Args:
        name: External cluster name
        spec: EKSCluster CRD spec

    Returns:
        Keyword arguments for the EKS API

    Raises:
        ValueError: If required fields are missing or malformed
    """
    role_arn = spec.get("roleArn")
    if not role_arn:
        raise ValueError("roleArn is required")

    vpc = spec.get("resourcesVpcConfig") or {}
    subnet_ids = vpc.get("subnetIds") or []
    if len(subnet_ids) < 2:
        raise ValueError("resourcesVpcConfig.subnetIds must list at least two subnets")

    vpc_config: dict[str, Any] = {
        "subnetIds": list(subnet_ids),
        "endpointPublicAccess": vpc.get("endpointPublicAccess", True),
        "endpointPrivateAccess": vpc.get("endpointPrivateAccess", False),
    }
    if vpc.get("securityGroupIds"):
        vpc_config["securityGroupIds"] = list(vpc["securityGroupIds"])

    request: dict[str, Any] = {
        "name": name,
        "roleArn": role_arn,
        "resourcesVpcConfig": vpc_config,
    }

    if spec.get("version"):
        request["version"] = str(spec["version"])

    tags = spec.get("tags")
    if tags:
        request["tags"] = {str(k): str(v) for k, v in tags.items()}

    return request
