"""Builder for RDS database instance create requests."""

from __future__ import annotations

from typing import Any

DEFAULT_ENGINE = "postgres"
DEFAULT_MASTER_USERNAME = "dbadmin"
DEFAULT_ALLOCATED_STORAGE_GB = 20


def create_instance_request_from_spec(name: str, spec: dict[str, Any]) -> dict[str, Any]:
    """Create keyword arguments for ``rds.create_db_instance`` from an RDSInstance spec.

    The master password is generated and stored by RDS in Secrets Manager, so
    it never passes through the operator's request or the record.

    Args:
        name: External instance identifier
        spec: RDSInstance CRD spec

    Returns:
        Keyword arguments for the RDS API

    Raises:
        ValueError: If required fields are missing or malformed
    """
    instance_class = spec.get("instanceClass")
    if not instance_class:
        raise ValueError("instanceClass is required")

    try:
        allocated_storage = int(spec.get("allocatedStorage", DEFAULT_ALLOCATED_STORAGE_GB))
    except (TypeError, ValueError) as e:
        raise ValueError("allocatedStorage must be an integer number of GiB") from e
    if allocated_storage <= 0:
        raise ValueError("allocatedStorage must be positive")

    request: dict[str, Any] = {
        "DBInstanceIdentifier": name,
        "DBInstanceClass": instance_class,
        "Engine": spec.get("engine", DEFAULT_ENGINE),
        "AllocatedStorage": allocated_storage,
        "MasterUsername": spec.get("masterUsername", DEFAULT_MASTER_USERNAME),
        "ManageMasterUserPassword": True,
        "PubliclyAccessible": bool(spec.get("publiclyAccessible", False)),
    }

    if spec.get("engineVersion"):
        request["EngineVersion"] = str(spec["engineVersion"])

    if spec.get("dbSubnetGroupName"):
        request["DBSubnetGroupName"] = spec["dbSubnetGroupName"]

    if spec.get("vpcSecurityGroupIds"):
        request["VpcSecurityGroupIds"] = list(spec["vpcSecurityGroupIds"])

    tags = spec.get("tags")
    if tags:
        request["Tags"] = [{"Key": str(k), "Value": str(v)} for k, v in tags.items()]

    return request
