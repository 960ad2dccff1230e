"""RDS database instance client."""

from __future__ import annotations

import json
import logging
from typing import Any

from ...builders.instance import create_instance_request_from_spec
from ...constants import KIND_RDS_INSTANCE
from ...models import ConnectionDetails, ObservedResource
from ..errors import BadRequestError, NotFoundError
from .base import AWSResourceClient

logger = logging.getLogger(__name__)

INSTANCE_STATE_AVAILABLE = "available"


class RDSInstanceClient(AWSResourceClient):
    """Provisions RDS database instances with RDS-managed master passwords."""

    kind = KIND_RDS_INSTANCE
    name_prefix = "rds-"
    service_name = "rds"

    def create(self, name: str, spec: dict[str, Any]) -> ObservedResource:
        """Create a database instance named ``name`` in ``spec.region``."""
        try:
            request = create_instance_request_from_spec(name, spec)
        except ValueError as e:
            raise BadRequestError(str(e)) from e

        rds = self.client_for(self.service_name, spec.get("region"))
        response = self.call("create", lambda: rds.create_db_instance(**request))
        logger.info("Requested creation of RDS instance %s", name)
        instance = response.get("DBInstance", {})
        return ObservedResource(
            state=instance.get("DBInstanceStatus", ""),
            provider_id=instance.get("DBInstanceArn", ""),
        )

    def get(self, location: str | None, name: str) -> ObservedResource:
        """Describe the instance; once available, read the master password too."""
        rds = self.client_for(self.service_name, location)
        response = self.call("get", lambda: rds.describe_db_instances(DBInstanceIdentifier=name))
        instances = response.get("DBInstances", [])
        if not instances:
            raise NotFoundError(f"DB instance {name} not found", "DBInstanceNotFound")

        instance = instances[0]
        state = instance.get("DBInstanceStatus", "")
        observed = ObservedResource(
            state=state,
            ready=state == INSTANCE_STATE_AVAILABLE,
            provider_id=instance.get("DBInstanceArn", ""),
        )
        if observed.ready:
            observed.connection = ConnectionDetails(
                endpoint=instance.get("Endpoint", {}).get("Address", ""),
                username=instance.get("MasterUsername", ""),
                password=self._master_password(location, instance),
            )
        return observed

    def delete(self, location: str | None, name: str) -> None:
        rds = self.client_for(self.service_name, location)
        self.call(
            "delete",
            lambda: rds.delete_db_instance(
                DBInstanceIdentifier=name,
                SkipFinalSnapshot=True,
                DeleteAutomatedBackups=True,
            ),
        )
        logger.info("Requested deletion of RDS instance %s", name)

    def _master_password(self, location: str | None, instance: dict[str, Any]) -> str:
        secret_arn = instance.get("MasterUserSecret", {}).get("SecretArn")
        if not secret_arn:
            return ""
        secretsmanager = self.client_for("secretsmanager", location)
        response = self.call("get", lambda: secretsmanager.get_secret_value(SecretId=secret_arn))
        try:
            return json.loads(response.get("SecretString", "{}")).get("password", "")
        except json.JSONDecodeError:
            return ""
