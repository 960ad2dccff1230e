"""Classification of botocore errors into the external error taxonomy."""

from __future__ import annotations

from botocore.exceptions import BotoCoreError, ClientError

from ..errors import (
    AlreadyExistsError,
    BadRequestError,
    ExternalAPIError,
    NotFoundError,
    TransientError,
)

NOT_FOUND_CODES = {
    "ResourceNotFoundException",
    "DBInstanceNotFound",
    "DBInstanceNotFoundFault",
    "NotFoundException",
}

ALREADY_EXISTS_CODES = {
    "DBInstanceAlreadyExists",
    "DBInstanceAlreadyExistsFault",
    "ResourceAlreadyExistsException",
}

BAD_REQUEST_CODES = {
    "InvalidParameterException",
    "InvalidParameterValue",
    "InvalidParameterCombination",
    "InvalidRequestException",
    "UnsupportedAvailabilityZoneException",
    "ValidationException",
    "InvalidVPCNetworkStateFault",
    "InvalidSubnet",
}

THROTTLING_CODES = {
    "Throttling",
    "ThrottlingException",
    "TooManyRequestsException",
    "RequestLimitExceeded",
}


def error_code(error: ClientError) -> str:
    return error.response.get("Error", {}).get("Code", "")


def classify_client_error(error: ClientError, operation: str) -> ExternalAPIError:
    """Map a botocore ClientError to an ExternalAPIError subclass.

    Args:
        error: The error raised by boto3
        operation: The client operation that failed ("create", "get", "delete")

    Returns:
        The classified error, chained from the original by the caller
    """
    code = error_code(error)
    message = error.response.get("Error", {}).get("Message") or str(error)
    status = error.response.get("ResponseMetadata", {}).get("HTTPStatusCode")

    if code in NOT_FOUND_CODES:
        return NotFoundError(message, code)
    if code in ALREADY_EXISTS_CODES:
        return AlreadyExistsError(message, code)
    # EKS reports a name collision on create as ResourceInUseException; on
    # delete the same code means the cluster still has attached resources.
    if code == "ResourceInUseException" and operation == "create":
        return AlreadyExistsError(message, code)
    if code in BAD_REQUEST_CODES:
        return BadRequestError(message, code)
    if code in THROTTLING_CODES:
        return TransientError(message, code)
    if status == 400 and code not in ("ResourceInUseException", "InvalidDBInstanceState"):
        return BadRequestError(message, code)
    return TransientError(message, code or None)


def classify_error(error: Exception, operation: str) -> ExternalAPIError:
    """Map any SDK-level exception to an ExternalAPIError."""
    if isinstance(error, ExternalAPIError):
        return error
    if isinstance(error, ClientError):
        return classify_client_error(error, operation)
    if isinstance(error, BotoCoreError):
        return TransientError(str(error))
    return TransientError(str(error) or type(error).__name__)
