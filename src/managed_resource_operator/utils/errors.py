"""Error sanitization utilities to prevent credential leakage in status and logs."""

import re
from typing import Any

# Patterns whose captured value is replaced
SENSITIVE_PATTERNS = [
    r"(access[_\s]?key[_\s]?id[:=\s]+)[A-Z0-9]{16,}",
    r"(secret[_\s]?access[_\s]?key[:=\s]+)[A-Za-z0-9/+=]{40}",
    r"(session[_\s]?token[:=\s]+)[A-Za-z0-9/+=]+",
    r"(master[_\s]?user[_\s]?password[:=\s]+)\S+",
]

# Bare AWS access key IDs
ACCESS_KEY_ID_PATTERN = r"\b(AKIA|ASIA)[A-Z0-9]{16}\b"

# Fields to redact completely
SENSITIVE_FIELDS = {
    "password",
    "secret",
    "credentials",
    "token",
    "client_key",
    "private_key",
}


def sanitize_error_message(message: str) -> str:
    """Sanitize error message to remove sensitive information.

    Args:
        message: Original error message

    Returns:
        Sanitized error message with sensitive data redacted
    """
    sanitized = message

    for pattern in SENSITIVE_PATTERNS:
        sanitized = re.sub(pattern, r"\1[REDACTED]", sanitized, flags=re.IGNORECASE)

    sanitized = re.sub(ACCESS_KEY_ID_PATTERN, "[REDACTED]", sanitized)

    for field in SENSITIVE_FIELDS:
        sanitized = re.sub(
            rf"\b{field}[:=\s]+([^\s,;\)]+)",
            f"{field}: [REDACTED]",
            sanitized,
            flags=re.IGNORECASE,
        )

    return sanitized


def sanitize_exception(error: BaseException) -> str:
    """Sanitize an exception message, falling back to the exception type name."""
    error_msg = str(error) or type(error).__name__
    return sanitize_error_message(error_msg)


def sanitize_dict(data: dict[str, Any], sensitive_keys: set[str] | None = None) -> dict[str, Any]:
    """Sanitize dictionary by redacting sensitive fields.

    Args:
        data: Dictionary to sanitize
        sensitive_keys: Additional keys to redact (merged with SENSITIVE_FIELDS)

    Returns:
        Sanitized dictionary with sensitive values redacted
    """
    all_sensitive = SENSITIVE_FIELDS | (sensitive_keys or set())
    sanitized: dict[str, Any] = {}

    for key, value in data.items():
        key_lower = key.lower()
        if any(sensitive in key_lower for sensitive in all_sensitive):
            sanitized[key] = "[REDACTED]"
        elif isinstance(value, dict):
            sanitized[key] = sanitize_dict(value, sensitive_keys)
        elif isinstance(value, str):
            sanitized[key] = sanitize_error_message(value)
        else:
            sanitized[key] = value

    return sanitized
