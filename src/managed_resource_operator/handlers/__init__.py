"""Handler modules for managed resource CRDs."""

# Import handlers to register them - all handlers register themselves via @kopf decorators
from . import managed  # noqa: F401
