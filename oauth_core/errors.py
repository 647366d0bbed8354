"""
Errors
======
Exceptions raised by oauth-core and the user-facing response for store outages.

Authentication and authorization failures are not exceptions: they are
returned as ``Rejected``/``Halt`` values. The exceptions here signal faults
that the host must answer with a 5xx, or programming errors.

CRITICAL: Never expose internal error details to end users.
"""

from typing import Optional
from starlette.responses import JSONResponse
import structlog

logger = structlog.get_logger(__name__)


USER_FRIENDLY_MESSAGE = "We are experiencing a temporary issue. Please try again shortly."


class OAuthCoreError(Exception):
    """Base exception for oauth-core."""


class ConfigurationError(OAuthCoreError):
    """Raised when configuration values cannot be parsed."""


class UnknownOperationError(OAuthCoreError):
    """Raised when an operation id is not registered."""

    def __init__(self, operation_id: str):
        super().__init__(f"Unknown operation `{operation_id}`")
        self.operation_id = operation_id


class DirectoryUnavailableError(OAuthCoreError):
    """
    Raised when the consumer/token/nonce store cannot be reached.

    This is a fault, never an authentication outcome.
    """

    def __init__(self, message: str, store: str = "unknown", cause: Optional[Exception] = None):
        self.message = message
        self.store = store
        self.cause = cause
        super().__init__(f"[{store}] {message}")


def create_unavailable_response(
    internal_code: str = "DIRECTORY_UNAVAILABLE",
    log_message: str = None,
    status_code: int = 503,
) -> JSONResponse:
    """
    Create a user-friendly JSONResponse for store outages.

    Args:
        internal_code: Internal code for debugging
        log_message: Technical message for logs (not shown to the user)
        status_code: HTTP status code

    Returns:
        JSONResponse with a user-friendly message
    """
    if log_message:
        logger.warning("oauth_store_unavailable", code=internal_code, detail=log_message)

    return JSONResponse(
        status_code=status_code,
        content={
            "error": "Service temporarily unavailable",
            "message": USER_FRIENDLY_MESSAGE,
            "code": internal_code,
        }
    )
