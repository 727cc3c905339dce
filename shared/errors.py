"""
Shared error handling for the auth service.

Three error kinds reach callers: invalid input (400), unauthorized (401) and
internal failure (500). Unauthorized and internal failures carry an internal
``reason`` for logs and metrics; their responses never include it.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel

from .logging import request_id_var


class ErrorResponse(BaseModel):
    """Standard error response format."""

    request_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = {}


class AuthServiceException(Exception):
    """Base exception for auth service errors."""

    status_code = 500
    public_message: Optional[str] = None

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        if self.public_message is not None:
            return ErrorResponse(
                request_id=request_id_var.get(),
                code=self.code,
                message=self.public_message,
            )

        return ErrorResponse(
            request_id=request_id_var.get(),
            code=self.code,
            message=self.message,
            details=self.details
        )


class InvalidInputError(AuthServiceException):
    """Missing or empty required field. Safe to expose."""

    status_code = 400

    def __init__(self, message: str = "Invalid input", details: Optional[Dict[str, Any]] = None):
        super().__init__("INVALID_INPUT", message, details)


class UnauthorizedError(AuthServiceException):
    """Credential rejected. The response is identical whatever the reason."""

    status_code = 401
    public_message = "unauthorized"

    def __init__(self, reason: Any, message: str = "Unauthorized", details: Optional[Dict[str, Any]] = None):
        self.reason = reason
        super().__init__("UNAUTHORIZED", message, details)


class InternalFailureError(AuthServiceException):
    """Clock or cryptographic primitive failure on the service side."""

    status_code = 500
    public_message = "internal error"

    def __init__(self, reason: str, message: str = "Internal failure", details: Optional[Dict[str, Any]] = None):
        self.reason = reason
        super().__init__("INTERNAL_ERROR", message, details)
