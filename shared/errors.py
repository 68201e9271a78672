"""
Shared error handling for the admin console access gateway.

Every error renders as the same ``{success, message}`` envelope the
browser-side API client understands; the HTTP status travels on the
exception itself.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response format."""

    success: bool = False
    message: str


class AccessLayerException(Exception):
    """Base exception for gateway handlers."""

    status_code: int = 500

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ):
        self.code = code
        self.message = message
        self.details = details or {}
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(message=self.message)


class ValidationError(AccessLayerException):
    """Malformed client input, rejected before any upstream call."""

    status_code = 400

    def __init__(self, message: str = "Validation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("VALIDATION_ERROR", message, details)


class AuthenticationError(AccessLayerException):
    """Upstream identity service rejected the credentials."""

    status_code = 401

    def __init__(
        self,
        message: str = "Authentication failed",
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__("AUTHENTICATION_ERROR", message, details, status_code)


class AuthorizationError(AccessLayerException):
    """Request lacks the session credential."""

    status_code = 401

    def __init__(self, message: str = "Authentication required. Please log in.", details: Optional[Dict[str, Any]] = None):
        super().__init__("AUTHORIZATION_ERROR", message, details)


class TransportError(AccessLayerException):
    """Upstream could not be reached."""

    status_code = 502

    def __init__(self, message: str = "Proxy request failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("TRANSPORT_ERROR", message, details)


class UnknownError(AccessLayerException):
    """Unexpected failure caught at a handler boundary."""

    status_code = 500

    def __init__(self, message: str = "Internal server error", details: Optional[Dict[str, Any]] = None):
        super().__init__("UNKNOWN_ERROR", message, details)
