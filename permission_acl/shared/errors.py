"""
Shared error handling for the permission ACL engine.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response format."""

    code: str
    message: str
    details: Dict[str, Any] = {}


class AccessLayerException(Exception):
    """Base exception for the ACL engine."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            code=self.code,
            message=self.message,
            details=self.details
        )


class ConfigurationError(AccessLayerException):
    """Malformed rule or uncompilable pattern in the policy list.

    Deployment misconfiguration, never a per-request outcome: hosts should
    stop processing requests instead of allowing or denying.
    """

    def __init__(self, message: str = "Invalid policy configuration", details: Optional[Dict[str, Any]] = None):
        super().__init__("CONFIGURATION_ERROR", message, details)


class ResolutionError(AccessLayerException):
    """An external resolver could not produce subject or resource facts."""

    def __init__(self, resolver: str, message: str = "Resolution failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("RESOLUTION_ERROR", f"{resolver}: {message}", details)
