"""Custom exceptions and error response schemas."""

from typing import Any, Optional

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """Standardized error response."""

    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[dict[str, Any]] = Field(None, description="Additional context")


class AppError(Exception):
    """Base exception for all app-level errors."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_response(self) -> ErrorDetail:
        """Convert to API response schema."""
        return ErrorDetail(
            code=self.code,
            message=self.message,
            details=self.details if self.details else None,
        )


class ConfigurationError(AppError):
    """Raised when settings or gateway configuration are invalid at startup."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(
            code="CONFIGURATION_ERROR",
            message=message,
            status_code=500,
            details=details,
        )


class SessionVerificationError(AppError):
    """
    Raised when the session token cannot be verified for infrastructure reasons.

    Distinct from an invalid or missing token: the signing key could not be
    obtained. The gateway still treats the request as unauthenticated.
    """

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(
            code="SESSION_VERIFICATION_FAILED",
            message=message,
            status_code=503,
            details=details,
        )


class UnauthorizedError(AppError):
    """Raised when a page requires a session and none is present."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(
            code="UNAUTHORIZED",
            message=message,
            status_code=401,
        )
