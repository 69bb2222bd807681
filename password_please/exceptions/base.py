"""
Base exception classes for the application.

All custom exceptions should inherit from AppError to ensure consistent
error handling across the application via the global exception handler.
"""
from typing import Optional


class AppError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message: Human-readable error message
        code: Machine-readable error code for client handling
        status_code: HTTP status code to return
        details: Additional error details (optional)
    """

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        status_code: int = 500,
        details: Optional[dict] = None
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert exception to dictionary for JSON response"""
        result = {
            "error": self.code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


class ServiceUnavailableError(AppError):
    """Service temporarily unavailable (503)"""

    def __init__(self, message: str = "Service temporarily unavailable"):
        super().__init__(message, "SERVICE_UNAVAILABLE", 503)
