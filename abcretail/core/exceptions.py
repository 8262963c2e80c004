"""
Exception hierarchy for the ABC Retail storage console.

Remote failures other than the absorbed "not found" cases surface as
StorageOperationError, carrying the failed operation and resource.
"""

from typing import Any, Dict, Optional


class StorageConsoleError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code
        details: Additional context
    """

    error_code: str = "StorageConsoleError"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.error_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format for error pages and logs."""
        return {
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details
            }
        }


class ConfigurationError(StorageConsoleError):
    """Raised when required configuration is missing or invalid."""
    error_code = "ConfigurationError"


class StorageOperationError(StorageConsoleError):
    """Raised when a remote storage call fails for any reason other than not-found."""
    error_code = "StorageOperationFailed"

    def __init__(
        self,
        operation: str,
        resource: str,
        reason: str,
        status_code: Optional[int] = None,
    ):
        message = f"{operation} on '{resource}' failed: {reason}"
        details = {"operation": operation, "resource": resource}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message, details=details)
        self.operation = operation
        self.resource = resource
        self.status_code = status_code


class BlobCopyFailedError(StorageOperationError):
    """Raised when the server-side copy behind a blob rename does not succeed."""
    error_code = "BlobCopyFailed"
