"""Domain exceptions raised by services and translated at the API boundary."""

from typing import Any, Dict, Optional


class MessagingServiceError(Exception):
    """Base exception for the messaging service."""

    status_code = 500

    def __init__(
        self,
        message: str,
        error_code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(MessagingServiceError):
    """Raised when an identifier does not resolve."""

    status_code = 404

    def __init__(self, resource: str, identifier: Any):
        message = f"{resource} not found"
        super().__init__(
            message,
            "NOT_FOUND",
            {"resource": resource, "identifier": str(identifier)},
        )


class ForbiddenError(MessagingServiceError):
    """Raised when the principal may not act on a resource."""

    status_code = 403

    def __init__(self, message: str = "Access denied"):
        super().__init__(message, "FORBIDDEN")


class ValidationError(MessagingServiceError):
    """Raised when input validation fails."""

    status_code = 400

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "VALIDATION_ERROR", details)


class ConflictError(MessagingServiceError):
    """Raised when there's a conflict with existing data."""

    status_code = 409

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "CONFLICT", details)
