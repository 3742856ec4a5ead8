"""Custom exception hierarchy for the QuoteCraft API."""

from typing import Any


class QuoteCraftError(Exception):
    """Base exception for all QuoteCraft API errors."""

    status_code: int = 500
    error_code: str = "INTERNAL_ERROR"
    message: str = "An internal error occurred"

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message or self.__class__.message
        self.details = details or {}
        super().__init__(self.message)


# Authentication Errors (401)


class AuthenticationError(QuoteCraftError):
    """Base authentication error."""

    status_code = 401
    error_code = "AUTH_ERROR"
    message = "Authentication failed"


class InvalidAPIKeyError(AuthenticationError):
    """Invalid or unknown API key."""

    error_code = "AUTH_INVALID_KEY"
    message = "Invalid API key provided"


class MissingCredentialsError(AuthenticationError):
    """No credentials provided."""

    error_code = "AUTH_MISSING_CREDENTIALS"
    message = "No authentication credentials provided"


# Authorization Errors (403)


class AuthorizationError(QuoteCraftError):
    """Base authorization error."""

    status_code = 403
    error_code = "AUTH_FORBIDDEN"
    message = "Access denied"


class PermissionDeniedError(AuthorizationError):
    """User doesn't own the resource."""

    error_code = "AUTH_PERMISSION_DENIED"
    message = "You don't have permission to access this resource"


class QuotaExceededError(QuoteCraftError):
    """Monthly quote quota is used up."""

    status_code = 429
    error_code = "QUOTA_EXCEEDED"
    message = "You have reached your monthly quote quota"

    def __init__(
        self,
        limit: int,
        used: int,
        reset_at: str | None = None,
        upgrade_url: str | None = None,
    ):
        details: dict[str, Any] = {
            "quota_type": "monthly_quotes",
            "limit": limit,
            "used": used,
        }
        if reset_at:
            details["reset_at"] = reset_at
        if upgrade_url:
            details["upgrade_url"] = upgrade_url
        super().__init__(
            message=(
                f"Monthly quote quota reached ({used}/{limit}). "
                "Upgrade your plan or try again next month."
            ),
            details=details,
        )


# Validation Errors (400)


class ValidationError(QuoteCraftError):
    """Base validation error."""

    status_code = 400
    error_code = "VALIDATION_ERROR"
    message = "Validation failed"


class InvalidStatusTransitionError(ValidationError):
    """Requested status change is not allowed from the current status."""

    error_code = "INVALID_STATUS_TRANSITION"
    message = "Invalid quote status transition"

    def __init__(self, quote_id: str, from_status: str, to_status: str):
        super().__init__(
            message=f"Cannot change quote status from '{from_status}' to '{to_status}'",
            details={
                "quote_id": quote_id,
                "from_status": from_status,
                "to_status": to_status,
            },
        )


# Resource Not Found Errors (404)


class QuoteNotFoundError(QuoteCraftError):
    """Quote not found."""

    status_code = 404
    error_code = "QUOTE_NOT_FOUND"
    message = "Quote not found"

    def __init__(self, quote_id: str):
        super().__init__(
            message=f"Quote '{quote_id}' not found",
            details={"quote_id": quote_id},
        )


class UserNotFoundError(QuoteCraftError):
    """User not found."""

    status_code = 404
    error_code = "USER_NOT_FOUND"
    message = "User not found"

    def __init__(self, user_id: str):
        super().__init__(
            message=f"User '{user_id}' not found",
            details={"user_id": user_id},
        )


# Conflict Errors (409)


class QuoteConflictError(QuoteCraftError):
    """Quote status changed while an update was being applied."""

    status_code = 409
    error_code = "QUOTE_CONFLICT"
    message = "The quote was changed by another request"

    def __init__(self, quote_id: str, expected_status: str, current_status: str):
        super().__init__(
            message=(
                f"Quote '{quote_id}' is now '{current_status}', expected '{expected_status}'"
            ),
            details={
                "quote_id": quote_id,
                "expected_status": expected_status,
                "current_status": current_status,
            },
        )


class EmailAlreadyRegisteredError(QuoteCraftError):
    """Email is already used by another account."""

    status_code = 409
    error_code = "EMAIL_ALREADY_REGISTERED"
    message = "An account with this email already exists"

    def __init__(self, email: str):
        super().__init__(details={"email": email})


# Internal Errors (500)


class InternalError(QuoteCraftError):
    """Base internal error."""

    status_code = 500
    error_code = "INTERNAL_ERROR"
    message = "An internal error occurred"


class StorageError(InternalError):
    """Storage backend failed."""

    error_code = "STORAGE_ERROR"
    message = "The storage backend failed to complete the operation"
