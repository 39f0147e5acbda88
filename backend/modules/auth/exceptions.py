"""
Authentication module exceptions.

These exceptions are raised by the auth module and can be caught
by API error handlers to return appropriate HTTP responses.
"""

from shared.exceptions import (
    AuthenticationError,
    ExternalServiceError,
    NotFoundError,
    ValidationError,
)


class InvalidEmailError(ValidationError):
    """Raised when a magic link is requested for an implausible email."""

    def __init__(self, message: str = "Valid email is required"):
        super().__init__(message, code="INVALID_EMAIL")


class MissingMagicTokenError(ValidationError):
    """Raised when a magic-link verification carries no token."""

    def __init__(self, message: str = "Token is required"):
        super().__init__(message, code="MISSING_MAGIC_TOKEN")


class InvalidMagicTokenError(ValidationError):
    """
    Raised when a magic-link token cannot be redeemed.

    Unknown, already used and expired tokens all raise this same error so
    callers cannot probe which tokens exist.
    """

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message, code="INVALID_MAGIC_TOKEN")


class InvalidTokenError(AuthenticationError):
    """Raised when a session token is invalid, tampered with or expired."""

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message, code="INVALID_TOKEN")


class MissingTokenError(AuthenticationError):
    """Raised when no bearer session token is provided."""

    def __init__(self, message: str = "Authorization required"):
        super().__init__(message, code="MISSING_TOKEN")


class UserNotFoundError(NotFoundError):
    """Raised when no user row exists for an email."""

    def __init__(self, email: str):
        super().__init__(
            "User not found",
            code="USER_NOT_FOUND",
            details={"email": email},
        )


class EmailDeliveryError(ExternalServiceError):
    """Raised when the email provider rejects or fails a send."""

    def __init__(self, reason: str):
        super().__init__(
            "Failed to send email",
            service="resend",
            code="EMAIL_DELIVERY_FAILED",
            details={"reason": reason},
        )
