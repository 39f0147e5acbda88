"""
Authentication module interface.

Other modules should depend on these protocols, not the concrete
implementations. The billing module updates premium flags through
IUserStore without knowing about Supabase.
"""

from typing import Any, Optional, Protocol, runtime_checkable

from shared.models import AuthenticatedUser

from .models import SessionResponse, User, UserStatus


@runtime_checkable
class IUserStore(Protocol):
    """Persistence operations on user rows needed outside the auth module."""

    def get_by_email(self, email: str) -> Optional[User]:
        """Return the user with this exact email, or None."""
        ...

    def update_by(self, column: str, value: str, data: dict[str, Any]) -> int:
        """Update rows matching column == value and return the row count."""
        ...


@runtime_checkable
class IAuthService(Protocol):
    """
    Interface for magic-link authentication.

    This protocol defines the contract that the auth module exposes
    to the API layer. Implementations must provide all these methods.
    """

    async def request_magic_link(self, email: Optional[str]) -> None:
        """
        Create the user if needed, persist a one-time token and email it.

        Raises:
            InvalidEmailError: If the email is missing or implausible
            EmailDeliveryError: If the email could not be sent
        """
        ...

    async def verify_magic_link(self, token: Optional[str]) -> SessionResponse:
        """
        Redeem a one-time token for a session token.

        Raises:
            MissingMagicTokenError: If no token was given
            InvalidMagicTokenError: If the token is unknown, used or expired
            UserNotFoundError: If the token's user no longer exists
        """
        ...

    async def get_status(self, user: AuthenticatedUser) -> UserStatus:
        """
        Return the stored premium status for the session's email.

        Raises:
            UserNotFoundError: If the user row does not exist
        """
        ...

    async def lookup_status(self, email: Optional[str]) -> Optional[User]:
        """
        Look up a user by email for the legacy status check.

        Raises:
            InvalidEmailError: If no email was given
        """
        ...
