"""
Authentication module.

Handles magic-link login, session token signing and verification,
and the user/magic-token tables.

Public API:
- IAuthService: Interface for auth operations
- IUserStore: User persistence used by other modules
- User, MagicToken, UserStatus, SessionResponse: Models
- new_one_time_token, issue_session, verify_session: Credential helpers
- Auth exceptions: InvalidMagicTokenError, InvalidTokenError, etc.
"""

from .interfaces import IAuthService, IUserStore
from .models import MagicToken, SessionResponse, User, UserStatus
from .tokens import issue_session, new_one_time_token, verify_session
from .exceptions import (
    EmailDeliveryError,
    InvalidEmailError,
    InvalidMagicTokenError,
    InvalidTokenError,
    MissingMagicTokenError,
    MissingTokenError,
    UserNotFoundError,
)

__all__ = [
    # Interfaces
    "IAuthService",
    "IUserStore",
    # Models
    "MagicToken",
    "SessionResponse",
    "User",
    "UserStatus",
    # Credentials
    "issue_session",
    "new_one_time_token",
    "verify_session",
    # Exceptions
    "EmailDeliveryError",
    "InvalidEmailError",
    "InvalidMagicTokenError",
    "InvalidTokenError",
    "MissingMagicTokenError",
    "MissingTokenError",
    "UserNotFoundError",
]
