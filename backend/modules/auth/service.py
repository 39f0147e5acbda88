"""
Authentication service implementation.

Passwordless login: a one-time token is emailed as a link, and redeeming
it yields a signed session token.
"""

import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Optional

from starlette.concurrency import run_in_threadpool

from shared.config import Settings
from shared.exceptions import ConfigurationError
from shared.models import AuthenticatedUser

from .exceptions import (
    InvalidEmailError,
    InvalidMagicTokenError,
    MissingMagicTokenError,
    UserNotFoundError,
)
from .interfaces import IAuthService
from .mailer import MagicLinkMailer
from .models import SessionResponse, User, UserStatus
from .repository import MagicTokenRepository, UserRepository
from .tokens import issue_session, new_one_time_token

logger = logging.getLogger(__name__)

# local@domain.tld with no whitespace; deliverability is the mail provider's problem
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def is_plausible_email(email: Optional[str]) -> bool:
    """Check an email address is syntactically plausible."""
    return bool(email) and EMAIL_PATTERN.match(email) is not None


class AuthService(IAuthService):
    """
    Implementation of the magic-link authentication service.

    Repository calls use the synchronous Supabase client, so they are run
    in the threadpool to keep the event loop free.
    """

    def __init__(
        self,
        settings: Settings,
        users: UserRepository,
        tokens: MagicTokenRepository,
        mailer: MagicLinkMailer,
    ):
        self._settings = settings
        self._users = users
        self._tokens = tokens
        self._mailer = mailer

    async def request_magic_link(self, email: Optional[str]) -> None:
        """Issue and email a magic link, creating the user on first request."""
        if not is_plausible_email(email):
            raise InvalidEmailError()

        await run_in_threadpool(self._users.get_or_create, email)

        token = new_one_time_token()
        expires_at = datetime.now(timezone.utc) + timedelta(
            minutes=self._settings.magic_link_ttl_minutes
        )
        await run_in_threadpool(self._tokens.create, email, token, expires_at)

        await self._mailer.send_magic_link(email, token)

    async def verify_magic_link(self, token: Optional[str]) -> SessionResponse:
        """Consume a magic-link token and mint a session token."""
        if not token:
            raise MissingMagicTokenError()

        # Check before consuming so a misconfigured server doesn't burn tokens
        if not self._settings.jwt_secret:
            raise ConfigurationError("jwt_secret")

        consumed = await run_in_threadpool(
            self._tokens.consume, token, datetime.now(timezone.utc)
        )
        if consumed is None:
            raise InvalidMagicTokenError()

        user = await run_in_threadpool(self._users.get_by_email, consumed.email)
        if user is None:
            raise UserNotFoundError(consumed.email)

        logger.info(f"Magic link verified for {user.email}")
        return SessionResponse(
            token=issue_session(user, self._settings),
            user=UserStatus(email=user.email, is_premium=user.is_premium),
        )

    async def get_status(self, user: AuthenticatedUser) -> UserStatus:
        """Read the current premium flag; the token's copy may be stale."""
        stored = await run_in_threadpool(self._users.get_by_email, user.email)
        if stored is None:
            raise UserNotFoundError(user.email)
        return UserStatus(email=stored.email, is_premium=stored.is_premium)

    async def lookup_status(self, email: Optional[str]) -> Optional[User]:
        """Find a user by email for the legacy status check."""
        if not email:
            raise InvalidEmailError("Email is required")
        return await run_in_threadpool(self._users.get_by_email, email)
