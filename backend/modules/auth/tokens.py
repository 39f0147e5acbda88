"""
Credential helpers: one-time magic-link tokens and signed session tokens.

Session tokens are HS256 JWTs over {id, email, isPremium}. They are never
stored, so there is no revocation: a leaked token stays valid until `exp`.
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from pydantic import ValidationError as PydanticValidationError

from shared.config import Settings
from shared.exceptions import ConfigurationError
from shared.models import AuthenticatedUser

from .models import User

logger = logging.getLogger(__name__)

ONE_TIME_TOKEN_BYTES = 32  # 256 bits, 64 hex characters
SESSION_ALGORITHM = "HS256"


def new_one_time_token() -> str:
    """Return a random 64-character hex token for a magic link."""
    return secrets.token_hex(ONE_TIME_TOKEN_BYTES)


def issue_session(user: User, settings: Settings) -> str:
    """
    Sign a session token for a user.

    Args:
        user: The user the token is issued to
        settings: Settings providing JWT_SECRET and the session lifetime

    Returns:
        Encoded JWT string

    Raises:
        ConfigurationError: If JWT_SECRET is not set
    """
    if not settings.jwt_secret:
        raise ConfigurationError("jwt_secret")

    now = datetime.now(timezone.utc)
    payload = {
        "id": user.id,
        "email": user.email,
        "isPremium": user.is_premium,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(days=settings.session_ttl_days)).timestamp()),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=SESSION_ALGORITHM)


def verify_session(token: Optional[str], settings: Settings) -> Optional[AuthenticatedUser]:
    """
    Decode a session token.

    Returns the claims as an AuthenticatedUser, or None when the token is
    missing, malformed, tampered with, expired, or cannot be checked because
    JWT_SECRET is unset. Never raises.
    """
    if not token or not settings.jwt_secret:
        return None

    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[SESSION_ALGORITHM],
            options={"require": ["exp", "iat"]},
        )
        return AuthenticatedUser.model_validate(payload)
    except jwt.InvalidTokenError as e:
        logger.debug(f"Rejected session token: {e}")
        return None
    except PydanticValidationError:
        logger.debug("Rejected session token: unexpected claims")
        return None
