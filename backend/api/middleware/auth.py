"""
Session token authentication.

Validates bearer session tokens and extracts user information before
the endpoint's own logic runs.
"""

from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from modules.auth.exceptions import InvalidTokenError, MissingTokenError
from modules.auth.tokens import verify_session
from shared.config import Settings
from shared.models import AuthenticatedUser

from ..dependencies import get_settings_dependency

# Bearer token extractor
bearer_scheme = HTTPBearer(auto_error=False)


class AuthError(HTTPException):
    """Authentication error with consistent format."""
    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings_dependency),
) -> AuthenticatedUser:
    """
    Dependency that requires authentication.

    Use this for endpoints that require a signed-in user. Every way a
    token can fail (bad signature, expired, malformed, server secret unset)
    gets the same 401.

    Usage:
        @router.get("/protected")
        async def protected_route(user: AuthenticatedUser = Depends(get_current_user)):
            return {"email": user.email}
    """
    if credentials is None:
        raise AuthError(MissingTokenError().message)

    user = verify_session(credentials.credentials, settings)
    if user is None:
        raise AuthError(InvalidTokenError().message)
    return user
