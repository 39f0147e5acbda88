"""
Authentication API endpoints.

Magic-link login plus the legacy unauthenticated status lookup.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_auth_service, get_settings_dependency
from api.middleware.auth import get_current_user
from shared.config import Settings
from shared.exceptions import ConfigurationError
from shared.models import AuthenticatedUser

from .exceptions import (
    EmailDeliveryError,
    InvalidEmailError,
    InvalidMagicTokenError,
    MissingMagicTokenError,
    UserNotFoundError,
)
from .interfaces import IAuthService
from .models import (
    CheckStatusRequest,
    CheckStatusResponse,
    MagicLinkRequest,
    MagicLinkResponse,
    SessionResponse,
    UserStatus,
    VerifyTokenRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()
legacy_router = APIRouter()


@router.post("/request", response_model=MagicLinkResponse)
async def request_magic_link(
    request: MagicLinkRequest,
    service: IAuthService = Depends(get_auth_service),
) -> MagicLinkResponse:
    """
    Email a sign-in link.

    Creates the user on first request.
    """
    try:
        await service.request_magic_link(request.email)
    except InvalidEmailError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except EmailDeliveryError:
        raise HTTPException(status_code=500, detail="Failed to send email")
    except ConfigurationError as e:
        logger.error(e.message)
        raise HTTPException(status_code=500, detail="Failed to send verification email")
    return MagicLinkResponse(success=True)


@router.post("/verify", response_model=SessionResponse)
async def verify_magic_link(
    request: VerifyTokenRequest,
    service: IAuthService = Depends(get_auth_service),
) -> SessionResponse:
    """
    Redeem a magic-link token for a session token.

    A token can be redeemed once, within 15 minutes of issue.
    """
    try:
        return await service.verify_magic_link(request.token)
    except (MissingMagicTokenError, InvalidMagicTokenError) as e:
        raise HTTPException(status_code=400, detail=e.message)
    except UserNotFoundError:
        raise HTTPException(status_code=400, detail="User not found")
    except ConfigurationError as e:
        logger.error(e.message)
        raise HTTPException(status_code=500, detail="Verification failed")


@router.get("/me", response_model=UserStatus)
async def get_me(
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAuthService = Depends(get_auth_service),
) -> UserStatus:
    """
    Get the current user's premium status.

    Requires authentication. Always read from the database.
    """
    try:
        return await service.get_status(user)
    except UserNotFoundError:
        raise HTTPException(status_code=404, detail="User not found")


@legacy_router.post("/check-status", response_model=CheckStatusResponse, response_model_exclude_none=True)
async def check_status(
    request: CheckStatusRequest,
    settings: Settings = Depends(get_settings_dependency),
    service: IAuthService = Depends(get_auth_service),
) -> CheckStatusResponse:
    """
    Legacy premium lookup by email, without authentication.

    Older extension builds poll this. It reveals premium status for any
    email, so it can be switched off with ENABLE_LEGACY_CHECK_STATUS=false.
    """
    if not settings.enable_legacy_check_status:
        raise HTTPException(status_code=404, detail="Not Found")

    try:
        user = await service.lookup_status(request.email)
    except InvalidEmailError as e:
        raise HTTPException(status_code=400, detail=e.message)

    if user is None:
        return CheckStatusResponse(active=False, status="User not found")
    return CheckStatusResponse(active=user.is_premium)
