"""
Authentication module data models.

These models define the data structures used by the auth module
and exposed to other modules through the interface.

Response models use camelCase aliases (`isPremium`) because the browser
extension reads those keys; FastAPI serializes response models by alias.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    """A row of the users table."""

    model_config = ConfigDict(extra="ignore")

    id: int = Field(..., description="Surrogate user ID")
    email: str = Field(..., description="Email address, unique and case-sensitive")
    is_premium: bool = Field(default=False, description="Premium entitlement flag")
    stripe_charge_id: Optional[str] = Field(
        None,
        description="Charge of the last completed checkout",
    )
    stripe_payment_intent_id: Optional[str] = Field(
        None,
        description="Payment intent of the last completed checkout",
    )
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class MagicToken(BaseModel):
    """A row of the magic_tokens table."""

    model_config = ConfigDict(extra="ignore")

    id: int
    email: str
    token: str
    expires_at: datetime
    used: bool = False
    created_at: Optional[datetime] = None


class MagicLinkRequest(BaseModel):
    """Request body for POST /auth/request."""

    # Validated by the service so a bad value is a 400, not a 422
    email: Optional[str] = None


class MagicLinkResponse(BaseModel):
    """Response for POST /auth/request."""

    success: bool = True


class VerifyTokenRequest(BaseModel):
    """Request body for POST /auth/verify."""

    token: Optional[str] = None


class UserStatus(BaseModel):
    """A user's current premium standing, read from the store."""

    model_config = ConfigDict(populate_by_name=True)

    email: str
    is_premium: bool = Field(..., alias="isPremium")


class SessionResponse(BaseModel):
    """Response for POST /auth/verify."""

    token: str = Field(..., description="Signed session token (bearer credential)")
    user: UserStatus


class CheckStatusRequest(BaseModel):
    """Request body for the legacy POST /check-status endpoint."""

    email: Optional[str] = None


class CheckStatusResponse(BaseModel):
    """Response for the legacy POST /check-status endpoint."""

    active: bool
    status: Optional[str] = None
