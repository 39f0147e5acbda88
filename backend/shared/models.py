"""
Shared data models used across modules.

These models are shared infrastructure, not business logic.
Module-specific models should stay in their respective module directories.
"""

from pydantic import BaseModel, ConfigDict, Field


class AuthenticatedUser(BaseModel):
    """
    Represents an authenticated user in the system.

    Populated from verified session token claims and made available
    to route handlers via dependency injection.

    `is_premium` is the value at token issuance. It can be stale: payment
    events change the stored flag after the token was signed, so anything
    that gates on premium status must re-read the users table.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",  # Ignore registered claims (exp, iat)
        populate_by_name=True,
    )

    id: int = Field(..., description="User ID")
    email: str = Field(..., description="User's email address")
    is_premium: bool = Field(
        default=False,
        alias="isPremium",
        description="Premium flag at token issuance",
    )
