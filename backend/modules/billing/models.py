"""
Billing module data models.

These models define the data structures used by the billing module
and exposed to other modules through the interface.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class EventKind(str, Enum):
    """Stripe event types the reconciler acts on or acknowledges."""

    CHECKOUT_COMPLETED = "checkout.session.completed"
    DISPUTE_CREATED = "charge.dispute.created"
    DISPUTE_CLOSED = "charge.dispute.closed"
    CHARGE_REFUNDED = "charge.refunded"
    REFUND_CREATED = "refund.created"

    @classmethod
    def from_type(cls, event_type: str) -> Optional["EventKind"]:
        """Map a Stripe event type to a kind, or None if unhandled."""
        try:
            return cls(event_type)
        except ValueError:
            return None


class LookupField(str, Enum):
    """User columns that identify the account an event applies to."""

    EMAIL = "email"
    CHARGE_ID = "stripe_charge_id"
    PAYMENT_INTENT_ID = "stripe_payment_intent_id"


class PremiumChange(BaseModel):
    """
    The state an event drives a user's premium flag to.

    Produced by the per-event resolvers and applied by one shared step.
    When the primary lookup matches nothing, the fallback (if any) is tried.
    """

    model_config = {"frozen": True}

    lookup_field: LookupField
    lookup_value: str
    is_premium: bool
    fallback_field: Optional[LookupField] = None
    fallback_value: Optional[str] = None
    extra: dict[str, str] = Field(default_factory=dict)

    def updates(self) -> dict[str, Any]:
        """Column values to write to the matched user row."""
        return {"is_premium": self.is_premium, **self.extra}


class EventData(BaseModel):
    """The `data` member of a Stripe event envelope."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    payload: dict[str, Any] = Field(default_factory=dict, alias="object")


class StripeEvent(BaseModel):
    """A verified Stripe event envelope."""

    model_config = ConfigDict(extra="ignore")

    id: str
    type: str
    data: EventData = Field(default_factory=EventData)

    @property
    def object(self) -> dict[str, Any]:
        """The event's subject (checkout session, charge, dispute, ...)."""
        return self.data.payload


class CheckoutSession(BaseModel):
    """
    Stripe checkout session info.

    Returned when initiating the premium purchase.
    """

    session_id: str = Field(..., description="Stripe checkout session ID")
    url: str = Field(..., description="Checkout URL to redirect user to")


class CheckoutResponse(BaseModel):
    """API response for POST /checkout/create."""

    url: str = Field(..., description="Hosted checkout URL")


class WebhookAck(BaseModel):
    """API response acknowledging a webhook delivery."""

    received: bool = True
