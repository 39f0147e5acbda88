"""
Billing module interface.

The API layer depends on these protocols, not the concrete implementations,
so route tests can swap in mocks.
"""

from typing import Optional, Protocol, runtime_checkable

from shared.models import AuthenticatedUser

from .models import PremiumChange, StripeEvent


@runtime_checkable
class ICheckoutService(Protocol):
    """Interface for starting a premium purchase."""

    async def create_checkout(self, user: AuthenticatedUser) -> str:
        """
        Create a hosted checkout session for the user.

        Args:
            user: The authenticated purchaser

        Returns:
            The hosted checkout URL to redirect to

        Raises:
            ConfigurationError: If no price or Stripe key is configured
            PaymentProcessorError: If Stripe rejects the request
        """
        ...


@runtime_checkable
class IPaymentEventReconciler(Protocol):
    """Interface for processing Stripe webhook deliveries."""

    async def handle(self, payload: bytes, signature: Optional[str]) -> Optional[PremiumChange]:
        """
        Verify a raw webhook delivery and apply its effect.

        Args:
            payload: Raw request body
            signature: Stripe-Signature header value

        Returns:
            The premium change applied, if any

        Raises:
            WebhookVerificationError: If the delivery is not authentic
            ConfigurationError: If the webhook secret is not configured
        """
        ...

    async def dispatch(self, event: StripeEvent) -> Optional[PremiumChange]:
        """Apply an already verified event. Never raises."""
        ...
