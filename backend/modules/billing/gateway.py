"""
Stripe gateway.

The only place that talks to the Stripe SDK: webhook signature checks,
checkout session creation and payment-intent lookups. The API key is passed
per call from Settings rather than set on the global `stripe` module.
"""

import logging
from typing import Any, Optional

import stripe
from pydantic import ValidationError as PydanticValidationError

from shared.config import Settings
from shared.exceptions import ConfigurationError

from .exceptions import PaymentProcessorError, WebhookVerificationError
from .models import CheckoutSession, StripeEvent

logger = logging.getLogger(__name__)


def charge_id_from_intent(intent: Any) -> Optional[str]:
    """
    Extract the settled charge ID from a PaymentIntent.

    Newer API versions expose `latest_charge` (an ID, or an object when
    expanded); older ones embed a `charges` list.
    """
    latest = getattr(intent, "latest_charge", None)
    if isinstance(latest, str) and latest:
        return latest
    if latest is not None:
        latest_id = getattr(latest, "id", None)
        if latest_id:
            return latest_id

    charges = getattr(intent, "charges", None)
    data = getattr(charges, "data", None) or []
    if data:
        return getattr(data[0], "id", None)
    return None


class StripeGateway:
    """Thin wrapper over the Stripe SDK, configured from Settings."""

    def __init__(self, settings: Settings):
        self._settings = settings

    def _api_key(self) -> str:
        key = self._settings.stripe_secret_key.strip()
        if not key:
            raise ConfigurationError("stripe_secret_key")
        return key

    def construct_event(self, payload: bytes, signature: Optional[str]) -> StripeEvent:
        """
        Authenticate a webhook delivery and parse its envelope.

        Args:
            payload: The raw, unparsed request body
            signature: Value of the Stripe-Signature header

        Returns:
            The verified event

        Raises:
            ConfigurationError: If STRIPE_WEBHOOK_SECRET is not set
            WebhookVerificationError: If the delivery cannot be trusted
        """
        secret = self._settings.stripe_webhook_secret
        if not secret:
            raise ConfigurationError("stripe_webhook_secret")
        if not signature:
            raise WebhookVerificationError("Missing Stripe-Signature header")

        try:
            body = payload.decode("utf-8")
            stripe.WebhookSignature.verify_header(
                body,
                signature,
                secret,
                stripe.Webhook.DEFAULT_TOLERANCE,
            )
        except UnicodeDecodeError as e:
            raise WebhookVerificationError("Webhook body is not valid UTF-8") from e
        except stripe.SignatureVerificationError as e:
            raise WebhookVerificationError(str(e)) from e

        try:
            return StripeEvent.model_validate_json(body)
        except PydanticValidationError as e:
            raise WebhookVerificationError("Malformed event envelope") from e

    def create_checkout_session(
        self,
        email: str,
        price_id: str,
        success_url: str,
        cancel_url: str,
    ) -> CheckoutSession:
        """
        Create a one-time-payment hosted checkout session.

        The email goes in both `customer_email` and `metadata`: depending on
        the payment path, later events don't always surface the customer
        email, but metadata always survives.

        Raises:
            ConfigurationError: If STRIPE_SECRET_KEY is not set
            PaymentProcessorError: If Stripe rejects the request
        """
        try:
            session = stripe.checkout.Session.create(
                api_key=self._api_key(),
                mode="payment",
                payment_method_types=["card"],
                customer_email=email,
                metadata={"email": email},
                line_items=[{"price": price_id, "quantity": 1}],
                success_url=success_url,
                cancel_url=cancel_url,
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe checkout session creation failed for {email}: {e}")
            raise PaymentProcessorError(
                "Failed to create checkout session",
                stripe_error=getattr(e, "code", None) or e.__class__.__name__,
            ) from e

        return CheckoutSession(session_id=session.id, url=session.url)

    def resolve_charge_id(self, payment_intent_id: str) -> Optional[str]:
        """
        Look up the charge behind a payment intent.

        Returns None when the lookup fails or the intent has no charge yet;
        callers treat that as "charge unknown", not as an error.
        """
        try:
            intent = stripe.PaymentIntent.retrieve(payment_intent_id, api_key=self._api_key())
        except ConfigurationError as e:
            logger.error(f"Cannot resolve charge for {payment_intent_id}: {e.message}")
            return None
        except stripe.StripeError as e:
            logger.warning(f"Unable to retrieve Stripe payment intent {payment_intent_id}: {e}")
            return None

        charge_id = charge_id_from_intent(intent)
        if charge_id is None:
            logger.info(f"Payment intent {payment_intent_id} has no charge yet")
        return charge_id
