"""
Payment event reconciler.

Turns verified Stripe webhook events into premium-flag updates on the
users table. A user's standing moves through:

    free -> premium               checkout.session.completed
    premium -> free               charge.dispute.created, charge.refunded (full)
    disputed -> premium | free    charge.dispute.closed (won | anything else)

Each handled event kind has a pure resolver that maps the event object to
a PremiumChange (which row, which flag value) or None. One shared step
applies the change. Charge IDs are authoritative for post-payment events,
email for the initial checkout completion, since a charge ID doesn't exist
until the payment has settled.

Deliveries are not ordered. Whichever event is processed last wins.
"""

import logging
from typing import Any, Callable, Optional

from starlette.concurrency import run_in_threadpool

from modules.auth.interfaces import IUserStore

from .gateway import StripeGateway
from .interfaces import IPaymentEventReconciler
from .models import EventKind, LookupField, PremiumChange, StripeEvent

logger = logging.getLogger(__name__)

DISPUTE_WON = "won"

Resolver = Callable[[dict[str, Any], Optional[str]], Optional[PremiumChange]]


def stripe_id(value: Any) -> Optional[str]:
    """Return the ID of a Stripe reference that may be a string or an expanded object."""
    if isinstance(value, str):
        return value or None
    if isinstance(value, dict):
        return value.get("id") or None
    return None


def checkout_email(session: dict[str, Any]) -> Optional[str]:
    """Best available purchaser email on a checkout session."""
    details = session.get("customer_details") or {}
    metadata = session.get("metadata") or {}
    return (
        details.get("email")
        or session.get("customer_email")
        or metadata.get("email")
        or None
    )


def resolve_checkout_completed(
    session: dict[str, Any],
    charge_id: Optional[str],
) -> Optional[PremiumChange]:
    """Grant premium to the purchaser's email and record the Stripe IDs."""
    email = checkout_email(session)
    if not email:
        return None

    extra: dict[str, str] = {}
    payment_intent_id = stripe_id(session.get("payment_intent"))
    if payment_intent_id:
        extra["stripe_payment_intent_id"] = payment_intent_id
    if charge_id:
        extra["stripe_charge_id"] = charge_id

    # Metadata holds the email as stored; the reported purchaser email
    # can differ from it, e.g. in letter case
    metadata_email = (session.get("metadata") or {}).get("email") or None
    fallback_email = metadata_email if metadata_email and metadata_email != email else None

    return PremiumChange(
        lookup_field=LookupField.EMAIL,
        lookup_value=email,
        is_premium=True,
        fallback_field=LookupField.EMAIL if fallback_email else None,
        fallback_value=fallback_email,
        extra=extra,
    )


def _charge_keyed_change(obj: dict[str, Any], is_premium: bool) -> Optional[PremiumChange]:
    """Address a user by the object's charge, falling back to its payment intent."""
    charge_id = stripe_id(obj.get("charge"))
    payment_intent_id = stripe_id(obj.get("payment_intent"))

    if charge_id:
        return PremiumChange(
            lookup_field=LookupField.CHARGE_ID,
            lookup_value=charge_id,
            is_premium=is_premium,
            fallback_field=LookupField.PAYMENT_INTENT_ID if payment_intent_id else None,
            fallback_value=payment_intent_id,
        )
    if payment_intent_id:
        return PremiumChange(
            lookup_field=LookupField.PAYMENT_INTENT_ID,
            lookup_value=payment_intent_id,
            is_premium=is_premium,
        )
    return None


def resolve_dispute_created(
    dispute: dict[str, Any],
    _charge_id: Optional[str] = None,
) -> Optional[PremiumChange]:
    """A new dispute revokes premium immediately."""
    return _charge_keyed_change(dispute, is_premium=False)


def resolve_dispute_closed(
    dispute: dict[str, Any],
    _charge_id: Optional[str] = None,
) -> Optional[PremiumChange]:
    """A won dispute restores premium; any other outcome keeps it revoked."""
    return _charge_keyed_change(dispute, is_premium=dispute.get("status") == DISPUTE_WON)


def resolve_charge_refunded(
    charge: dict[str, Any],
    _charge_id: Optional[str] = None,
) -> Optional[PremiumChange]:
    """A full refund revokes premium; partial refunds change nothing."""
    if charge.get("refunded") is not True:
        return None

    charge_id = stripe_id(charge.get("id"))
    if not charge_id:
        return None
    payment_intent_id = stripe_id(charge.get("payment_intent"))
    return PremiumChange(
        lookup_field=LookupField.CHARGE_ID,
        lookup_value=charge_id,
        is_premium=False,
        fallback_field=LookupField.PAYMENT_INTENT_ID if payment_intent_id else None,
        fallback_value=payment_intent_id,
    )


def resolve_refund_created(
    _refund: dict[str, Any],
    _charge_id: Optional[str] = None,
) -> Optional[PremiumChange]:
    """Informational; the paired charge.refunded event does the work."""
    return None


RESOLVERS: dict[EventKind, Resolver] = {
    EventKind.CHECKOUT_COMPLETED: resolve_checkout_completed,
    EventKind.DISPUTE_CREATED: resolve_dispute_created,
    EventKind.DISPUTE_CLOSED: resolve_dispute_closed,
    EventKind.CHARGE_REFUNDED: resolve_charge_refunded,
    EventKind.REFUND_CREATED: resolve_refund_created,
}


class PaymentEventReconciler(IPaymentEventReconciler):
    """
    Verifies Stripe webhook deliveries and applies their premium changes.

    Failures after verification are logged and swallowed: the webhook is
    still acknowledged, and Stripe's own redelivery is the recovery path.
    """

    def __init__(self, users: IUserStore, gateway: StripeGateway):
        self._users = users
        self._gateway = gateway

    async def handle(self, payload: bytes, signature: Optional[str]) -> Optional[PremiumChange]:
        """
        Verify a delivery, then dispatch it.

        Raises:
            WebhookVerificationError: If the signature check fails
            ConfigurationError: If the webhook secret is not configured
        """
        event = self._gateway.construct_event(payload, signature)
        logger.info(f"Received Stripe event {event.id} ({event.type})")
        return await self.dispatch(event)

    async def dispatch(self, event: StripeEvent) -> Optional[PremiumChange]:
        """
        Resolve and apply the premium change an event implies.

        Returns:
            The change that was applied, or None if the event changes nothing
            or processing failed.
        """
        kind = EventKind.from_type(event.type)
        if kind is None:
            logger.info(f"Ignoring unhandled Stripe event type {event.type} ({event.id})")
            return None

        try:
            charge_id = None
            if kind is EventKind.CHECKOUT_COMPLETED:
                charge_id = await self._lookup_checkout_charge(event.object)

            change = RESOLVERS[kind](event.object, charge_id)
            if change is None:
                if kind is EventKind.CHECKOUT_COMPLETED:
                    logger.warning(f"No customer email on checkout event {event.id}; skipping")
                else:
                    logger.info(f"Stripe event {event.id} ({event.type}) requires no premium change")
                return None

            await self.apply(change, event_id=event.id)
            return change
        except Exception:
            logger.exception(f"Failed to process Stripe event {event.id} ({event.type})")
            return None

    async def apply(self, change: PremiumChange, event_id: str = "") -> int:
        """
        Write a premium change to the matching user row(s).

        Returns:
            Number of user rows updated.
        """
        updated = await run_in_threadpool(
            self._users.update_by,
            change.lookup_field.value,
            change.lookup_value,
            change.updates(),
        )

        if not updated and change.fallback_field and change.fallback_value:
            updated = await run_in_threadpool(
                self._users.update_by,
                change.fallback_field.value,
                change.fallback_value,
                change.updates(),
            )

        if updated:
            logger.info(
                f"Set is_premium={change.is_premium} where "
                f"{change.lookup_field.value}={change.lookup_value} (event {event_id})"
            )
        else:
            logger.warning(
                f"No user matched {change.lookup_field.value}={change.lookup_value} "
                f"for event {event_id}"
            )
        return updated

    async def _lookup_checkout_charge(self, session: dict[str, Any]) -> Optional[str]:
        payment_intent_id = stripe_id(session.get("payment_intent"))
        if not payment_intent_id:
            return None
        return await run_in_threadpool(self._gateway.resolve_charge_id, payment_intent_id)
