"""
Billing API endpoints.

Checkout creation for signed-in users and the Stripe webhook receiver.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Request

from api.dependencies import get_checkout_service, get_payment_event_reconciler
from api.middleware.auth import get_current_user
from shared.exceptions import ConfigurationError
from shared.models import AuthenticatedUser

from .exceptions import PaymentProcessorError, WebhookVerificationError
from .interfaces import ICheckoutService, IPaymentEventReconciler
from .models import CheckoutResponse, WebhookAck

logger = logging.getLogger(__name__)

checkout_router = APIRouter()
webhook_router = APIRouter()


@checkout_router.post("/create", response_model=CheckoutResponse)
async def create_checkout(
    user: AuthenticatedUser = Depends(get_current_user),
    service: ICheckoutService = Depends(get_checkout_service),
) -> CheckoutResponse:
    """
    Start the premium purchase.

    Requires authentication. Returns the Stripe-hosted checkout URL.
    """
    try:
        url = await service.create_checkout(user)
    except ConfigurationError as e:
        logger.error(e.message)
        if e.setting == "stripe_price_id":
            raise HTTPException(status_code=500, detail="Stripe price not configured")
        raise HTTPException(status_code=500, detail="Failed to create checkout session")
    except PaymentProcessorError:
        raise HTTPException(status_code=500, detail="Failed to create checkout session")
    return CheckoutResponse(url=url)


@webhook_router.post("/update-status", response_model=WebhookAck)
async def update_status(
    request: Request,
    stripe_signature: Optional[str] = Header(default=None),
    reconciler: IPaymentEventReconciler = Depends(get_payment_event_reconciler),
) -> WebhookAck:
    """
    Stripe webhook receiver.

    The signature is checked against the raw body before anything in it is
    trusted. Once verified, the event is always acknowledged, even if
    applying it failed, so Stripe doesn't keep redelivering it.
    """
    payload = await request.body()

    try:
        await reconciler.handle(payload, stripe_signature)
    except WebhookVerificationError as e:
        logger.warning(f"Webhook Error: {e.message}")
        raise HTTPException(status_code=400, detail=f"Webhook Error: {e.message}")
    except ConfigurationError as e:
        logger.error(e.message)
        raise HTTPException(status_code=500, detail="Webhook not configured")

    return WebhookAck(received=True)
