"""
Checkout service implementation.

Starts the one-time premium purchase through a Stripe-hosted checkout page.
"""

import logging

from starlette.concurrency import run_in_threadpool

from shared.config import Settings
from shared.exceptions import ConfigurationError
from shared.models import AuthenticatedUser

from .gateway import StripeGateway
from .interfaces import ICheckoutService

logger = logging.getLogger(__name__)


class CheckoutService(ICheckoutService):
    """Creates Stripe checkout sessions for authenticated users."""

    def __init__(self, settings: Settings, gateway: StripeGateway):
        self._settings = settings
        self._gateway = gateway

    async def create_checkout(self, user: AuthenticatedUser) -> str:
        """Create a checkout session and return its hosted URL."""
        price_id = self._settings.stripe_price_id
        if not price_id:
            raise ConfigurationError("stripe_price_id")

        base = self._settings.frontend_url.rstrip("/")
        session = await run_in_threadpool(
            self._gateway.create_checkout_session,
            user.email,
            price_id,
            f"{base}{self._settings.checkout_success_path}",
            f"{base}{self._settings.checkout_cancel_path}",
        )

        logger.info(f"Created checkout session {session.session_id} for {user.email}")
        return session.url
