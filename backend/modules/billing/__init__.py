"""
Billing module.

Handles the Stripe integration: checkout sessions for the premium purchase
and reconciliation of payment lifecycle webhooks into the premium flag.

Public API:
- ICheckoutService, IPaymentEventReconciler: Interfaces
- StripeGateway: Stripe SDK wrapper
- EventKind, PremiumChange, StripeEvent, CheckoutSession: Models
- Billing exceptions: PaymentProcessorError, WebhookVerificationError
"""

from .interfaces import ICheckoutService, IPaymentEventReconciler
from .gateway import StripeGateway
from .models import (
    CheckoutSession,
    EventKind,
    LookupField,
    PremiumChange,
    StripeEvent,
)
from .exceptions import PaymentProcessorError, WebhookVerificationError

__all__ = [
    # Interfaces
    "ICheckoutService",
    "IPaymentEventReconciler",
    # Gateway
    "StripeGateway",
    # Models
    "CheckoutSession",
    "EventKind",
    "LookupField",
    "PremiumChange",
    "StripeEvent",
    # Exceptions
    "PaymentProcessorError",
    "WebhookVerificationError",
]
