"""
Billing module exceptions.

These exceptions are raised by the billing module and can be caught
by API error handlers to return appropriate HTTP responses.
"""

from typing import Optional

from shared.exceptions import ExternalServiceError, ValidationError


class PaymentProcessorError(ExternalServiceError):
    """Raised when a Stripe API call fails."""

    def __init__(self, message: str, stripe_error: Optional[str] = None):
        super().__init__(
            message,
            service="stripe",
            code="PAYMENT_PROCESSOR_ERROR",
            details={"stripe_error": stripe_error} if stripe_error else {},
        )


class WebhookVerificationError(ValidationError):
    """
    Raised when a Stripe webhook cannot be authenticated.

    Covers a missing signature header, a bad or stale signature and a
    body that is not a valid event envelope.
    """

    def __init__(self, reason: str = "Webhook signature verification failed"):
        super().__init__(
            reason,
            code="WEBHOOK_VERIFICATION_FAILED",
        )
