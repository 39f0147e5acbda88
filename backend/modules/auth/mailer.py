"""
Magic-link email delivery via the Resend HTTP API.
"""

import logging
from html import escape

import httpx

from shared.config import Settings
from shared.exceptions import ConfigurationError

from .exceptions import EmailDeliveryError

logger = logging.getLogger(__name__)

RESEND_API_URL = "https://api.resend.com/emails"
MAGIC_LINK_SUBJECT = "Sign in to Privacy Interceptor"


def render_magic_link_email(link: str, ttl_minutes: int) -> str:
    """Render the HTML body of the sign-in email."""
    href = escape(link, quote=True)
    return f"""
<div style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; max-width: 480px; margin: 0 auto; padding: 40px 20px;">
  <h2 style="font-size: 20px; font-weight: 600; margin-bottom: 24px; color: #1a1a1a;">{MAGIC_LINK_SUBJECT}</h2>
  <p style="font-size: 15px; line-height: 1.6; color: #4a4a4a; margin-bottom: 24px;">Click the link below to sign in. This link expires in {ttl_minutes} minutes.</p>
  <a href="{href}" style="display: inline-block; background: #1a1a1a; color: #ffffff; padding: 12px 24px; border-radius: 6px; text-decoration: none; font-size: 14px; font-weight: 500;">Sign in</a>
  <p style="font-size: 13px; color: #888; margin-top: 32px;">If you did not request this email, you can ignore it.</p>
</div>
"""


class MagicLinkMailer:
    """Sends sign-in links through Resend."""

    def __init__(self, settings: Settings):
        self._settings = settings

    def build_link(self, token: str) -> str:
        """Build the frontend redemption URL for a token."""
        base = self._settings.frontend_url.rstrip("/")
        return f"{base}{self._settings.magic_link_path}?token={token}"

    async def send_magic_link(self, email: str, token: str) -> None:
        """
        Email a sign-in link to a user.

        Args:
            email: Recipient address
            token: One-time token embedded in the link

        Raises:
            ConfigurationError: If RESEND_API_KEY is not set
            EmailDeliveryError: If Resend is unreachable or rejects the send
        """
        if not self._settings.resend_api_key:
            raise ConfigurationError("resend_api_key")

        html = render_magic_link_email(
            self.build_link(token),
            self._settings.magic_link_ttl_minutes,
        )

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    RESEND_API_URL,
                    headers={
                        "Authorization": f"Bearer {self._settings.resend_api_key}",
                        "Content-Type": "application/json",
                    },
                    json={
                        "from": self._settings.email_from,
                        "to": [email],
                        "subject": MAGIC_LINK_SUBJECT,
                        "html": html,
                    },
                    timeout=self._settings.email_timeout_seconds,
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Resend rejected magic link email for {email}: "
                f"HTTP {e.response.status_code}"
            )
            raise EmailDeliveryError(f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error(f"Resend request failed for {email}: {e.__class__.__name__}")
            raise EmailDeliveryError(e.__class__.__name__) from e

        logger.info(f"Sent magic link email to {email}")
