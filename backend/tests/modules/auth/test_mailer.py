"""Tests for the Resend magic-link mailer."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from modules.auth.exceptions import EmailDeliveryError
from modules.auth.mailer import (
    MAGIC_LINK_SUBJECT,
    RESEND_API_URL,
    MagicLinkMailer,
    render_magic_link_email,
)
from shared.exceptions import ConfigurationError

from tests.factories import make_settings


def mock_async_client(mock_client_class, response=None, post_error=None):
    """Wire a patched httpx.AsyncClient to return `response` from post()."""
    mock_client = AsyncMock()
    if post_error is not None:
        mock_client.post.side_effect = post_error
    else:
        mock_client.post.return_value = response
    mock_client_class.return_value.__aenter__.return_value = mock_client
    return mock_client


class TestBuildLink:
    def test_joins_frontend_url_and_path(self):
        mailer = MagicLinkMailer(make_settings(frontend_url="https://app.example.com/"))
        assert mailer.build_link("abc") == (
            "https://app.example.com/privacyInterceptor/auth/verify?token=abc"
        )


class TestRenderEmail:
    def test_contains_link_and_ttl(self):
        html = render_magic_link_email("https://x.test/verify?token=abc&x=1", 15)
        assert 'href="https://x.test/verify?token=abc&amp;x=1"' in html
        assert "15 minutes" in html


class TestSendMagicLink:
    @pytest.mark.asyncio
    async def test_posts_to_resend(self):
        mailer = MagicLinkMailer(make_settings())
        response = MagicMock()
        response.raise_for_status = MagicMock()

        with patch("httpx.AsyncClient") as mock_client_class:
            mock_client = mock_async_client(mock_client_class, response=response)
            await mailer.send_magic_link("a@b.com", "abc")

        mock_client.post.assert_called_once()
        args, kwargs = mock_client.post.call_args
        assert args[0] == RESEND_API_URL
        assert kwargs["headers"]["Authorization"] == "Bearer re_test_key"
        assert kwargs["json"]["to"] == ["a@b.com"]
        assert kwargs["json"]["subject"] == MAGIC_LINK_SUBJECT
        assert "token=abc" in kwargs["json"]["html"]
        assert kwargs["timeout"] == 10.0

    @pytest.mark.asyncio
    async def test_requires_api_key(self):
        mailer = MagicLinkMailer(make_settings(resend_api_key=""))

        with patch("httpx.AsyncClient") as mock_client_class:
            with pytest.raises(ConfigurationError):
                await mailer.send_magic_link("a@b.com", "abc")
            mock_client_class.assert_not_called()

    @pytest.mark.asyncio
    async def test_rejected_send_raises_delivery_error(self):
        mailer = MagicLinkMailer(make_settings())
        response = MagicMock()
        response.raise_for_status.side_effect = httpx.HTTPStatusError(
            "Unprocessable",
            request=MagicMock(),
            response=MagicMock(status_code=422),
        )

        with patch("httpx.AsyncClient") as mock_client_class:
            mock_async_client(mock_client_class, response=response)
            with pytest.raises(EmailDeliveryError) as exc_info:
                await mailer.send_magic_link("a@b.com", "abc")

        assert exc_info.value.details["reason"] == "HTTP 422"
        assert exc_info.value.service == "resend"

    @pytest.mark.asyncio
    async def test_network_failure_raises_delivery_error(self):
        mailer = MagicLinkMailer(make_settings())

        with patch("httpx.AsyncClient") as mock_client_class:
            mock_async_client(mock_client_class, post_error=httpx.ConnectError("refused"))
            with pytest.raises(EmailDeliveryError) as exc_info:
                await mailer.send_magic_link("a@b.com", "abc")

        assert exc_info.value.details["reason"] == "ConnectError"
