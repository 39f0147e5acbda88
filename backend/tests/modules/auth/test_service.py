"""Tests for the magic-link AuthService with in-memory stores."""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from modules.auth.exceptions import (
    EmailDeliveryError,
    InvalidEmailError,
    InvalidMagicTokenError,
    MissingMagicTokenError,
    UserNotFoundError,
)
from modules.auth.models import SessionResponse
from modules.auth.service import AuthService, is_plausible_email
from modules.auth.tokens import verify_session
from shared.exceptions import ConfigurationError
from shared.models import AuthenticatedUser

from tests.factories import make_settings


def sent_token(mailer, call: int = -1) -> str:
    """The token passed to the mailer on a given send."""
    return mailer.send_magic_link.call_args_list[call].args[1]


class TestIsPlausibleEmail:
    @pytest.mark.parametrize("email", ["a@b.com", "first.last+tag@sub.example.org"])
    def test_accepts(self, email):
        assert is_plausible_email(email)

    @pytest.mark.parametrize("email", [None, "", "ab.com", "a@b", "a @b.com", "a@b .com", "@b.com"])
    def test_rejects(self, email):
        assert not is_plausible_email(email)


class TestRequestMagicLink:
    @pytest.mark.asyncio
    async def test_creates_user_and_sends_token(self, auth_service, user_store, token_store, mailer):
        await auth_service.request_magic_link("a@b.com")

        user = user_store.get_by_email("a@b.com")
        assert user is not None
        assert user.is_premium is False

        mailer.send_magic_link.assert_awaited_once()
        email, token = mailer.send_magic_link.call_args.args
        assert email == "a@b.com"
        assert len(token) == 64
        assert token in token_store.rows

    @pytest.mark.asyncio
    async def test_token_expires_after_ttl(self, auth_service, token_store, mailer):
        before = datetime.now(timezone.utc)
        await auth_service.request_magic_link("a@b.com")
        after = datetime.now(timezone.utc)

        row = token_store.rows[sent_token(mailer)]
        assert before + timedelta(minutes=15) <= row.expires_at <= after + timedelta(minutes=15)
        assert row.used is False

    @pytest.mark.asyncio
    async def test_existing_user_is_not_duplicated(self, auth_service, user_store):
        existing = user_store.add("a@b.com", is_premium=True)

        await auth_service.request_magic_link("a@b.com")

        assert user_store.get_by_email("a@b.com") == existing

    @pytest.mark.asyncio
    async def test_repeated_requests_issue_distinct_tokens(self, auth_service, mailer):
        await auth_service.request_magic_link("a@b.com")
        await auth_service.request_magic_link("a@b.com")

        assert sent_token(mailer, 0) != sent_token(mailer, 1)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("email", [None, "", "not-an-email"])
    async def test_invalid_email(self, auth_service, user_store, token_store, mailer, email):
        with pytest.raises(InvalidEmailError):
            await auth_service.request_magic_link(email)

        assert token_store.rows == {}
        mailer.send_magic_link.assert_not_called()

    @pytest.mark.asyncio
    async def test_delivery_failure_propagates(self, auth_service, mailer):
        mailer.send_magic_link.side_effect = EmailDeliveryError("HTTP 500")

        with pytest.raises(EmailDeliveryError):
            await auth_service.request_magic_link("a@b.com")


class TestVerifyMagicLink:
    @pytest.mark.asyncio
    async def test_returns_session_for_valid_token(self, auth_service, user_store, mailer, settings):
        await auth_service.request_magic_link("a@b.com")

        session = await auth_service.verify_magic_link(sent_token(mailer))

        assert isinstance(session, SessionResponse)
        assert session.user.email == "a@b.com"
        assert session.user.is_premium is False
        claims = verify_session(session.token, settings)
        assert claims.email == "a@b.com"
        assert claims.id == user_store.get_by_email("a@b.com").id

    @pytest.mark.asyncio
    async def test_session_reflects_stored_premium_flag(self, auth_service, user_store, mailer):
        user_store.add("a@b.com", is_premium=True)
        await auth_service.request_magic_link("a@b.com")

        session = await auth_service.verify_magic_link(sent_token(mailer))

        assert session.user.is_premium is True

    @pytest.mark.asyncio
    async def test_token_cannot_be_reused(self, auth_service, mailer):
        await auth_service.request_magic_link("a@b.com")
        token = sent_token(mailer)
        await auth_service.verify_magic_link(token)

        with pytest.raises(InvalidMagicTokenError):
            await auth_service.verify_magic_link(token)

    @pytest.mark.asyncio
    async def test_earlier_token_stays_valid_after_new_request(self, auth_service, mailer):
        await auth_service.request_magic_link("a@b.com")
        first = sent_token(mailer)
        await auth_service.request_magic_link("a@b.com")

        session = await auth_service.verify_magic_link(first)

        assert session.user.email == "a@b.com"

    @pytest.mark.asyncio
    async def test_expired_token_rejected(self, auth_service, user_store, token_store):
        user_store.add("a@b.com")
        token_store.create("a@b.com", "e" * 64, datetime.now(timezone.utc) - timedelta(seconds=1))

        with pytest.raises(InvalidMagicTokenError):
            await auth_service.verify_magic_link("e" * 64)

    @pytest.mark.asyncio
    async def test_unknown_token_rejected(self, auth_service):
        with pytest.raises(InvalidMagicTokenError):
            await auth_service.verify_magic_link("f" * 64)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("token", [None, ""])
    async def test_missing_token(self, auth_service, token):
        with pytest.raises(MissingMagicTokenError):
            await auth_service.verify_magic_link(token)

    @pytest.mark.asyncio
    async def test_user_deleted_after_request(self, auth_service, token_store):
        token_store.create("gone@b.com", "d" * 64, datetime.now(timezone.utc) + timedelta(minutes=5))

        with pytest.raises(UserNotFoundError):
            await auth_service.verify_magic_link("d" * 64)

    @pytest.mark.asyncio
    async def test_missing_secret_does_not_consume_token(self, user_store, token_store, mailer):
        service = AuthService(
            settings=make_settings(jwt_secret=""),
            users=user_store,
            tokens=token_store,
            mailer=mailer,
        )
        await service.request_magic_link("a@b.com")
        token = sent_token(mailer)

        with pytest.raises(ConfigurationError):
            await service.verify_magic_link(token)

        assert token_store.rows[token].used is False

    @pytest.mark.asyncio
    async def test_concurrent_redemptions_succeed_once(self, auth_service, mailer):
        await auth_service.request_magic_link("a@b.com")
        token = sent_token(mailer)

        results = await asyncio.gather(
            *[auth_service.verify_magic_link(token) for _ in range(10)],
            return_exceptions=True,
        )

        sessions = [r for r in results if isinstance(r, SessionResponse)]
        failures = [r for r in results if isinstance(r, InvalidMagicTokenError)]
        assert len(sessions) == 1
        assert len(failures) == 9


class TestGetStatus:
    @pytest.mark.asyncio
    async def test_reads_store_not_token(self, auth_service, user_store):
        user_store.add("a@b.com", is_premium=True)
        claims = AuthenticatedUser(id=1, email="a@b.com", is_premium=False)

        status = await auth_service.get_status(claims)

        assert status.is_premium is True

    @pytest.mark.asyncio
    async def test_user_not_found(self, auth_service):
        claims = AuthenticatedUser(id=1, email="gone@b.com")

        with pytest.raises(UserNotFoundError):
            await auth_service.get_status(claims)


class TestLookupStatus:
    @pytest.mark.asyncio
    async def test_finds_user(self, auth_service, user_store):
        user_store.add("a@b.com", is_premium=True)

        user = await auth_service.lookup_status("a@b.com")

        assert user.is_premium is True

    @pytest.mark.asyncio
    async def test_unknown_email(self, auth_service):
        assert await auth_service.lookup_status("nobody@b.com") is None

    @pytest.mark.asyncio
    async def test_requires_email(self, auth_service):
        with pytest.raises(InvalidEmailError):
            await auth_service.lookup_status("")
