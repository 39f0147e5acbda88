"""Tests for shared/config.py."""

import os
from unittest.mock import patch

from shared.config import REQUIRED_SECRETS, Settings, get_settings


class TestSettings:
    def test_default_values(self):
        """Settings should have sensible defaults."""
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)
        assert settings.app_name == "Interceptor API"
        assert settings.port == 3000
        assert settings.host == "0.0.0.0"
        assert settings.debug is False
        assert settings.session_ttl_days == 30
        assert settings.magic_link_ttl_minutes == 15
        assert settings.frontend_url == "http://localhost:5173"
        assert settings.enable_legacy_check_status is True

    def test_secrets_default_to_empty(self):
        """Secrets have no usable default."""
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)
        for name in REQUIRED_SECRETS:
            assert getattr(settings, name) == ""

    def test_loads_from_env(self):
        """Settings should load from environment variables."""
        with patch.dict(os.environ, {"DEBUG": "true", "PORT": "9000"}):
            settings = Settings(_env_file=None)
            assert settings.debug is True
            assert settings.port == 9000

    def test_loads_stripe_config_from_env(self):
        """Settings should load Stripe configuration from environment variables."""
        with patch.dict(os.environ, {
            "STRIPE_SECRET_KEY": "sk_test_env",
            "STRIPE_WEBHOOK_SECRET": "whsec_env",
            "STRIPE_PRICE_ID": "price_env",
        }):
            settings = Settings(_env_file=None)
            assert settings.stripe_secret_key == "sk_test_env"
            assert settings.stripe_webhook_secret == "whsec_env"
            assert settings.stripe_price_id == "price_env"

    def test_legacy_flag_can_be_disabled(self):
        with patch.dict(os.environ, {"ENABLE_LEGACY_CHECK_STATUS": "false"}):
            settings = Settings(_env_file=None)
            assert settings.enable_legacy_check_status is False


class TestMissingSecrets:
    def test_reports_all_when_unset(self):
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)
        assert settings.missing_secrets() == [name.upper() for name in REQUIRED_SECRETS]

    def test_reports_none_when_configured(self):
        values = {name: "set" for name in REQUIRED_SECRETS}
        settings = Settings(_env_file=None, **values)
        assert settings.missing_secrets() == []

    def test_whitespace_counts_as_missing(self):
        values = {name: "set" for name in REQUIRED_SECRETS}
        values["jwt_secret"] = "   "
        settings = Settings(_env_file=None, **values)
        assert settings.missing_secrets() == ["JWT_SECRET"]


class TestGetSettings:
    def test_get_settings_returns_settings_instance(self):
        """get_settings should return a Settings instance."""
        get_settings.cache_clear()
        settings = get_settings()
        assert isinstance(settings, Settings)

    def test_get_settings_is_cached(self):
        """get_settings should return the same instance."""
        get_settings.cache_clear()
        assert get_settings() is get_settings()
