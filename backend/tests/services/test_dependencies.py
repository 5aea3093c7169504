"""Settings-driven dependencies: tests for formatter policy and email wiring.

Tests cover:
    - Settings parse deny set and log format from the environment
    - get_error_formatter builds its policy from settings
    - build_email_service returns None without SMTP host, a service with one
"""

import pytest

import app.api.dependencies as deps
from app.config import Settings, get_settings
from app.infrastructure.smtp_transport import SMTPTransport
from app.services.email_service import EmailService


@pytest.fixture
def settings_env(monkeypatch):
    """Apply env vars and reset cached settings/formatter around the test."""
    def apply(**env):
        for key, value in env.items():
            monkeypatch.setenv(key, value)
        get_settings.cache_clear()
        deps.get_error_formatter.cache_clear()
    yield apply
    get_settings.cache_clear()
    deps.get_error_formatter.cache_clear()


def test_settings_from_environment(settings_env):
    settings_env(
        SENSITIVE_EXTENSION_KEYS='["stack", "tenantSecret"]',
        LOG_FORMAT="JSON",
        PRESERVE_CUSTOM_ERROR_CODES="false",
    )
    settings = Settings()
    assert settings.sensitive_extension_keys == ["stack", "tenantSecret"]
    assert settings.log_format == "json"
    assert settings.preserve_custom_error_codes is False


def test_error_formatter_uses_settings_policy(settings_env):
    settings_env(SENSITIVE_EXTENSION_KEYS='["tenantSecret"]')
    formatter = deps.get_error_formatter()
    assert formatter.policy.sensitive_keys == frozenset({"tenantSecret"})
    ext = formatter.format(
        [{"message": "m", "extensions": {"tenantSecret": "x", "stack": "kept"}}], "id",
    ).formatted[0]["extensions"]
    assert "tenantSecret" not in ext
    assert ext["stack"] == "kept"


def test_email_service_disabled_without_host(settings_env):
    settings_env(SMTP_HOST="")
    assert deps.build_email_service() is None


def test_email_service_built_with_host(settings_env):
    settings_env(SMTP_HOST="smtp.x.com", SMTP_PORT="2525", EMAIL_FROM_ADDRESS="bot@x.com")
    service = deps.build_email_service()
    assert isinstance(service, EmailService)
    assert service.from_email == "bot@x.com"
    assert isinstance(service._transport, SMTPTransport)
    assert service._transport.port == 2525
