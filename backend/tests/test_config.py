"""
Settings loading tests.

All tests pass an explicit environment mapping; nothing reads os.environ.
"""

import pytest

from upload_relay.config import (
    DEFAULT_MAX_FILE_BYTES,
    DEFAULT_RESEND_API_URL,
    ConfigError,
    Settings,
    parse_allowed_origins,
    settings_from_env,
)


def _env(**overrides) -> dict:
    env = {
        "RESEND_API_KEY": "re_test_key",
        "FROM_EMAIL": "uploads@example.com",
        "TO_EMAIL": "inbox@example.com",
    }
    env.update(overrides)
    return env


class TestParseAllowedOrigins:

    def test_empty_and_none_give_empty_tuple(self):
        assert parse_allowed_origins(None) == ()
        assert parse_allowed_origins("") == ()
        assert parse_allowed_origins(" , ,") == ()

    def test_entries_are_trimmed_and_blank_entries_dropped(self):
        raw = " https://a.example.com , ,http://localhost:8080,"
        assert parse_allowed_origins(raw) == (
            "https://a.example.com",
            "http://localhost:8080",
        )

    def test_duplicates_removed_preserving_order(self):
        raw = "https://b.example.com,https://a.example.com,https://b.example.com"
        assert parse_allowed_origins(raw) == (
            "https://b.example.com",
            "https://a.example.com",
        )


class TestSettingsFromEnv:

    def test_defaults(self):
        settings = settings_from_env(_env())

        assert settings.resend_api_key == "re_test_key"
        assert settings.from_email == "uploads@example.com"
        assert settings.to_email == "inbox@example.com"
        assert settings.allowed_origins == ()
        assert settings.allows_any_origin is True
        assert settings.max_file_bytes == DEFAULT_MAX_FILE_BYTES == 10485760
        assert settings.resend_api_url == DEFAULT_RESEND_API_URL
        assert settings.send_timeout_seconds == 30.0

    def test_reads_allowed_origins(self):
        settings = settings_from_env(
            _env(ALLOWED_ORIGINS="https://site.example.com,http://localhost:8080")
        )
        assert settings.allowed_origins == (
            "https://site.example.com",
            "http://localhost:8080",
        )
        assert settings.allows_any_origin is False

    def test_falls_back_to_legacy_allowed_origin(self):
        settings = settings_from_env(_env(ALLOWED_ORIGIN="https://legacy.example.com"))
        assert settings.allowed_origins == ("https://legacy.example.com",)

    def test_allowed_origins_wins_over_legacy_name(self):
        settings = settings_from_env(
            _env(
                ALLOWED_ORIGINS="https://new.example.com",
                ALLOWED_ORIGIN="https://legacy.example.com",
            )
        )
        assert settings.allowed_origins == ("https://new.example.com",)

    def test_reads_numeric_overrides(self):
        settings = settings_from_env(
            _env(MAX_FILE_BYTES="2048", SEND_TIMEOUT_SECONDS="12.5")
        )
        assert settings.max_file_bytes == 2048
        assert settings.send_timeout_seconds == 12.5

    def test_blank_max_file_bytes_uses_default(self):
        settings = settings_from_env(_env(MAX_FILE_BYTES="  "))
        assert settings.max_file_bytes == DEFAULT_MAX_FILE_BYTES

    def test_reads_api_url_override(self):
        settings = settings_from_env(_env(RESEND_API_URL="http://localhost:9999/emails"))
        assert settings.resend_api_url == "http://localhost:9999/emails"

    @pytest.mark.parametrize("missing", ["RESEND_API_KEY", "FROM_EMAIL", "TO_EMAIL"])
    def test_missing_required_variable_raises(self, missing):
        env = _env()
        del env[missing]
        with pytest.raises(ConfigError, match=missing):
            settings_from_env(env)

    @pytest.mark.parametrize("value", ["ten", "1.5", "0", "-3"])
    def test_invalid_max_file_bytes_raises(self, value):
        with pytest.raises(ConfigError, match="MAX_FILE_BYTES"):
            settings_from_env(_env(MAX_FILE_BYTES=value))

    def test_invalid_timeout_raises(self):
        with pytest.raises(ConfigError, match="SEND_TIMEOUT_SECONDS"):
            settings_from_env(_env(SEND_TIMEOUT_SECONDS="soon"))


class TestSettingsModel:

    def test_settings_are_frozen(self):
        settings = settings_from_env(_env())
        with pytest.raises(Exception):
            settings.max_file_bytes = 1

    def test_repr_does_not_contain_api_key(self):
        settings = Settings(
            resend_api_key="re_super_secret",
            from_email="uploads@example.com",
            to_email="inbox@example.com",
        )
        assert "re_super_secret" not in repr(settings)
        assert "re_super_secret" not in str(settings)
