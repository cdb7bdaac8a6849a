"""Unit tests for config.py: secret handling per environment."""

import pytest
from pydantic import ValidationError

from tokengate.config import Settings, get_settings

STRONG_SECRET = "x" * 32


class TestDefaults:
    def test_policy_defaults(self):
        settings = Settings(jwt_secret_key=STRONG_SECRET)

        assert settings.token_type == "JWT"
        assert settings.jwt_algorithm == "HS512"
        assert settings.jwt_access_token_expire_seconds == 7200
        assert settings.jwt_refresh_token_expire_seconds == 604800
        assert settings.token_source == "bearer"

    def test_reads_prefixed_environment(self, monkeypatch):
        monkeypatch.setenv("TOKENGATE_JWT_ALGORITHM", "HS256")
        monkeypatch.setenv("TOKENGATE_TOKEN_SOURCE", "cookie")

        settings = Settings()

        assert settings.jwt_algorithm == "HS256"
        assert settings.token_source == "cookie"

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()


class TestSecretStrength:
    def test_development_allows_missing_secret(self, monkeypatch):
        monkeypatch.delenv("TOKENGATE_JWT_SECRET_KEY", raising=False)
        settings = Settings(environment="development")
        assert settings.jwt_secret_key is None

    def test_development_warns_on_short_secret(self):
        with pytest.warns(UserWarning, match="shorter than 32"):
            Settings(environment="development", jwt_secret_key="short")

    def test_production_allows_secret_from_override(self, monkeypatch):
        """Settings alone may omit the secret; build_policy enforces it."""
        monkeypatch.delenv("TOKENGATE_JWT_SECRET_KEY", raising=False)
        settings = Settings(environment="production")
        assert settings.jwt_secret_key is None

    def test_production_rejects_short_secret(self):
        with pytest.raises(ValidationError, match="at least 32"):
            Settings(environment="staging", jwt_secret_key="short")

    def test_production_accepts_strong_secret(self):
        settings = Settings(environment="production", jwt_secret_key=STRONG_SECRET)
        assert not settings.is_development

    def test_unknown_token_source_rejected(self):
        with pytest.raises(ValidationError):
            Settings(jwt_secret_key=STRONG_SECRET, token_source="header")
