"""Unit tests for runtime settings."""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from app.core.config import Settings


class TestSettings:

    def test_defaults(self):
        with patch.dict(os.environ, {"JWT_SECRET_KEY": "s3cret"}, clear=True):
            settings = Settings(_env_file=None)

        assert settings.jwt_algorithm == "HS256"
        assert settings.default_page_limit == 5
        assert settings.max_page_limit == 100
        assert settings.api_prefix == "/api/v1"
        assert settings.is_sqlite

    def test_secret_is_required(self):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ValidationError):
                Settings(_env_file=None)

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ('["https://a.test", "https://b.test"]', ["https://a.test", "https://b.test"]),
            ("https://a.test, https://b.test,", ["https://a.test", "https://b.test"]),
            ("https://a.test", ["https://a.test"]),
        ],
    )
    def test_cors_origins_from_env(self, raw, expected):
        env = {"JWT_SECRET_KEY": "s3cret", "CORS_ORIGINS": raw}
        with patch.dict(os.environ, env, clear=True):
            assert Settings(_env_file=None).cors_origins == expected

    def test_page_limits_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, jwt_secret_key="s3cret", max_page_limit=0)

    def test_postgres_url_is_not_sqlite(self):
        settings = Settings(
            _env_file=None,
            jwt_secret_key="s3cret",
            database_url="postgresql+asyncpg://app@localhost/products",
        )
        assert not settings.is_sqlite
