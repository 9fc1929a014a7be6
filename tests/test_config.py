"""
Contacts API: Settings Tests
============================

What:  Tests for environment-driven Settings parsing and validators.
"""

import pytest
from pydantic import ValidationError

from contacts_api.config import Settings


class TestSettings:

    def test_defaults(self, monkeypatch):
        for name in ("DATABASE_URL", "ENVIRONMENT", "LOG_LEVEL", "PORT", "CORS_ORIGINS"):
            monkeypatch.delenv(name, raising=False)

        config = Settings(_env_file=None)

        assert config.port == 3001
        assert config.environment == "development"
        assert config.log_level == "INFO"
        assert config.db_create_schema is True
        assert config.cors_origins_list == ["*"]
        assert config.database_url.startswith("postgresql+asyncpg://")

    def test_reads_environment_variables(self, monkeypatch):
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("DB_CREATE_SCHEMA", "false")
        monkeypatch.setenv("ENVIRONMENT", " Production ")

        config = Settings(_env_file=None)

        assert config.port == 8080
        assert config.db_create_schema is False
        assert config.is_production is True

    def test_cors_origins_are_split_and_trimmed(self):
        config = Settings(
            _env_file=None, cors_origins="http://a.example, http://b.example ,,"
        )
        assert config.cors_origins_list == ["http://a.example", "http://b.example"]

    def test_log_level_is_uppercased(self):
        assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"environment": "staging"},
            {"log_level": "LOUD"},
            {"port": 0},
            {"db_pool_size": 1},
        ],
    )
    def test_invalid_values_are_rejected(self, overrides):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, **overrides)
