"""Tests for configuration settings."""

import pytest
from pydantic import ValidationError

from docmapper.core.config import Settings, get_settings


class TestSettings:
    """Tests for the Settings class."""

    def test_defaults(self, monkeypatch):
        """Test default values without environment overrides."""
        monkeypatch.delenv("DOCMAPPER_FILTER_CONFLICT_POLICY", raising=False)
        monkeypatch.delenv("DOCMAPPER_DEFAULT_QUERY_LIMIT", raising=False)
        settings = Settings(_env_file=None)

        assert settings.app_name == "DocMapper"
        assert settings.database_url == "sqlite+aiosqlite:///./dm_data/docmapper.db"
        assert settings.filter_conflict_policy == "reject"
        assert settings.default_query_limit is None
        assert settings.is_sqlite is True

    def test_environment_prefix(self, monkeypatch):
        """Test that DOCMAPPER_ variables are read."""
        monkeypatch.setenv("DOCMAPPER_FILTER_CONFLICT_POLICY", "last_wins")
        monkeypatch.setenv("DOCMAPPER_DEFAULT_QUERY_LIMIT", "50")
        monkeypatch.setenv("DOCMAPPER_ENVIRONMENT", "production")

        settings = Settings(_env_file=None)

        assert settings.filter_conflict_policy == "last_wins"
        assert settings.default_query_limit == 50
        assert settings.is_production is True
        assert settings.is_development is False

    def test_invalid_conflict_policy(self):
        """Test that unknown policies are rejected."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, filter_conflict_policy="first_wins")

    @pytest.mark.parametrize("limit", [0, -3])
    def test_invalid_default_limit(self, limit):
        """Test that non-positive default limits are rejected."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, default_query_limit=limit)

    def test_postgres_is_not_sqlite(self):
        """Test the sqlite detection for other drivers."""
        settings = Settings(_env_file=None, database_url="postgresql+asyncpg://u:p@localhost/db")
        assert settings.is_sqlite is False

    def test_testing_environment(self):
        """Test the testing environment flag."""
        assert Settings(_env_file=None, environment="testing").is_testing is True

    def test_get_settings_is_cached(self):
        """Test that get_settings returns one shared instance."""
        assert get_settings() is get_settings()
