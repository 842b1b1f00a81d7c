"""
Unit Tests for Configuration
Tests for vetclinic/core/config.py
"""

import pytest
from pydantic import ValidationError

from vetclinic.core.config import Settings

SECRET = "x" * 32


class TestSettings:
    """Test Settings loading and validation"""

    def test_defaults(self):
        """Test document and share defaults"""
        s = Settings(SECRET_KEY=SECRET)

        assert s.MAX_UPLOAD_SIZE_BYTES == 10 * 1024 * 1024
        assert s.ALLOWED_CONTENT_TYPES == ["application/pdf"]
        assert s.DOCUMENT_REPLACE_MAX_ATTEMPTS == 3
        assert s.SHARE_LINK_DEFAULT_EXPIRY_DAYS == 7

    def test_short_secret_rejected(self):
        """Test SECRET_KEY must be at least 32 characters"""
        with pytest.raises(ValidationError):
            Settings(SECRET_KEY="short")

    def test_invalid_environment_rejected(self):
        """Test ENVIRONMENT is validated"""
        with pytest.raises(ValidationError):
            Settings(SECRET_KEY=SECRET, ENVIRONMENT="qa")

    def test_log_level_normalized(self):
        """Test LOG_LEVEL is upper-cased"""
        assert Settings(SECRET_KEY=SECRET, LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"

    def test_database_url_override(self):
        """Test DATABASE_URL takes precedence over POSTGRES_* settings"""
        s = Settings(SECRET_KEY=SECRET, DATABASE_URL="sqlite+aiosqlite:///x.db")
        assert s.POSTGRES_URL == "sqlite+aiosqlite:///x.db"

    def test_postgres_url_assembled(self):
        """Test the asyncpg URL is assembled from parts"""
        s = Settings(
            SECRET_KEY=SECRET,
            DATABASE_URL=None,
            POSTGRES_USER="vet",
            POSTGRES_PASSWORD="pw",
            POSTGRES_HOST="db",
            POSTGRES_PORT=5433,
            POSTGRES_DB="clinic",
        )
        assert s.POSTGRES_URL == "postgresql+asyncpg://vet:pw@db:5433/clinic"
