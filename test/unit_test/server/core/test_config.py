"""Unit tests for server configuration settings model.

Tests verify that the Settings model binds environment variables by alias and
that the grouped configuration views are derived from it.
"""

import pytest

from orm_pitfalls.server.core import constant
from orm_pitfalls.server.core.config import CORSConfig, DatabaseConfig, LoggingConfig, Settings

_ENV_NAMES = [
    "ORM_PITFALLS_SERVER_HOST",
    "ORM_PITFALLS_SERVER_PORT",
    "ORM_PITFALLS_LOG_LEVEL",
    "ORM_PITFALLS_LOG_FORMAT",
    "ORM_PITFALLS_LOG_FILE_DIR",
    "ORM_PITFALLS_ENABLE_FILE_LOGGING",
    "DATABASE_URL",
    "DATABASE_ECHO",
    "CORS_ORIGINS",
    "CORS_ALLOW_CREDENTIALS",
]


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every setting from the environment."""
    for name in _ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettingsDefaults:
    def test_defaults(self, clean_env):
        settings = Settings(_env_file=None)

        assert settings.server_host == "0.0.0.0"
        assert settings.server_port == 8080
        assert settings.log_level == "INFO"
        assert settings.log_format == "detailed"
        assert settings.enable_file_logging is False
        assert settings.database_url.startswith("postgresql+asyncpg://")
        assert settings.database_echo is False
        assert settings.cors_origins == ["*"]


class TestSettingsBinding:
    """Test Settings model environment variable binding."""

    @pytest.mark.parametrize(
        "env_name,value,attribute,expected",
        [
            ("ORM_PITFALLS_SERVER_HOST", "127.0.0.1", "server_host", "127.0.0.1"),
            ("ORM_PITFALLS_SERVER_PORT", "9000", "server_port", 9000),
            ("ORM_PITFALLS_LOG_LEVEL", "DEBUG", "log_level", "DEBUG"),
            ("ORM_PITFALLS_LOG_FORMAT", "json", "log_format", "json"),
            ("ORM_PITFALLS_ENABLE_FILE_LOGGING", "true", "enable_file_logging", True),
            ("DATABASE_URL", "sqlite+aiosqlite:///demo.db", "database_url", "sqlite+aiosqlite:///demo.db"),
            ("DATABASE_ECHO", "1", "database_echo", True),
            ("CORS_ORIGINS", '["http://localhost:3000"]', "cors_origins", ["http://localhost:3000"]),
            ("CORS_ALLOW_CREDENTIALS", "false", "cors_allow_credentials", False),
        ],
    )
    def test_environment_binding(self, clean_env, env_name, value, attribute, expected):
        clean_env.setenv(env_name, value)

        settings = Settings(_env_file=None)

        assert getattr(settings, attribute) == expected


class TestGroupedConfiguration:
    def test_database_config(self, clean_env):
        clean_env.setenv("DATABASE_URL", "postgresql://u:p@db:5432/pitfalls")
        clean_env.setenv("DATABASE_ECHO", "true")

        database = Settings(_env_file=None).database

        assert isinstance(database, DatabaseConfig)
        assert database.url == "postgresql://u:p@db:5432/pitfalls"
        assert database.echo is True

    def test_logging_config(self, clean_env):
        clean_env.setenv("ORM_PITFALLS_LOG_LEVEL", "WARNING")
        clean_env.setenv("ORM_PITFALLS_LOG_FORMAT", "simple")

        logging_config = Settings(_env_file=None).logging

        assert isinstance(logging_config, LoggingConfig)
        assert logging_config.level == "WARNING"
        assert logging_config.format == "simple"
        assert logging_config.file_dir == "logs"

    def test_cors_config(self, clean_env):
        clean_env.setenv("CORS_ORIGINS", '["https://example.com"]')
        clean_env.setenv("CORS_ALLOW_CREDENTIALS", "false")

        cors = Settings(_env_file=None).cors

        assert isinstance(cors, CORSConfig)
        assert cors.origins == ["https://example.com"]
        assert cors.allow_credentials is False
        assert cors.allow_methods == ["*"]
        assert cors.allow_headers == ["*"]


class TestConstants:
    def test_route_prefixes(self):
        assert constant.PROBLEMS_PREFIX == "/problems"
        assert constant.SOLUTIONS_PREFIX == "/problems/solutions"
        assert constant.API_VERSION
