from __future__ import annotations

import os
from pathlib import Path

import pytest
from dotenv import load_dotenv

# Load dotenv files early so test fixtures can read settings via os.getenv
TEST_ROOT = Path(__file__).resolve().parent
load_dotenv(TEST_ROOT / ".env", override=False)

# Unit tests run against in-memory SQLite; set before the app module builds its engine
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"

# Import test settings after dotenv is loaded
from test.settings import test_settings  # noqa: E402


@pytest.fixture(scope="session")
def test_config():
    """Fixture providing test configuration from Pydantic settings model.

    Returns:
        TestSettings: Test configuration with all environment variables loaded
    """
    return test_settings
