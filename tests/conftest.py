"""Pytest configuration and shared fixtures."""

import sys
from typing import Dict, Any
from unittest.mock import MagicMock, patch

# Use tomllib for Python 3.11+, fallback to tomli for older versions
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

import pytest
from snowclient.config import CONF_DIR


def _load_test_config() -> Dict[str, Any]:
    """
    Load integration test configuration from test_config.toml in the config directory.

    Returns an empty dict when the file is missing so unit tests run anywhere.
    """
    test_config_path = CONF_DIR / "test_config.toml"

    if not test_config_path.exists():
        return {}

    with open(test_config_path, "rb") as f:
        config = tomllib.load(f)

    return config.get("test", {})


# Load test config once at module level
_TEST_CONFIG = _load_test_config()


@pytest.fixture(scope="session")
def test_profile() -> str:
    """Snowflake profile to use for integration tests."""
    profile = _TEST_CONFIG.get("profile")
    if not profile:
        pytest.skip(
            f"Integration tests need {CONF_DIR / 'test_config.toml'} " +
            "with 'profile = \"your_profile_name\"' in the [test] section"
        )
    return profile


@pytest.fixture(scope="session")
def test_scratch_table() -> str:
    """Table the integration tests create, fill and drop."""
    return _TEST_CONFIG.get("scratch_table", "SNOWCLIENT_SCRATCH")


@pytest.fixture
def client_kwargs() -> Dict[str, Any]:
    """Minimal password-auth connection options."""
    return {
        "account": "ab13241.us-east-2.aws",
        "username": "loader",
        "password": "hunter2",
        "warehouse": "LOAD_WH",
        "database": "ANALYTICS",
    }


@pytest.fixture
def mock_cursor() -> MagicMock:
    """Driver cursor returning no rows unless a test says otherwise."""
    cursor = MagicMock()
    cursor.fetchall.return_value = []
    cursor.fetchmany.return_value = []
    return cursor


@pytest.fixture
def mock_connection(mock_cursor) -> MagicMock:
    """Open driver connection handing out mock_cursor."""
    connection = MagicMock()
    connection.is_closed.return_value = False
    connection.cursor.return_value = mock_cursor
    return connection


@pytest.fixture
def mock_connect(mock_connection):
    """Patch snowflake.connector.connect to return mock_connection."""
    with patch("snowflake.connector.connect", return_value=mock_connection) as mock:
        yield mock
