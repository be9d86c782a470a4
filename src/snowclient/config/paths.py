"""Locating connections.toml for snowclient profiles."""

import os
from pathlib import Path
from typing import Optional, Union

from importlib.resources import files as importlib_files

CONNECTIONS_FILE = "connections.toml"


def _get_config_directory() -> Path:
    """snowclient's own directory: SNOWCLIENT_CONFIG_DIR, else ~/.snowclient"""
    env_config_dir = os.getenv("SNOWCLIENT_CONFIG_DIR")
    if env_config_dir:
        return Path(env_config_dir)
    return Path.home() / ".snowclient"


def _get_snowflake_home() -> Path:
    """Directory the Snowflake CLI keeps its connections in: SNOWFLAKE_HOME, else ~/.snowflake"""
    snowflake_home = os.getenv("SNOWFLAKE_HOME")
    if snowflake_home:
        return Path(snowflake_home)
    return Path.home() / ".snowflake"


def _get_example_files_dir() -> Path:
    """Get the directory containing example configuration files from the installed package"""
    package_data = importlib_files("snowclient") / "_data"
    return Path(str(package_data))


# Configuration directory (dynamically resolved)
CONF_DIR = _get_config_directory()


def candidate_config_paths() -> list[Path]:
    """
    Places connections.toml is looked for, in priority order.

    1. $SNOWCLIENT_CONFIG_DIR/connections.toml, else ~/.snowclient/connections.toml
    2. $SNOWFLAKE_HOME/connections.toml, else ~/.snowflake/connections.toml

    The second entry lets profiles written for the Snowflake CLI be reused
    as-is (``user`` and ``private_key_path`` keys are accepted).
    """
    return [
        _get_config_directory() / CONNECTIONS_FILE,
        _get_snowflake_home() / CONNECTIONS_FILE,
    ]


def get_default_config_path() -> Path:
    """
    Return the first connections.toml that exists.

    Raises:
        FileNotFoundError: If none of the candidate paths exist
    """
    candidates = candidate_config_paths()
    for path in candidates:
        if path.exists():
            return path

    example_file = _get_example_files_dir() / "connections.toml.example"
    searched = "\n".join(f"  - {path}" for path in candidates)
    raise FileNotFoundError(
        f"No connections.toml found. Searched:\n{searched}\n\n"
        f"Copy {example_file} to {candidates[0]} and edit it, or point "
        "SNOWCLIENT_CONFIG_DIR at a directory containing connections.toml."
    )


def resolve_config_path(path: Optional[Union[str, Path]] = None) -> Path:
    """Explicit path if given, else the first existing candidate"""
    if path:
        return Path(path)
    return get_default_config_path()
