"""Turning connections.toml profiles into ClientOptions."""

import sys
from pathlib import Path
from typing import Dict, Union, Optional, Any, Mapping

# Use tomllib for Python 3.11+, fallback to tomli for older versions
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from pydantic import SecretStr

from snowclient.connection.options import ClientOptions, OPTION_NAMES
from snowclient.errors import ValidationError

from .paths import resolve_config_path

# Snowflake CLI spellings of ClientOptions fields
PROFILE_ALIASES = {
    "user": "username",
    "private_key_path": "private_key_file",
}

_BOOL_OPTIONS = {"use_keyring"}


def _read_profiles(path: Optional[Union[str, Path]]) -> tuple[Path, Dict[str, Any]]:
    config_file = resolve_config_path(path)

    if not config_file.exists():
        raise FileNotFoundError(
            f"Snowflake configuration file not found at {config_file}. " +
            "Create a connections.toml file or see connections.toml.example for template."
        )

    with open(config_file, "rb") as f:
        return config_file, tomllib.load(f)


def normalize_profile(profile: str, values: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Map raw profile keys onto ClientOptions field names.

    Keys are matched case-insensitively and Snowflake CLI aliases are applied.
    Keys that are not options pass through untouched to be forwarded to the
    driver. A ``[profile.extra]`` sub-table is merged into ``extra``.

    Raises:
        ValidationError: If an option is given twice (e.g. ``user`` and
            ``username``), has the wrong type, or a nested table appears
            where a value is expected
    """
    normalized: Dict[str, Any] = {}
    extra: Dict[str, Any] = {}
    sources: Dict[str, str] = {}

    for key, value in values.items():
        name = PROFILE_ALIASES.get(key.lower(), key.lower())

        if name == "extra":
            if not isinstance(value, Mapping):
                raise ValidationError(f"Profile '{profile}': 'extra' must be a table")
            extra.update(value)
            continue

        if name not in OPTION_NAMES:
            extra[key] = value
            continue

        if name in sources:
            raise ValidationError(
                f"Profile '{profile}' sets '{name}' twice (as '{sources[name]}' and '{key}')"
            )
        expected, described = (bool, "true or false") if name in _BOOL_OPTIONS else ((str, SecretStr), "a string")
        if value is not None and not isinstance(value, expected):
            raise ValidationError(f"Profile '{profile}': '{key}' must be {described}")

        sources[name] = key
        normalized[name] = value

    if extra:
        normalized["extra"] = extra
    return normalized


def load_profile(
    profile: str,
    path: Optional[Union[str, Path]] = None
) -> Dict[str, Any]:
    """
    Load one profile from connections.toml, normalized to ClientOptions field names.

    Args:
        profile: Name of the profile (top-level table) to load
        path: Optional explicit path to connections.toml.
              If None, the candidate locations are searched.

    Returns:
        Mapping of option name to value, unknown keys collected under ``extra``

    Raises:
        FileNotFoundError: If connections.toml file is not found
        KeyError: If the specified profile doesn't exist in the file
        ValidationError: If the profile's keys or values are malformed

    Example:
        >>> load_profile("dev")
        {'account': 'myaccount', 'username': 'myuser', 'warehouse': 'DEV_WH'}
    """
    config_file, all_profiles = _read_profiles(path)

    if profile not in all_profiles:
        available = ", ".join(all_profiles.keys())
        raise KeyError(
            f"Profile '{profile}' not found in {config_file}. " +
            f"Available profiles: {available}"
        )

    values = all_profiles[profile]
    if not isinstance(values, Mapping):
        raise ValidationError(f"Profile '{profile}' in {config_file} is not a table")

    return normalize_profile(profile, values)


def load_options(
    profile: str,
    path: Optional[Union[str, Path]] = None,
    **overrides: Any,
) -> ClientOptions:
    """
    Build ClientOptions from a profile, with keyword overrides applied on top.

    Overrides use the same names a profile may use. When ``use_keyring`` is on
    and no ``keyring_service`` is given, it defaults to ``snowclient.<profile>``.

    Example:
        >>> opts = load_options("dev", warehouse="BIG_WH")
    """
    cfg = load_profile(profile, path=path)
    override_cfg = normalize_profile(profile, overrides)

    extra = {**cfg.pop("extra", {}), **override_cfg.pop("extra", {})}
    cfg.update(override_cfg)
    cfg["extra"] = extra

    if cfg.get("use_keyring") and "keyring_service" not in cfg:
        cfg["keyring_service"] = f"snowclient.{profile}"

    return ClientOptions.from_mapping(cfg)


def list_profiles(path: Optional[Union[str, Path]] = None) -> list[str]:
    """
    List profile names in connections.toml, or [] if an explicit path does not exist.

    Example:
        >>> list_profiles()
        ['default', 'dev', 'prod']
    """
    config_file = resolve_config_path(path)

    if not config_file.exists():
        return []

    return list(_read_profiles(config_file)[1].keys())
