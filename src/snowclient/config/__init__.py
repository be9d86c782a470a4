"""Configuration module exports."""

from .config import load_profile, load_options, list_profiles, normalize_profile
from .paths import resolve_config_path, get_default_config_path, candidate_config_paths, CONF_DIR

__all__ = [
    "load_profile",
    "load_options",
    "list_profiles",
    "normalize_profile",
    "resolve_config_path",
    "get_default_config_path",
    "candidate_config_paths",
    "CONF_DIR",
]
