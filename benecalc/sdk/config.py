"""Configuration management for Bene Calc.

Two files live in the config directory:

    settings.json   where things are on this machine
                    (data_dir, store_path, profile)
    profile.yaml    the benefits plan (costs, discount rule, paycheck figures)

The config directory is BENE_CALC_CONFIG_PATH when set, else
$XDG_CONFIG_HOME/bene-calc/. A settings.json "profile" key moves profile.yaml
elsewhere. The employee store defaults to $XDG_DATA_HOME/bene-calc/employees.json;
"data_dir" and "store_path" override it.
"""

import json
import os
from pathlib import Path
from typing import Any, Optional

import yaml


APP_NAME = "bene-calc"
SETTINGS_FILENAME = "settings.json"
PROFILE_FILENAME = "profile.yaml"
STORE_FILENAME = "employees.json"


class ConfigNotFoundError(Exception):
    """Raised when settings.json is missing where required or cannot be parsed."""
    pass


class ProfileNotFoundError(Exception):
    """Raised when no profile is found."""
    pass


def _xdg_dir(env_var: str, fallback: Path) -> Path:
    return Path(os.environ.get(env_var) or fallback) / APP_NAME


def _dig(document: Any, key: str, default: Any = None) -> Any:
    """Follow a dot-notation key through nested dicts."""
    for part in key.split("."):
        if not isinstance(document, dict) or part not in document:
            return default
        document = document[part]
    return document


def _plant(document: dict, key: str, value: Any) -> dict:
    """Set a dot-notation key, replacing missing or non-dict parents with dicts."""
    *parents, leaf = key.split(".")
    node = document
    for part in parents:
        if not isinstance(node.get(part), dict):
            node[part] = {}
        node = node[part]
    node[leaf] = value
    return document


# =============================================================================
# settings.json
# =============================================================================

def get_config_dir() -> Path:
    """Config directory: BENE_CALC_CONFIG_PATH, else XDG_CONFIG_HOME/bene-calc."""
    env_path = os.environ.get("BENE_CALC_CONFIG_PATH")
    if env_path:
        return Path(env_path)
    return _xdg_dir("XDG_CONFIG_HOME", Path.home() / ".config")


def get_settings_path() -> Path:
    """Path to settings.json (may not exist yet)."""
    return get_config_dir() / SETTINGS_FILENAME


def load_settings() -> dict:
    """Load settings.json, or {} when it does not exist.

    Raises:
        ConfigNotFoundError: If settings.json is not a JSON object
    """
    path = get_settings_path()
    if not path.exists():
        return {}

    try:
        settings = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        raise ConfigNotFoundError(f"Invalid settings file {path}: {e}")
    if not isinstance(settings, dict):
        raise ConfigNotFoundError(f"Invalid settings file {path}: expected a JSON object")
    return settings


def save_settings(settings: dict) -> Path:
    """Write settings.json, creating the config directory. Returns its path."""
    path = get_settings_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(settings, indent=2))
    return path


def get_setting(key: str, default: Any = None) -> Any:
    return _dig(load_settings(), key, default)


def set_setting(key: str, value: Any) -> Path:
    return save_settings(_plant(load_settings(), key, value))


# =============================================================================
# profile.yaml
# =============================================================================

def get_profile_path(require_exists: bool = False) -> Path:
    """Path to profile.yaml: settings.json "profile", else the config directory.

    Raises:
        ProfileNotFoundError: If require_exists=True and the file is absent
    """
    custom_profile = get_setting("profile")
    path = Path(custom_profile) if custom_profile else get_config_dir() / PROFILE_FILENAME

    if require_exists and not path.exists():
        where = "configured path" if custom_profile else "default location"
        raise ProfileNotFoundError(
            f"Profile not found at {where}: {path}\n\n"
            f"Create one with: bene-calc profile init"
        )
    return path


def load_profile(require_exists: bool = True) -> dict:
    """Load profile.yaml ({} when absent and not required).

    The top level is returned as parsed; callers validate its shape.

    Raises:
        ProfileNotFoundError: If require_exists=True and the file is absent
        yaml.YAMLError: If the file is not valid YAML
    """
    path = get_profile_path(require_exists=require_exists)
    if not path.exists():
        return {}

    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def save_profile(profile: dict, path: Optional[Path] = None) -> Path:
    """Write profile.yaml (default location unless path is given). Returns its path."""
    path = path or get_profile_path(require_exists=False)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        yaml.dump(profile, f, default_flow_style=False, sort_keys=False)
    return path


def get_profile_value(key: str, default: Any = None) -> Any:
    """Profile value by dot-notation key, e.g. "benefits.paycheck_amount"."""
    return _dig(load_profile(require_exists=False), key, default)


def set_profile_value(key: str, value: Any) -> Path:
    """Set a profile value by dot-notation key and save the profile."""
    profile = load_profile(require_exists=False)
    if not isinstance(profile, dict):
        profile = {}
    return save_profile(_plant(profile, key, value))


# =============================================================================
# Data paths
# =============================================================================

def get_data_path() -> Path:
    """Data directory (created if missing): settings "data_dir", else XDG_DATA_HOME/bene-calc."""
    custom_data_dir = get_setting("data_dir")
    if custom_data_dir:
        data_path = Path(custom_data_dir).expanduser()
    else:
        data_path = _xdg_dir("XDG_DATA_HOME", Path.home() / ".local" / "share")
    data_path.mkdir(parents=True, exist_ok=True)
    return data_path


def get_store_path() -> Path:
    """Employee store document: settings "store_path", else <data dir>/employees.json."""
    custom_store = get_setting("store_path")
    if custom_store:
        return Path(custom_store).expanduser()
    return get_data_path() / STORE_FILENAME
