"""Where deskboard keeps its config file and log exports."""

from __future__ import annotations

import os
from pathlib import Path

from platformdirs import user_config_dir, user_data_dir

APP_NAME = "deskboard"
CONFIG_DIR_ENV_VAR = "DESKBOARD_CONFIG_DIR"
DATA_DIR_ENV_VAR = "DESKBOARD_DATA_DIR"


def _resolve(env_var: str, platform_default: str) -> Path:
    # An empty override counts as unset.
    return Path(os.environ.get(env_var) or platform_default)


def get_config_dir() -> Path:
    return _resolve(CONFIG_DIR_ENV_VAR, user_config_dir(APP_NAME))


def get_data_dir() -> Path:
    return _resolve(DATA_DIR_ENV_VAR, user_data_dir(APP_NAME))


def ensure_directories() -> None:
    for directory in (get_config_dir(), get_data_dir()):
        directory.mkdir(parents=True, exist_ok=True)


def get_config_path() -> Path:
    """``config.toml`` inside the config directory."""
    return get_config_dir() / "config.toml"


def get_debug_log_path() -> Path:
    """Target of the debug log viewer's save action."""
    return get_data_dir() / "debug.log"
