import json
import logging
import os
from pathlib import Path
from pydantic import ValidationError

from .schemas import AppConfig

log = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".starter-kit"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.json"
CONFIG_PATH_ENV = "STARTER_KIT_CONFIG"


def get_config_path() -> Path:
    """The settings file, overridable through STARTER_KIT_CONFIG."""
    override = os.environ.get(CONFIG_PATH_ENV)
    return Path(override).expanduser() if override else DEFAULT_CONFIG_FILE


def load_config(config_path: Path) -> tuple[AppConfig, bool]:
    """
    Loads installer settings from an optional JSON file.

    A missing file means built-in defaults. An unreadable or invalid file also
    yields defaults, flagged so the caller can tell the user.

    Returns:
        tuple: (AppConfig, fell_back_to_defaults)
    """
    if not config_path.exists():
        log.debug(f"No settings file at {config_path}, using defaults")
        return AppConfig(), False

    try:
        with open(config_path, "r") as f:
            data = json.load(f)
        return AppConfig(**data), False
    except (json.JSONDecodeError, ValidationError, TypeError) as e:
        log.debug(f"Config fallback: {type(e).__name__}")
        return AppConfig(), True


class Config:
    """A configuration manager that handles loading and accessing installer settings."""

    def __init__(self, config_path: Path = None):
        self._config_path = config_path or get_config_path()
        self._app_config, self._fell_back_to_defaults = load_config(self._config_path)
        if self._fell_back_to_defaults:
            log.warning(f"Settings file {self._config_path} is invalid. Using default settings.")

    @property
    def app_config(self) -> AppConfig:
        """Returns the loaded AppConfig object."""
        return self._app_config

    @property
    def fell_back_to_defaults(self) -> bool:
        """Returns True if the config fell back to defaults due to loading errors."""
        return self._fell_back_to_defaults

    @property
    def path(self) -> Path:
        return self._config_path

