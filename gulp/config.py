"""
Configuration — Centralized settings management

Config hierarchy (highest to lowest priority):
  1. Environment variables (GULP_COLOR, GULP_LOG_LEVEL, GULP_LOG_DIR, GULP_STORE_PATH)
  2. User config (~/.gulp/config.yaml)
  3. Defaults

The settings JSON passed with --settings is a different thing: it is
applied to the running components after startup (see components.settings).
"""

import logging
import os
import yaml
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional, Dict, Any


def gulp_home() -> Path:
    """Per-user gulp directory (~/.gulp)."""
    return Path.home() / ".gulp"


@dataclass
class DisplayConfig:
    """Display preferences."""
    color: str = "auto"  # "auto" | "always" | "never"

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        valid = ("auto", "always", "never")
        if self.color not in valid:
            return f"Unknown color setting '{self.color}'. Valid: {', '.join(valid)}"
        return None


@dataclass
class LoggingConfig:
    """Log destinations and verbosity."""
    level: str = "INFO"
    directory: Optional[str] = None  # None = ~/.gulp/logs
    recent_lines: int = 200          # Lines kept in memory for the `log` command

    @property
    def log_dir(self) -> Path:
        if self.directory:
            return Path(self.directory).expanduser()
        return gulp_home() / "logs"

    @property
    def level_number(self) -> int:
        return logging.getLevelName(self.level.upper())

    def validate(self) -> Optional[str]:
        if not isinstance(self.level_number, int):
            return f"Unknown log level '{self.level}'"
        if self.recent_lines < 1:
            return "logging.recent_lines must be >= 1"
        return None


@dataclass
class StoreConfig:
    """Persistent store location."""
    path: Optional[str] = None  # None = ~/.gulp/db/resources.sqlite3

    @property
    def store_path(self) -> Path:
        if self.path:
            return Path(self.path).expanduser()
        return gulp_home() / "db" / "resources.sqlite3"


@dataclass
class Config:
    """Application configuration."""
    display: DisplayConfig = field(default_factory=DisplayConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    store: StoreConfig = field(default_factory=StoreConfig)

    def validate(self) -> Optional[str]:
        """First validation error across sections, or None."""
        for section in (self.display, self.logging):
            error = section.validate()
            if error:
                return error
        return None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """
        Create from dictionary. Sections that are not mappings count as empty.

        Raises:
            ValueError: If logging.recent_lines is not an integer
        """
        display_data = _section(data, "display")
        logging_data = _section(data, "logging")
        store_data = _section(data, "store")

        return cls(
            display=DisplayConfig(
                color=str(display_data.get("color", "auto"))
            ),
            logging=LoggingConfig(
                level=str(logging_data.get("level", "INFO")),
                directory=_optional_str(logging_data.get("directory")),
                recent_lines=int(logging_data.get("recent_lines", 200))
            ),
            store=StoreConfig(
                path=_optional_str(store_data.get("path"))
            )
        )


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = data.get(name)
    return value if isinstance(value, dict) else {}


def _optional_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


class ConfigManager:
    """
    Manages configuration loading.

    Hierarchy:
      1. Environment variables
      2. User config (~/.gulp/config.yaml)
      3. Defaults
    """

    CONFIG_FILE = "config.yaml"

    # Environment variable -> (section, setting)
    ENV_OVERRIDES = {
        "GULP_COLOR": ("display", "color"),
        "GULP_LOG_LEVEL": ("logging", "level"),
        "GULP_LOG_DIR": ("logging", "directory"),
        "GULP_STORE_PATH": ("store", "path"),
    }

    def __init__(self, config_dir: Optional[Path] = None):
        self.config_dir = Path(config_dir) if config_dir else gulp_home()
        self._config: Optional[Config] = None

    @property
    def config_path(self) -> Path:
        return self.config_dir / self.CONFIG_FILE

    def load(self) -> Config:
        """
        Load configuration from all sources.

        A user config that cannot be read, parsed or converted is ignored;
        environment overrides still apply.
        """
        if self._config is not None:
            return self._config

        # Layer 1: User config
        file_data: Dict[str, Any] = {}
        if self.config_path.exists():
            try:
                with open(self.config_path) as f:
                    user_data = yaml.safe_load(f) or {}
                if isinstance(user_data, dict):
                    file_data = {k: v for k, v in user_data.items() if isinstance(v, dict)}
            except (OSError, yaml.YAMLError):
                pass  # Ignore malformed user config

        # Layer 2: Environment overrides
        env_data: Dict[str, Any] = {}
        for env_key, (section, setting) in self.ENV_OVERRIDES.items():
            if os.environ.get(env_key):
                env_data.setdefault(section, {})[setting] = os.environ[env_key]

        try:
            self._config = Config.from_dict(self._merge(file_data, env_data))
        except (TypeError, ValueError):
            self._config = Config.from_dict(env_data)
        return self._config

    def _merge(self, base: Dict, override: Dict) -> Dict:
        """Deep merge two dicts, override wins."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge(result[key], value)
            else:
                result[key] = value
        return result


def get_config(config_dir: Optional[Path] = None) -> Config:
    """Load configuration for the current user."""
    return ConfigManager(config_dir).load()
