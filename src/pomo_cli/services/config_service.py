"""Timer and output settings persisted as config.json.

ConfigService owns the on-disk configuration and hands out the validated
``AppConfig``. Commands reach it through ``get_config_service()``; the
state machine only ever sees the ``TimerSettings`` it is given.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir, user_data_dir

from pomo_cli.models.config_models import AppConfig

APP_NAME = "pomo_cli"
HISTORY_FILE = "history.json"

logger = logging.getLogger(__name__)


class ConfigService:
    """Load, validate and update the application configuration."""

    def __init__(self):
        self.config_dir = Path(user_config_dir(APP_NAME))
        self.config_path = self.config_dir / "config.json"
        self.data_dir = Path(user_data_dir(APP_NAME))

        for directory in (self.config_dir, self.data_dir):
            directory.mkdir(parents=True, exist_ok=True)

        self._config: AppConfig | None = None

    @property
    def config(self) -> AppConfig:
        """Current configuration, read from disk on first access."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    @property
    def history_path(self) -> Path:
        """Location of the session history file."""
        return self.data_dir / HISTORY_FILE

    def load_config(self) -> AppConfig:
        """
        Read config.json, writing defaults on first run.

        Raises:
            RuntimeError: The file exists but cannot be read or validated
        """
        if self._config is not None:
            return self._config

        try:
            raw = self.config_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.info("No config at %s, writing defaults", self.config_path)
            self._config = AppConfig()
            self.save_config()
            return self._config
        except OSError as e:
            raise RuntimeError(f"Failed to load config: {e}") from e

        try:
            self._config = AppConfig.model_validate_json(raw)
        except ValueError as e:
            raise RuntimeError(f"Failed to load config: {e}") from e
        return self._config

    def save_config(self) -> None:
        """Write the current configuration, readable by the owner only."""
        if self._config is None:
            raise RuntimeError("No configuration to save")

        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            self.config_path.write_text(
                self._config.model_dump_json(indent=4), encoding="utf-8"
            )
            self.config_path.chmod(0o600)
        except OSError as e:
            raise RuntimeError(f"Failed to save config: {e}") from e

    def reset_config(self) -> AppConfig:
        """Replace the configuration with defaults."""
        self._config = AppConfig()
        self.save_config()
        logger.info("Configuration reset to defaults")
        return self._config

    def get_value(self, key: str) -> Any:
        return self.config.get_value(key)

    def set_value(self, key: str, value: Any) -> Any:
        """Update a dotted key such as ``timer.target_rounds``.

        The whole config is re-validated, so an invalid value raises
        ``pydantic.ValidationError`` and leaves the stored config untouched.

        Raises:
            KeyError: If the key does not exist
        """
        self.config.get_value(key)
        data = self.config.model_dump()
        section, _, name = key.partition(".")
        if name:
            data[section][name] = value
        else:
            data[section] = value
        self._config = AppConfig.model_validate(data)
        self.save_config()
        logger.info("Config %s set to %r", key, value)
        return self._config.get_value(key)


@lru_cache(maxsize=1)
def get_config_service() -> ConfigService:
    """Shared ConfigService with the configuration already loaded."""
    service = ConfigService()
    service.load_config()
    return service
