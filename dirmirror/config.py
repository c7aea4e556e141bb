"""Configuration management for dirmirror."""

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

from .exceptions import DirMirrorConfigError
from .utils import DEFAULT_HASH_CHUNK_SIZE

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.json"

DEFAULTS: dict[str, Any] = {
    "default_strategy": "full",
    "hash_chunk_size": DEFAULT_HASH_CHUNK_SIZE,
    "replace_mismatched": False,
    "exclude_dot_files": False,
    "ignore_patterns": [],
}

ENV_OVERRIDES: dict[str, str] = {
    "default_strategy": "DIRMIRROR_STRATEGY",
    "hash_chunk_size": "DIRMIRROR_HASH_CHUNK_SIZE",
    "replace_mismatched": "DIRMIRROR_REPLACE_MISMATCHED",
}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _coerce(key: str, value: Any) -> Any:
    """Convert a raw value (from JSON, env or CLI) to the type of its default.

    Args:
        key: Configuration key
        value: Raw value

    Returns:
        Value converted to the expected type

    Raises:
        DirMirrorConfigError: If the key is unknown or the value is invalid
    """
    if key not in DEFAULTS:
        raise DirMirrorConfigError(f"Unknown configuration key: {key}")

    default = DEFAULTS[key]
    if isinstance(default, bool):
        if isinstance(value, bool):
            return value
        text = str(value).strip().lower()
        if text in _TRUE_VALUES:
            return True
        if text in _FALSE_VALUES:
            return False
        raise DirMirrorConfigError(f"Invalid boolean for {key}: {value!r}")

    if isinstance(default, int):
        try:
            number = int(value)
        except (TypeError, ValueError) as e:
            raise DirMirrorConfigError(f"Invalid integer for {key}: {value!r}") from e
        if number < 1:
            raise DirMirrorConfigError(f"{key} must be a positive integer")
        return number

    if isinstance(default, list):
        if isinstance(value, str):
            return [p.strip() for p in value.split(",") if p.strip()]
        if isinstance(value, list):
            return [str(p) for p in value]
        raise DirMirrorConfigError(f"Invalid list for {key}: {value!r}")

    if key == "default_strategy":
        text = str(value).strip().lower()
        if text not in ("full", "patch"):
            raise DirMirrorConfigError(
                f"Invalid default_strategy: {value!r} (expected 'full' or 'patch')"
            )
        return text

    return str(value)


class Config:
    """Persistent settings stored as JSON in the user's config directory.

    Values are resolved in this order: environment variable, config file,
    built-in default.
    """

    def __init__(self, config_dir: Optional[Path] = None):
        """Initialize configuration.

        Args:
            config_dir: Directory holding config.json. Defaults to
                $DIRMIRROR_CONFIG_DIR or ~/.config/dirmirror
        """
        self._config_dir = config_dir
        self._data: Optional[dict[str, Any]] = None

    def get_config_dir(self) -> Path:
        """Get the configuration directory."""
        if self._config_dir is not None:
            return self._config_dir
        env_dir = os.environ.get("DIRMIRROR_CONFIG_DIR")
        if env_dir:
            return Path(env_dir)
        return Path.home() / ".config" / "dirmirror"

    def get_config_path(self) -> Path:
        """Get the path of the configuration file."""
        return self.get_config_dir() / CONFIG_FILENAME

    def load(self) -> dict[str, Any]:
        """Load settings from disk.

        A missing file yields an empty mapping.

        Returns:
            Raw settings read from the config file

        Raises:
            DirMirrorConfigError: If the file is not valid JSON
        """
        path = self.get_config_path()
        if not path.exists():
            self._data = {}
            return self._data

        try:
            with path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except json.JSONDecodeError as e:
            raise DirMirrorConfigError(f"Invalid config file {path}: {e}") from e
        except OSError as e:
            raise DirMirrorConfigError(f"Cannot read config file {path}: {e}") from e

        if not isinstance(data, dict):
            raise DirMirrorConfigError(f"Config file {path} must contain an object")

        logger.debug("Loaded config from %s", path)
        self._data = data
        return self._data

    def save(self) -> Path:
        """Write the current settings to disk.

        Returns:
            Path of the written config file
        """
        path = self.get_config_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as fh:
            json.dump(self._settings(), fh, indent=2, sort_keys=True)
            fh.write("\n")
        logger.debug("Saved config to %s", path)
        return path

    def _settings(self) -> dict[str, Any]:
        if self._data is None:
            self.load()
        assert self._data is not None
        return self._data

    def get(self, key: str) -> Any:
        """Get the effective value of a setting.

        Args:
            key: Configuration key

        Returns:
            The value from the environment, the config file or the default
        """
        if key not in DEFAULTS:
            raise DirMirrorConfigError(f"Unknown configuration key: {key}")

        env_name = ENV_OVERRIDES.get(key)
        if env_name and os.environ.get(env_name):
            return _coerce(key, os.environ[env_name])

        settings = self._settings()
        if key in settings:
            return _coerce(key, settings[key])
        return DEFAULTS[key]

    def set(self, key: str, value: Any) -> Any:
        """Validate and store a setting (call save() to persist it).

        Returns:
            The converted value that was stored
        """
        converted = _coerce(key, value)
        self._settings()[key] = converted
        return converted

    def as_dict(self) -> dict[str, Any]:
        """Get all effective settings."""
        return {key: self.get(key) for key in DEFAULTS}

    def is_configured(self) -> bool:
        """Check whether a config file exists."""
        return self.get_config_path().exists()

    def get_default_strategy(self) -> str:
        """Get the default sync strategy name."""
        return str(self.get("default_strategy"))

    def get_hash_chunk_size(self) -> int:
        """Get the read size used for content hashing."""
        return int(self.get("hash_chunk_size"))


# Global config instance
config = Config()
