"""
User configuration management for samepic.

Every setting is resolved in this order, first hit wins:
1. Command-line flag
2. Environment variable (SAMEPIC_*)
3. User config file (~/.samepic/config.json, directory overridable
   with SAMEPIC_CONFIG_DIR)
4. Built-in default from config.py

Example config.json:
{
    "hash_threshold": 10,
    "time_window_minutes": 30,
    "workers": 4,
    "hash_size": 8,
    "hash_algorithm": "dhash",
    "cache_capacity": 64,
    "opener": null
}
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, NamedTuple, Optional

from .config import (
    CONFIG_DIR,
    DEFAULT_CACHE_CAPACITY,
    DEFAULT_HASH_ALGORITHM,
    DEFAULT_HASH_SIZE,
    DEFAULT_HASH_THRESHOLD,
    DEFAULT_TIME_WINDOW_MINUTES,
    DEFAULT_WORKERS,
)

logger = logging.getLogger(__name__)

CONFIG_FILENAME = 'config.json'


class Setting(NamedTuple):
    key: str
    env_var: str
    default: Any
    kind: type


SETTINGS = (
    Setting('hash_threshold', 'SAMEPIC_HASH_THRESHOLD', DEFAULT_HASH_THRESHOLD, int),
    Setting('time_window_minutes', 'SAMEPIC_TIME_WINDOW', DEFAULT_TIME_WINDOW_MINUTES, float),
    Setting('workers', 'SAMEPIC_WORKERS', DEFAULT_WORKERS, int),
    Setting('hash_size', 'SAMEPIC_HASH_SIZE', DEFAULT_HASH_SIZE, int),
    Setting('hash_algorithm', 'SAMEPIC_HASH_ALGORITHM', DEFAULT_HASH_ALGORITHM, str),
    Setting('cache_capacity', 'SAMEPIC_CACHE_CAPACITY', DEFAULT_CACHE_CAPACITY, int),
    Setting('opener', 'SAMEPIC_OPENER', None, str),
)

_SETTINGS_BY_KEY = {setting.key: setting for setting in SETTINGS}


def _coerce(setting: Setting, value: Any, source: str) -> Any:
    """
    Convert a raw value to the setting's type.

    Unusable values are logged and replaced by the default.
    """
    if value is None:
        return None
    if setting.kind is str:
        return str(value)
    try:
        converted = setting.kind(value)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring {setting.key}={value!r} from {source}: not a valid {setting.kind.__name__}")
        return setting.default
    # Keep whole-number floats (30.0) readable as ints
    if isinstance(converted, float) and converted.is_integer():
        return int(converted)
    return converted


class UserConfig:
    """
    Runtime defaults for the CLI.

    A process-wide singleton; the config file is read lazily and cached
    until reload().
    """

    _instance: Optional['UserConfig'] = None
    _file_values: Optional[dict] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @property
    def config_dir(self) -> Path:
        override = os.getenv('SAMEPIC_CONFIG_DIR')
        return Path(override) if override else Path(CONFIG_DIR)

    @property
    def config_file_path(self) -> Path:
        return self.config_dir / CONFIG_FILENAME

    def _read_file(self) -> dict:
        path = self.config_file_path
        if not path.exists():
            return {}

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to load config file {path}: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Ignoring config file {path}: top level is not an object")
            return {}

        unknown = sorted(k for k in data if k not in _SETTINGS_BY_KEY and not k.startswith('_'))
        if unknown:
            logger.warning(f"Unknown settings in {path}: {', '.join(unknown)}")
        logger.debug(f"Loaded configuration from {path}")
        return data

    def _file(self) -> dict:
        if self._file_values is None:
            self._file_values = self._read_file()
        return self._file_values

    def reload(self):
        """Forget the cached config file contents."""
        self._file_values = None

    def get(self, key: str) -> Any:
        """
        Effective value of a named setting.

        Args:
            key: One of the keys in SETTINGS

        Returns:
            The environment value, else the config file value, else the default

        Raises:
            KeyError: If key is not a known setting
        """
        setting = _SETTINGS_BY_KEY[key]

        env_value = os.getenv(setting.env_var)
        if env_value is not None:
            # JSON accepts numbers and null; anything else is a plain string
            try:
                raw = json.loads(env_value)
            except json.JSONDecodeError:
                raw = env_value
            return _coerce(setting, raw, setting.env_var)

        file_values = self._file()
        if key in file_values:
            return _coerce(setting, file_values[key], str(self.config_file_path))

        return setting.default

    @property
    def hash_threshold(self) -> int:
        """Hamming distance threshold of the match predicate."""
        return self.get('hash_threshold')

    @property
    def time_window_minutes(self) -> float:
        """Capture time window of the match predicate, in minutes."""
        return self.get('time_window_minutes')

    @property
    def workers(self) -> int:
        return self.get('workers')

    @property
    def hash_size(self) -> int:
        """Perceptual hash side length (bits = hash_size ** 2)."""
        return self.get('hash_size')

    @property
    def hash_algorithm(self) -> str:
        return self.get('hash_algorithm')

    @property
    def cache_capacity(self) -> int:
        """Number of previews kept by the review cache."""
        return self.get('cache_capacity')

    @property
    def opener(self) -> Optional[str]:
        """Program used to open pile folders (None = OS default)."""
        return self.get('opener')

    def as_dict(self) -> dict:
        """Effective value of every setting."""
        return {setting.key: self.get(setting.key) for setting in SETTINGS}

    def create_example_config(self) -> bool:
        """
        Write a config file holding every setting at its default.

        Returns:
            True on success, False if the file could not be written
        """
        example = {"_comment": "samepic user configuration"}
        example.update({setting.key: setting.default for setting in SETTINGS})

        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.config_file_path, 'w', encoding='utf-8') as f:
                json.dump(example, f, indent=2)
        except OSError as e:
            logger.error(f"Failed to create example config: {e}")
            return False

        logger.info(f"Created example config file at {self.config_file_path}")
        self.reload()
        return True


_user_config = UserConfig()


def get_user_config() -> UserConfig:
    """Get the global UserConfig instance."""
    return _user_config
