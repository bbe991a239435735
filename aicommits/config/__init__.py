"""Configuration Management Package"""

import json
import re
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from aicommits import COMMIT_TYPE_NAMES

MAX_GENERATE = 5
MIN_TIMEOUT_MS = 500
MIN_MAX_LENGTH = 20
LOCALE_PATTERN = re.compile(r'^[a-z-]+$', re.IGNORECASE)


@dataclass
class Config:
    """User configuration with sensible defaults."""
    api_key: Optional[str] = None
    model: str = "gpt-3.5-turbo"
    locale: str = "en"
    generate: int = 1
    type: str = ""
    proxy: Optional[str] = None
    timeout: int = 10000  # milliseconds
    max_length: int = 50
    retries: Optional[int] = None  # None -> client default (2)
    insecure_tls: bool = False
    host: str = "api.openai.com"

    def validate(self) -> list[str]:
        """Validate config values and return list of warnings.

        Invalid values are replaced with defaults silently after warning.
        """
        warnings = []
        defaults = Config()

        if not isinstance(self.locale, str) or not LOCALE_PATTERN.match(self.locale):
            warnings.append(f"Invalid locale '{self.locale}', using '{defaults.locale}'")
            self.locale = defaults.locale

        if not _is_int(self.generate) or not 1 <= self.generate <= MAX_GENERATE:
            warnings.append(f"Invalid generate '{self.generate}', must be 1-{MAX_GENERATE}, using {defaults.generate}")
            self.generate = defaults.generate

        if self.type not in COMMIT_TYPE_NAMES:
            warnings.append(f"Invalid type '{self.type}', using plain messages")
            self.type = defaults.type

        if not _is_int(self.timeout) or self.timeout < MIN_TIMEOUT_MS:
            warnings.append(f"Invalid timeout '{self.timeout}', must be at least {MIN_TIMEOUT_MS}ms, using {defaults.timeout}")
            self.timeout = defaults.timeout

        if not _is_int(self.max_length) or self.max_length < MIN_MAX_LENGTH:
            warnings.append(f"Invalid max_length '{self.max_length}', must be at least {MIN_MAX_LENGTH}, using {defaults.max_length}")
            self.max_length = defaults.max_length

        if self.retries is not None and (not _is_int(self.retries) or self.retries < 0):
            warnings.append(f"Invalid retries '{self.retries}', using the client default")
            self.retries = defaults.retries

        if not isinstance(self.insecure_tls, bool):
            warnings.append(f"Invalid insecure_tls '{self.insecure_tls}', using false")
            self.insecure_tls = defaults.insecure_tls

        return warnings

    @classmethod
    def from_dict(cls, data: dict) -> 'Config':
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        config = cls(**filtered)
        # Validate and print warnings to stderr
        for warning in config.validate():
            print(f"Config warning: {warning}", file=sys.stderr)
        return config


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class ConfigManager:
    """Loads configuration. Lookup: ./.aicommitsrc, then ~/.aicommitsrc, then defaults."""

    CONFIG_FILENAME = ".aicommitsrc"

    def __init__(self):
        self._config: Optional[Config] = None
        self._config_path: Optional[Path] = None

    def load(self) -> Config:
        if self._config is not None:
            return self._config

        local_path = Path.cwd() / self.CONFIG_FILENAME
        if local_path.exists():
            self._config = self._load_from_file(local_path)
            self._config_path = local_path
            return self._config

        home_path = Path.home() / self.CONFIG_FILENAME
        if home_path.exists():
            self._config = self._load_from_file(home_path)
            self._config_path = home_path
            return self._config

        self._config = Config()
        return self._config

    def _load_from_file(self, path: Path) -> Config:
        try:
            with open(path, 'r') as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("expected a JSON object")
            return Config.from_dict(data)
        except (ValueError, IOError) as e:
            print(f"Warning: Could not load {path}: {e}", file=sys.stderr)
            return Config()

    def get_config_path(self) -> Optional[Path]:
        return self._config_path


_manager = ConfigManager()


def load_config() -> Config:
    return _manager.load()


def get_config_path() -> Optional[Path]:
    return _manager.get_config_path()


__all__ = [
    "Config",
    "ConfigManager",
    "load_config",
    "get_config_path",
]
