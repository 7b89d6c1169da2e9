"""
Configuration loading and saving.

Settings are read from an optional YAML or JSON file; ``RESUMABLE_*``
environment variables are then layered on top of the file's values.
"""

import json
import os
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

import yaml

from .models import ApplicationConfig

ENV_PREFIX = "RESUMABLE_"

_YAML_SUFFIXES = ('.yaml', '.yml')


def parse_bool(value: str) -> bool:
    """Interpret common truthy spellings (``1``, ``true``, ``yes``, ``on``)."""
    return value.strip().lower() in ('true', '1', 'yes', 'on', 'enabled')


# env var suffix -> (dotted config path, converter)
ENV_OVERRIDES: Dict[str, Tuple[str, Callable[[str], Any]]] = {
    "DEBUG": ("debug", parse_bool),
    "SERVER_URL": ("server.base_url", str),
    "TIMEOUT": ("server.timeout", float),
    "CHUNK_SIZE": ("upload.chunk_size", int),
    "PROGRESS_STEP": ("upload.progress_step", int),
    "LOG_LEVEL": ("logging.level", str),
    "LOG_DIR": ("logging.log_directory", str),
    "LOG_FILE_ENABLED": ("logging.file_enabled", parse_bool),
}


class ConfigLoader:
    """Builds an ApplicationConfig from a file plus the environment."""

    def __init__(self, env_prefix: str = ENV_PREFIX) -> None:
        self._env_prefix = env_prefix

    def load_config(self, config_file: Optional[str] = None) -> ApplicationConfig:
        """
        Load configuration from file and environment variables.

        Args:
            config_file: Path to a ``.yaml``/``.yml``/``.json`` file (optional)

        Returns:
            Validated configuration

        Raises:
            FileNotFoundError: The file does not exist
            ValueError: Unreadable file, bad syntax, bad environment value
                or a setting out of range
        """
        data = read_config_file(config_file) if config_file else {}
        data = merge_dicts(data, self.environment_overrides())

        config = ApplicationConfig.from_dict(data)
        config.config_file_path = config_file
        return config

    def save_config(self, config: ApplicationConfig, file_path: str, format: str = "yaml") -> None:
        """
        Write ``config`` to ``file_path`` as YAML or JSON.

        Raises:
            ValueError: Unsupported format or the file cannot be written
        """
        data = config.to_dict()
        data.pop('config_file_path', None)

        fmt = format.lower()
        if fmt not in ("yaml", "json"):
            raise ValueError(f"Unsupported format: {format}")

        try:
            with open(file_path, 'w', encoding='utf-8') as f:
                if fmt == "yaml":
                    yaml.safe_dump(data, f, default_flow_style=False, indent=2)
                else:
                    json.dump(data, f, indent=2)
        except OSError as e:
            raise ValueError(f"Error writing {fmt.upper()} to {file_path}: {e}")

    def environment_overrides(self) -> Dict[str, Any]:
        """Collect the overrides present in the environment as a nested dict."""
        overrides: Dict[str, Any] = {}

        for suffix, (path, convert) in ENV_OVERRIDES.items():
            name = f"{self._env_prefix}{suffix}"
            raw = os.getenv(name)
            if raw is None:
                continue
            try:
                value = convert(raw)
            except (ValueError, TypeError) as e:
                raise ValueError(f"Invalid value for {name}: {raw} ({e})")
            set_path(overrides, path, value)

        return overrides


def read_config_file(file_path: str) -> Dict[str, Any]:
    """Parse a YAML or JSON configuration file into a dict."""
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {file_path}")

    suffix = path.suffix.lower()
    if suffix not in _YAML_SUFFIXES and suffix != '.json':
        raise ValueError(f"Unsupported configuration file format: {path.suffix}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            if suffix in _YAML_SUFFIXES:
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {file_path}: {e}")
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {file_path}: {e}")
    except OSError as e:
        raise ValueError(f"Error reading {file_path}: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Configuration in {file_path} must be a mapping")
    return data


def set_path(target: Dict[str, Any], dotted: str, value: Any) -> None:
    """Assign ``value`` at a dotted path such as ``server.timeout``."""
    *parents, leaf = dotted.split('.')
    for key in parents:
        target = target.setdefault(key, {})
    target[leaf] = value


def merge_dicts(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = merge_dicts(current, value)
        else:
            merged[key] = value
    return merged
