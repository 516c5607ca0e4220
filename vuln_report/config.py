# vuln_report/config.py
"""
Settings for report building, read from a YAML file.

Lookup order:
1. explicit path argument
2. VULNREPORT_CONFIG environment variable
3. vulnreport.yaml in the current directory
4. vulnreport.yaml in the per-user config directory (platformdirs)

A missing file means defaults; a present but invalid file raises ConfigError.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml
from platformdirs import user_config_path

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

APP_NAME = "vulnreport"
CONFIG_FILENAME = "vulnreport.yaml"
CONFIG_PATH_ENV_VAR = "VULNREPORT_CONFIG"

OUTPUT_FORMATS = ("text", "json")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Base-image ecosystems listed after language ecosystems in a report
DEFAULT_OS_IMAGE_PREFIXES = ("Debian", "Alpine", "Ubuntu")
# System library paths inside images duplicate OS package findings
DEFAULT_EXCLUDED_SOURCE_FRAGMENTS = ("/usr/lib/",)


@dataclass(frozen=True)
class Settings:
    format: str = "text"
    output_file: Optional[str] = None
    os_image_prefixes: tuple[str, ...] = DEFAULT_OS_IMAGE_PREFIXES
    excluded_source_fragments: tuple[str, ...] = DEFAULT_EXCLUDED_SOURCE_FRAGMENTS
    log_level: str = "WARNING"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Settings":
        output_format = str(data.get("format", "text")).lower()
        if output_format not in OUTPUT_FORMATS:
            raise ConfigError(f"Invalid 'format' {output_format!r} (expected one of {', '.join(OUTPUT_FORMATS)})")

        output_file = data.get("output_file")
        if output_file is not None and not isinstance(output_file, str):
            raise ConfigError("'output_file' must be a string")

        log_level = str(data.get("log_level", "WARNING")).upper()
        if log_level not in LOG_LEVELS:
            raise ConfigError(f"Invalid 'log_level' {log_level!r}")

        return cls(
            format=output_format,
            output_file=output_file,
            os_image_prefixes=_string_tuple(data, "os_image_prefixes", DEFAULT_OS_IMAGE_PREFIXES),
            excluded_source_fragments=_string_tuple(data, "excluded_source_fragments", DEFAULT_EXCLUDED_SOURCE_FRAGMENTS),
            log_level=log_level,
        )


def _string_tuple(data: dict[str, Any], key: str, default: tuple[str, ...]) -> tuple[str, ...]:
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, list) or not all(isinstance(item, str) and item for item in value):
        raise ConfigError(f"'{key}' must be a list of non-empty strings")
    return tuple(value)


def candidate_paths(path: Path | str | None = None) -> list[Path]:
    if path is not None:
        return [Path(path)]
    env_path = os.environ.get(CONFIG_PATH_ENV_VAR)
    if env_path:
        return [Path(env_path)]
    return [Path(CONFIG_FILENAME), user_config_path(APP_NAME) / CONFIG_FILENAME]


def load_settings(path: Path | str | None = None) -> Settings:
    explicit = path is not None or bool(os.environ.get(CONFIG_PATH_ENV_VAR))
    for config_path in candidate_paths(path):
        if config_path.is_file():
            break
    else:
        if explicit:
            raise ConfigError(f"Configuration file not found: {candidate_paths(path)[0]}")
        logger.debug("No configuration file found, using defaults")
        return Settings()

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            loaded_yaml = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Failed to read configuration file {config_path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in configuration file {config_path}: {e}") from e

    if loaded_yaml is None:
        loaded_yaml = {}
    if not isinstance(loaded_yaml, dict):
        raise ConfigError(f"Configuration file {config_path} must contain a mapping")

    logger.info(f"Loaded configuration from {config_path.resolve()}")
    return Settings.from_dict(loaded_yaml)
