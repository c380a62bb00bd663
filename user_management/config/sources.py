"""
Configuration Sources

Reads raw values from the YAML configuration file and from environment
variables. Values are returned unconverted, keyed by dotted configuration
key.
"""

import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError, ConfigErrorKind
from .keys import KEYS_BY_NAME, ConfigKey

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = Path("config") / "config.yaml"


def _flatten(section: Mapping[Any, Any], prefix: str) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for name, value in section.items():
        key = f"{prefix}.{str(name).lower()}"
        if isinstance(value, Mapping):
            if key in KEYS_BY_NAME:
                raise ConfigError(
                    ConfigErrorKind.FILE_PARSE_ERROR,
                    f"{key} must be a single value, got a mapping",
                    key=key,
                )
            values.update(_flatten(value, key))
        elif value is not None:
            values[key] = value
    return values


def load_file_source(path: str | Path | None) -> dict[str, Any]:
    """
    Load configuration values from a YAML file nested by section.

    A missing file is not an error and yields no values.

    Args:
        path: File path, or None to skip the file layer

    Returns:
        Flattened mapping of dotted key to raw value

    Raises:
        ConfigError: FileParseError if the file exists but cannot be read or
            is not a mapping of sections
    """
    if path is None:
        return {}

    path = Path(path)
    if not path.exists():
        logger.debug(f"Configuration file not found, skipping: {path}")
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(
            ConfigErrorKind.FILE_PARSE_ERROR,
            f"Malformed configuration file {path}: {e}",
        ) from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(
            ConfigErrorKind.FILE_PARSE_ERROR,
            f"Cannot read configuration file {path}: {e}",
        ) from e

    if data is None:
        logger.info(f"Configuration file is empty: {path}")
        return {}

    if not isinstance(data, Mapping):
        raise ConfigError(
            ConfigErrorKind.FILE_PARSE_ERROR,
            f"Configuration file {path} must contain a mapping of sections, "
            f"got {type(data).__name__}",
        )

    values: dict[str, Any] = {}
    for section, content in data.items():
        if content is None:
            continue
        if not isinstance(content, Mapping):
            raise ConfigError(
                ConfigErrorKind.FILE_PARSE_ERROR,
                f"Section {section!r} in {path} must be a mapping, "
                f"got {type(content).__name__}",
                key=str(section),
            )
        values.update(_flatten(content, str(section).lower()))

    logger.info(f"Loaded {len(values)} value(s) from configuration file {path}")
    return values


def load_env_source(
    keys: Iterable[ConfigKey], environ: Mapping[str, str]
) -> dict[str, str]:
    """
    Collect overrides from environment variables.

    Variables that are unset or empty are ignored.

    Args:
        keys: Registered configuration keys
        environ: Environment variable mapping

    Returns:
        Mapping of dotted key to raw string value
    """
    values = {}
    for key in keys:
        raw = environ.get(key.env_var)
        if raw is None or raw == "":
            continue
        values[key.name] = raw
        logger.debug(f"{key.name} overridden by {key.env_var}")
    return values
