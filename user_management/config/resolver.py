"""
Configuration Resolver

Merges defaults, the optional YAML file and environment variables (in
ascending priority), converts every value to its declared type and
validates the result for the target environment.
"""

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

from .conversion import coerce_value
from .database_url import parse_database_url
from .environment import Environment
from .errors import ConfigError, ConfigErrorKind
from .keys import CONFIG_KEYS, DEFAULTS, KEYS_BY_NAME
from .settings import Configuration
from .sources import load_env_source, load_file_source
from .validation import validate_configuration

logger = logging.getLogger(__name__)

DEFAULTS_LAYER, FILE_LAYER, ENV_LAYER = range(3)


class ConfigResolver:
    """
    Produces a validated Configuration from layered sources.

    The resolver holds no state besides its defaults, so one instance can
    resolve any number of environments.
    """

    def __init__(self, defaults: Mapping[str, Any] = DEFAULTS):
        """
        Initialize the resolver.

        Args:
            defaults: Raw default for every registered key

        Raises:
            ConfigError: InvalidDefaults if a key is missing or unregistered
        """
        missing = [key.name for key in CONFIG_KEYS if key.name not in defaults]
        unknown = sorted(name for name in defaults if name not in KEYS_BY_NAME)
        if missing or unknown:
            problems = []
            if missing:
                problems.append("missing " + ", ".join(missing))
            if unknown:
                problems.append("unknown " + ", ".join(unknown))
            raise ConfigError(
                ConfigErrorKind.INVALID_DEFAULTS,
                "Fallback defaults must cover every configuration key: "
                + "; ".join(problems),
                key=(missing or unknown)[0],
            )
        self.defaults = MappingProxyType(dict(defaults))

    def resolve(
        self,
        environment_name: str | None,
        file_path: str | Path | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> Configuration:
        """
        Resolve and validate configuration.

        Args:
            environment_name: production, staging or development
            file_path: Optional YAML file; a missing file is skipped
            environ: Environment variables, ``os.environ`` when omitted

        Returns:
            Fully typed, validated Configuration

        Raises:
            ConfigError: On a missing or unknown environment, a malformed
                file, a value of the wrong type or a failed production check
        """
        environment = Environment.from_string(environment_name)
        if environ is None:
            environ = os.environ

        raw: dict[str, Any] = dict(self.defaults)
        origin = {name: "defaults" for name in raw}
        layer = {name: DEFAULTS_LAYER for name in raw}

        for name, value in load_file_source(file_path).items():
            if name not in KEYS_BY_NAME:
                logger.warning(f"Ignoring unknown configuration key {name!r} in {file_path}")
                continue
            raw[name] = value
            origin[name] = str(file_path)
            layer[name] = FILE_LAYER

        for name, value in load_env_source(CONFIG_KEYS, environ).items():
            raw[name] = value
            origin[name] = KEYS_BY_NAME[name].env_var
            layer[name] = ENV_LAYER

        values = {}
        for key in CONFIG_KEYS:
            try:
                values[key.name] = coerce_value(key, raw[key.name])
            except ValueError as e:
                raise ConfigError(
                    ConfigErrorKind.TYPE_CONVERSION,
                    f"Invalid value for {key.name} (from {origin[key.name]}): {e}",
                    key=key.name,
                ) from e

        if values["database.url"]:
            url_layer = layer["database.url"]
            for name, value in self._database_url_overrides(values["database.url"]).items():
                # a field set in a higher layer than the URL keeps its value
                if layer[name] <= url_layer:
                    values[name] = value
            logger.info(
                f"database.url from {origin['database.url']} overrides individual "
                "database settings"
            )

        config = Configuration.from_values(environment, values)
        validate_configuration(config, placeholder_secrets=(str(self.defaults["jwt.secret"]),))

        logger.info(f"Configuration resolved for {environment.value} environment")
        return config

    @staticmethod
    def _database_url_overrides(url: str) -> dict[str, Any]:
        try:
            components = parse_database_url(url).as_overrides()
            return {
                name: coerce_value(KEYS_BY_NAME[name], value)
                for name, value in components.items()
            }
        except ValueError as e:
            raise ConfigError(
                ConfigErrorKind.TYPE_CONVERSION,
                f"Invalid value for database.url: {e}",
                key="database.url",
            ) from e


def resolve(
    environment_name: str | None,
    file_path: str | Path | None = None,
    defaults: Mapping[str, Any] = DEFAULTS,
    environ: Mapping[str, str] | None = None,
) -> Configuration:
    """Resolve configuration with a one-off ConfigResolver."""
    return ConfigResolver(defaults).resolve(environment_name, file_path, environ)
