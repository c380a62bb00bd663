"""
Configuration Keys

Registry of every configuration key, its declared type, the environment
variable that overrides it, and its built-in default.
"""

import re
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

PLACEHOLDER_SECRET = "change-me-in-production"

LOG_LEVELS = ("debug", "info", "warn", "error")
LOG_FORMATS = ("json", "text")
SSL_MODES = ("disable", "allow", "prefer", "require", "verify-ca", "verify-full")


class ValueType(str, Enum):
    """Declared types a configuration value is coerced to."""

    STRING = "string"
    PORT = "port"
    DURATION = "duration"
    CHOICE = "choice"
    URL = "url"


@dataclass(frozen=True)
class ConfigKey:
    """A registered configuration key."""

    name: str
    value_type: ValueType
    description: str = ""
    choices: tuple[str, ...] = ()

    @property
    def section(self) -> str:
        return self.name.split(".", 1)[0]

    @property
    def field(self) -> str:
        return self.name.split(".", 1)[1]

    @property
    def env_var(self) -> str:
        return env_var_name(self.name)


_ENV_SEPARATORS = re.compile(r"[.\-]")


def env_var_name(key: str) -> str:
    """
    Derive the environment variable name for a configuration key.

    Dots and hyphens become underscores and the result is upper-cased,
    so ``database.host`` maps to ``DATABASE_HOST``.

    Args:
        key: Dotted configuration key

    Returns:
        Environment variable name
    """
    if not key or not key.strip():
        raise ValueError("Configuration key must not be empty")
    return _ENV_SEPARATORS.sub("_", key.strip()).upper()


CONFIG_KEYS: tuple[ConfigKey, ...] = (
    ConfigKey("server.host", ValueType.STRING, "Listen address"),
    ConfigKey("server.port", ValueType.PORT, "Listen port"),
    ConfigKey("server.read_timeout", ValueType.DURATION, "Request read timeout"),
    ConfigKey("server.write_timeout", ValueType.DURATION, "Response write timeout"),
    ConfigKey("server.idle_timeout", ValueType.DURATION, "Keep-alive idle timeout"),
    ConfigKey(
        "database.url",
        ValueType.URL,
        "PostgreSQL connection URL; overrides the individual database fields",
    ),
    ConfigKey("database.host", ValueType.STRING, "Database host"),
    ConfigKey("database.port", ValueType.PORT, "Database port"),
    ConfigKey("database.user", ValueType.STRING, "Database user"),
    ConfigKey("database.password", ValueType.STRING, "Database password"),
    ConfigKey("database.name", ValueType.STRING, "Database name"),
    ConfigKey("database.sslmode", ValueType.CHOICE, "libpq SSL mode", SSL_MODES),
    ConfigKey("jwt.secret", ValueType.STRING, "Token signing secret"),
    ConfigKey("jwt.expiration", ValueType.DURATION, "Token lifetime"),
    ConfigKey("logging.level", ValueType.CHOICE, "Log level", LOG_LEVELS),
    ConfigKey("logging.format", ValueType.CHOICE, "Log output format", LOG_FORMATS),
)

KEYS_BY_NAME: MappingProxyType = MappingProxyType({key.name: key for key in CONFIG_KEYS})

DEFAULTS: MappingProxyType = MappingProxyType(
    {
        "server.host": "0.0.0.0",
        "server.port": "3000",
        "server.read_timeout": "10s",
        "server.write_timeout": "10s",
        "server.idle_timeout": "120s",
        "database.url": "",
        "database.host": "localhost",
        "database.port": "5432",
        "database.user": "postgres",
        "database.password": "postgres",
        "database.name": "user_management",
        "database.sslmode": "disable",
        "jwt.secret": PLACEHOLDER_SECRET,
        "jwt.expiration": "24h",
        "logging.level": "info",
        "logging.format": "json",
    }
)
