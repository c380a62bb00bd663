"""
Configuration Management

Resolves the application configuration from built-in defaults, an optional
YAML file and environment variables, then validates it for the target
environment.

Typical startup:

    config = resolve(os.getenv("APP_ENV"), "config/config.yaml")
    configure_logging(config)
"""

from .environment import Environment
from .errors import ConfigError, ConfigErrorKind, ConfigIssue
from .keys import CONFIG_KEYS, DEFAULTS, PLACEHOLDER_SECRET, env_var_name
from .logging_config import configure_logging, configure_startup_logging
from .resolver import ConfigResolver, resolve
from .settings import (
    Configuration,
    DatabaseConfig,
    JWTConfig,
    LoggingConfig,
    ServerConfig,
)

__all__ = [
    "CONFIG_KEYS",
    "DEFAULTS",
    "PLACEHOLDER_SECRET",
    "ConfigError",
    "ConfigErrorKind",
    "ConfigIssue",
    "ConfigResolver",
    "Configuration",
    "DatabaseConfig",
    "Environment",
    "JWTConfig",
    "LoggingConfig",
    "ServerConfig",
    "configure_logging",
    "configure_startup_logging",
    "env_var_name",
    "resolve",
]
