"""
Environment Detection

Parses the environment name that selects how strictly configuration is
validated.
"""

import logging
import os
from collections.abc import Mapping
from enum import Enum

from .errors import ConfigError, ConfigErrorKind

logger = logging.getLogger(__name__)

ENVIRONMENT_VARIABLE = "APP_ENV"


class Environment(str, Enum):
    """Deployment environments."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"

    @classmethod
    def from_string(cls, env_str: str | None) -> "Environment":
        """
        Convert an environment name to the enum.

        Accepts the canonical names and the usual short forms, ignoring case
        and surrounding whitespace.

        Raises:
            ConfigError: MissingEnvironment when the name is absent or blank,
                UnknownEnvironment when it names no known environment
        """
        if env_str is None or not env_str.strip():
            raise ConfigError(
                ConfigErrorKind.MISSING_ENVIRONMENT,
                f"{ENVIRONMENT_VARIABLE} is not set; expected one of "
                + ", ".join(env.value for env in cls),
            )

        env_value = env_str.lower().strip()

        env_mapping = {
            "dev": cls.DEVELOPMENT,
            "develop": cls.DEVELOPMENT,
            "development": cls.DEVELOPMENT,
            "stage": cls.STAGING,
            "staging": cls.STAGING,
            "prod": cls.PRODUCTION,
            "production": cls.PRODUCTION,
        }

        try:
            return env_mapping[env_value]
        except KeyError:
            raise ConfigError(
                ConfigErrorKind.UNKNOWN_ENVIRONMENT,
                f"Unknown environment {env_str!r}; expected one of "
                + ", ".join(env.value for env in cls),
            ) from None

    def is_production(self) -> bool:
        """Check if this is the production environment."""
        return self is Environment.PRODUCTION


def get_environment_name(environ: Mapping[str, str] | None = None) -> str | None:
    """Read the raw environment name from APP_ENV."""
    if environ is None:
        environ = os.environ
    value = environ.get(ENVIRONMENT_VARIABLE)
    logger.debug(f"{ENVIRONMENT_VARIABLE}={value!r}")
    return value
