"""
Startup Bootstrap

Loads the configuration once before anything else runs and stops the
process if it is missing or invalid. No listener may open before this
returns.
"""

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from dotenv import load_dotenv

from .config import (
    Configuration,
    ConfigError,
    configure_logging,
    configure_startup_logging,
    resolve,
)
from .config.environment import get_environment_name
from .config.sources import DEFAULT_CONFIG_FILE

logger = logging.getLogger(__name__)

CONFIG_FILE_VARIABLE = "APP_CONFIG_FILE"


def config_file_path(environ: Mapping[str, str] | None = None) -> Path:
    """Path of the YAML configuration file, from APP_CONFIG_FILE or the default."""
    if environ is None:
        environ = os.environ
    return Path(environ.get(CONFIG_FILE_VARIABLE) or DEFAULT_CONFIG_FILE)


def load_configuration(
    environment_name: str | None = None,
    file_path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
    env_file: str | Path | None = ".env",
) -> Configuration:
    """
    Resolve configuration and configure logging, or exit.

    When ``environ`` is omitted the process environment is used, after
    loading ``env_file`` without overriding variables that are already set.

    Args:
        environment_name: Overrides APP_ENV when given
        file_path: Overrides APP_CONFIG_FILE when given
        environ: Environment variables to resolve against
        env_file: dotenv file to load into the process environment

    Returns:
        Validated Configuration

    Raises:
        SystemExit: With status 1 if configuration cannot be resolved
    """
    if environ is None:
        if env_file:
            load_dotenv(env_file, override=False)
        environ = os.environ

    configure_startup_logging()
    environment_name = environment_name or get_environment_name(environ)
    file_path = file_path or config_file_path(environ)

    try:
        config = resolve(environment_name, file_path, environ=environ)
    except ConfigError as e:
        logger.critical(f"[{e.kind.value}] {e}")
        for issue in e.issues:
            logger.critical(f"  {issue.kind.value}: {issue}")
        raise SystemExit(1) from e

    configure_logging(config)
    logger.info(
        f"Starting in {config.environment.value} mode, server address {config.server.address}"
    )
    return config
