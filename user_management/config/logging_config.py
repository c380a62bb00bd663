"""
Logging Setup

Configures the root logger from the resolved logging settings.
"""

import logging
import socket
from typing import IO

from pythonjsonlogger.json import JsonFormatter

from .settings import Configuration

logger = logging.getLogger(__name__)

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
HANDLER_NAME = "user_management.console"

LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


class StructuredFormatter(JsonFormatter):
    """JSON formatter adding service and environment fields."""

    def __init__(self, service_name: str = "user-management-api", environment: str = ""):
        self.service_name = service_name
        self.environment = environment
        self.hostname = socket.gethostname()

        super().__init__(
            "%(asctime)s %(name)s %(levelname)s %(message)s",
            rename_fields={
                "asctime": "timestamp",
                "name": "logger_name",
                "levelname": "level",
            },
        )

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record["service"] = self.service_name
        log_record["hostname"] = self.hostname
        if self.environment:
            log_record["environment"] = self.environment


def build_formatter(config: Configuration) -> logging.Formatter:
    """Create the formatter selected by ``logging.format``."""
    if config.logging.format == "json":
        return StructuredFormatter(environment=config.environment.value)
    return logging.Formatter(TEXT_FORMAT)


def _install_handler(
    formatter: logging.Formatter, level: int, stream: IO[str] | None
) -> None:
    root = logging.getLogger()
    for existing in root.handlers[:]:
        if existing.get_name() == HANDLER_NAME:
            root.removeHandler(existing)
            existing.close()

    handler = logging.StreamHandler(stream)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(formatter)

    root.addHandler(handler)
    root.setLevel(level)


def configure_startup_logging(stream: IO[str] | None = None) -> None:
    """
    Install a plain text handler at INFO for messages logged while the
    configuration is still being resolved.

    ``configure_logging`` replaces it once a configuration exists.
    """
    _install_handler(logging.Formatter(TEXT_FORMAT), logging.INFO, stream)


def configure_logging(config: Configuration, stream: IO[str] | None = None) -> None:
    """
    Configure logging based on the resolved configuration.

    Calling it again replaces the handler installed by the previous call;
    handlers installed by anything else are left alone.

    Args:
        config: Resolved configuration
        stream: Output stream, stderr when omitted
    """
    _install_handler(build_formatter(config), LEVELS[config.logging.level], stream)

    logger.info(
        f"Logging configured: level={config.logging.level}, format={config.logging.format}"
    )
