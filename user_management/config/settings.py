"""
Resolved Configuration

Immutable records holding the fully resolved, typed configuration. Built
once at startup by the resolver and shared read-only afterwards.
"""

from collections.abc import Mapping
from dataclasses import dataclass, fields
from datetime import timedelta
from typing import Any
from urllib.parse import quote

from .conversion import format_duration
from .environment import Environment

REDACTED = "***"


@dataclass(frozen=True)
class ServerConfig:
    """HTTP server settings."""

    host: str
    port: int
    read_timeout: timedelta
    write_timeout: timedelta
    idle_timeout: timedelta

    @property
    def address(self) -> str:
        """Listen address in ``host:port`` form."""
        return f"{self.host}:{self.port}"


@dataclass(frozen=True)
class DatabaseConfig:
    """PostgreSQL connection settings."""

    host: str
    port: int
    user: str
    password: str
    name: str
    sslmode: str
    url: str = ""

    @property
    def dsn(self) -> str:
        """Connection string assembled from the individual settings."""
        credentials = quote(self.user, safe="")
        if self.password:
            credentials += ":" + quote(self.password, safe="")
        host = f"[{self.host}]" if ":" in self.host else self.host
        return (
            f"postgresql://{credentials}@{host}:{self.port}/"
            f"{quote(self.name, safe='')}?sslmode={self.sslmode}"
        )


@dataclass(frozen=True)
class JWTConfig:
    """Token signing settings."""

    secret: str
    expiration: timedelta


@dataclass(frozen=True)
class LoggingConfig:
    """Log output settings."""

    level: str
    format: str


@dataclass(frozen=True)
class Configuration:
    """
    Fully resolved application configuration.

    Every field holds a concrete, typed value. Values are addressable by
    their dotted key through ``get``.
    """

    environment: Environment
    server: ServerConfig
    database: DatabaseConfig
    jwt: JWTConfig
    logging: LoggingConfig

    @classmethod
    def from_values(
        cls, environment: Environment, values: Mapping[str, Any]
    ) -> "Configuration":
        """
        Build the configuration from typed values keyed by dotted key.

        Raises:
            KeyError: If a field has no value
        """

        def section(record_type: type, name: str) -> Any:
            return record_type(
                **{f.name: values[f"{name}.{f.name}"] for f in fields(record_type)}
            )

        return cls(
            environment=environment,
            server=section(ServerConfig, "server"),
            database=section(DatabaseConfig, "database"),
            jwt=section(JWTConfig, "jwt"),
            logging=section(LoggingConfig, "logging"),
        )

    def get(self, key: str) -> Any:
        """Return the value for a dotted key such as ``server.port``."""
        section_name, _, field_name = key.partition(".")
        if section_name not in {"server", "database", "jwt", "logging"}:
            raise KeyError(key)
        section = getattr(self, section_name)
        if field_name not in {f.name for f in fields(section)}:
            raise KeyError(key)
        return getattr(section, field_name)

    def to_dict(self, redact: bool = True) -> dict[str, Any]:
        """
        Convert configuration to a JSON-serializable dictionary.

        Args:
            redact: Mask the password, database URL and signing secret
        """

        def render(value: Any) -> Any:
            if isinstance(value, timedelta):
                return format_duration(value)
            return value

        def masked(value: str) -> str:
            return REDACTED if redact and value else value

        return {
            "environment": self.environment.value,
            "server": {f.name: render(getattr(self.server, f.name)) for f in fields(self.server)},
            "database": {
                "url": masked(self.database.url),
                "host": self.database.host,
                "port": self.database.port,
                "user": self.database.user,
                "password": masked(self.database.password),
                "name": self.database.name,
                "sslmode": self.database.sslmode,
            },
            "jwt": {
                "secret": masked(self.jwt.secret),
                "expiration": render(self.jwt.expiration),
            },
            "logging": {"level": self.logging.level, "format": self.logging.format},
        }
