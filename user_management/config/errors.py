"""
Configuration Errors

Every error raised while resolving configuration is a ConfigError. All of
them are fatal at startup; the kind tells the operator what to fix.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ConfigErrorKind(str, Enum):
    """Categories of configuration failure."""

    MISSING_ENVIRONMENT = "MissingEnvironment"
    UNKNOWN_ENVIRONMENT = "UnknownEnvironment"
    FILE_PARSE_ERROR = "FileParseError"
    TYPE_CONVERSION = "TypeConversion"
    INVALID_DEFAULTS = "InvalidDefaults"
    INSECURE_SECRET = "InsecureSecret"
    UNSAFE_LOG_LEVEL = "UnsafeLogLevel"
    UNSAFE_DATABASE_HOST = "UnsafeDatabaseHost"


@dataclass(frozen=True)
class ConfigIssue:
    """A single validation finding."""

    kind: ConfigErrorKind
    key: str
    message: str

    def __str__(self) -> str:
        return f"{self.key}: {self.message}"


class ConfigError(Exception):
    """Raised when configuration cannot be loaded or fails validation."""

    def __init__(
        self,
        kind: ConfigErrorKind,
        message: str,
        *,
        key: str | None = None,
        issues: list[ConfigIssue] | None = None,
    ):
        """
        Initialize configuration error.

        Args:
            kind: Failure category
            message: Human readable description
            key: Configuration key involved, if any
            issues: All validation findings when several rules failed
        """
        super().__init__(message)
        self.kind = kind
        self.key = key
        self.issues = issues or []

    @property
    def kinds(self) -> list[ConfigErrorKind]:
        """Kinds of every collected issue, or just this error's kind."""
        if self.issues:
            return [issue.kind for issue in self.issues]
        return [self.kind]

    def to_dict(self) -> dict[str, Any]:
        """Convert the error to a dictionary for structured output."""
        return {
            "error": self.kind.value,
            "message": str(self),
            "key": self.key,
            "issues": [
                {"kind": issue.kind.value, "key": issue.key, "message": issue.message}
                for issue in self.issues
            ],
        }
