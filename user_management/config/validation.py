"""
Configuration Validation

Environment-specific checks run on the merged configuration. Production is
strict; staging and development accept any well-typed configuration.
"""

import logging
from collections.abc import Iterable

from .errors import ConfigError, ConfigErrorKind, ConfigIssue
from .keys import PLACEHOLDER_SECRET
from .settings import Configuration

logger = logging.getLogger(__name__)

LOOPBACK_HOSTNAME = "localhost"


class ProductionValidator:
    """Security checks that apply only to production deployments."""

    @staticmethod
    def check_secret(
        config: Configuration, placeholder_secrets: Iterable[str]
    ) -> list[ConfigIssue]:
        """The signing secret must be set and must not be a placeholder."""
        secret = config.jwt.secret
        if not secret or secret in set(placeholder_secrets):
            return [
                ConfigIssue(
                    ConfigErrorKind.INSECURE_SECRET,
                    "jwt.secret",
                    "placeholder signing secret must be replaced in production "
                    "(set JWT_SECRET)",
                )
            ]
        return []

    @staticmethod
    def check_log_level(config: Configuration) -> list[ConfigIssue]:
        """Debug logging is not allowed in production."""
        if config.logging.level == "debug":
            return [
                ConfigIssue(
                    ConfigErrorKind.UNSAFE_LOG_LEVEL,
                    "logging.level",
                    "debug logging is not allowed in production",
                )
            ]
        return []

    @staticmethod
    def check_database_host(config: Configuration) -> list[ConfigIssue]:
        """The database must not point at the loopback hostname."""
        if config.database.host == LOOPBACK_HOSTNAME:
            return [
                ConfigIssue(
                    ConfigErrorKind.UNSAFE_DATABASE_HOST,
                    "database.host",
                    f"database host {LOOPBACK_HOSTNAME!r} is not allowed in production",
                )
            ]
        return []


def collect_issues(
    config: Configuration, placeholder_secrets: Iterable[str] = (PLACEHOLDER_SECRET,)
) -> list[ConfigIssue]:
    """
    Run the rule set for the configuration's environment.

    Returns:
        Findings in rule order; always empty outside production
    """
    if not config.environment.is_production():
        logger.debug(f"Skipping production checks for {config.environment.value}")
        return []

    placeholders = {PLACEHOLDER_SECRET, *placeholder_secrets}
    issues = []
    issues.extend(ProductionValidator.check_secret(config, placeholders))
    issues.extend(ProductionValidator.check_log_level(config))
    issues.extend(ProductionValidator.check_database_host(config))
    return issues


def validate_configuration(
    config: Configuration, placeholder_secrets: Iterable[str] = (PLACEHOLDER_SECRET,)
) -> None:
    """
    Validate configuration and raise on any finding.

    Raises:
        ConfigError: Carrying the kind of the first finding and all findings
    """
    issues = collect_issues(config, placeholder_secrets)
    if not issues:
        return

    for issue in issues:
        logger.warning(f"Configuration issue: {issue}")

    raise ConfigError(
        issues[0].kind,
        f"Configuration invalid for {config.environment.value}: "
        + "; ".join(str(issue) for issue in issues),
        key=issues[0].key,
        issues=issues,
    )
