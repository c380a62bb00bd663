"""Configuration command line.

Usage examples:
    python -m user_management check --env production
    python -m user_management show --config-file config/config.yaml
    python -m user_management env-vars
"""

from __future__ import annotations

import argparse
import json
import os
import sys

from dotenv import load_dotenv

from .bootstrap import config_file_path
from .config import CONFIG_KEYS, DEFAULTS, ConfigError, resolve
from .config.environment import get_environment_name


def _print_error(error: ConfigError) -> None:
    print(f"Configuration error [{error.kind.value}]: {error}", file=sys.stderr)
    for issue in error.issues:
        print(f"  - {issue.kind.value}: {issue}", file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="User management API configuration tool")
    parser.add_argument("--env", help="environment name (default: $APP_ENV)")
    parser.add_argument(
        "--config-file", help="YAML configuration file (default: $APP_CONFIG_FILE)"
    )
    parser.add_argument(
        "--env-file", default=".env", help="dotenv file loaded before resolving"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("check", help="resolve and validate the configuration")

    show_parser = subparsers.add_parser("show", help="print the resolved configuration")
    show_parser.add_argument(
        "--reveal-secrets", action="store_true", help="do not mask secrets"
    )

    subparsers.add_parser(
        "env-vars", help="list configuration keys and their environment variables"
    )

    args = parser.parse_args(argv)

    if args.command == "env-vars":
        for key in CONFIG_KEYS:
            print(
                f"{key.env_var:<24} {key.name:<24} "
                f"default={DEFAULTS[key.name]!r:<28} {key.description}"
            )
        return 0

    if args.env_file:
        load_dotenv(args.env_file, override=False)

    environment_name = args.env or get_environment_name()
    file_path = args.config_file or config_file_path()

    try:
        config = resolve(environment_name, file_path, environ=os.environ)
    except ConfigError as e:
        _print_error(e)
        return 1

    if args.command == "check":
        print(f"Configuration OK for {config.environment.value}")
        return 0

    if args.command == "show":
        print(json.dumps(config.to_dict(redact=not args.reveal_secrets), indent=2))
        return 0

    return 1


if __name__ == "__main__":
    raise SystemExit(main())
