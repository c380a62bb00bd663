"""
Value Conversion

Coerces raw configuration values (strings from environment variables,
scalars from YAML) to the type declared for their key.
"""

import re
from datetime import timedelta
from typing import Any

from .database_url import parse_database_url
from .keys import ConfigKey, ValueType

_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "μs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")
_NUMBER = re.compile(r"^[+-]?(\d+(?:\.\d*)?|\.\d+)$")

_CHOICE_ALIASES = {"warning": "warn"}


def parse_duration(value: Any) -> timedelta:
    """
    Parse a duration.

    Accepts Go-style duration strings such as ``300ms``, ``1h30m`` or
    ``1.5h``, a bare number of seconds, or a timedelta.

    Raises:
        ValueError: If the value is not a non-negative duration
    """
    try:
        if isinstance(value, timedelta):
            result = value
        elif isinstance(value, bool):
            raise ValueError(f"expected a duration, got boolean {value!r}")
        elif isinstance(value, (int, float)):
            result = timedelta(seconds=value)
        elif isinstance(value, str):
            result = _parse_duration_string(value.strip())
        else:
            raise ValueError(f"expected a duration, got {type(value).__name__}")
    except OverflowError as e:
        raise ValueError(f"duration out of range: {value!r}") from e

    if result < timedelta(0):
        raise ValueError(f"duration must not be negative: {value!r}")
    return result


def _parse_duration_string(text: str) -> timedelta:
    if not text:
        raise ValueError("empty duration")

    if _NUMBER.match(text):
        return timedelta(seconds=float(text))

    sign = 1
    body = text
    if body[0] in "+-":
        sign = -1 if body[0] == "-" else 1
        body = body[1:]

    total_seconds = 0.0
    position = 0
    for match in _DURATION_PART.finditer(body):
        if match.start() != position:
            break
        total_seconds += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        position = match.end()

    if position == 0 or position != len(body):
        raise ValueError(f"invalid duration {text!r}")

    return timedelta(seconds=sign * total_seconds)


def format_duration(value: timedelta) -> str:
    """Render a timedelta in the compact ``1h30m15s`` form."""
    total_us = value // timedelta(microseconds=1)
    if total_us == 0:
        return "0s"

    sign = "-" if total_us < 0 else ""
    total_us = abs(total_us)
    hours, remainder = divmod(total_us, 3_600_000_000)
    minutes, remainder = divmod(remainder, 60_000_000)
    seconds, micros = divmod(remainder, 1_000_000)

    parts = []
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    if micros:
        parts.append(f"{seconds}.{micros:06d}".rstrip("0") + "s")
    elif seconds:
        parts.append(f"{seconds}s")
    return sign + "".join(parts)


def _to_text(value: Any) -> str:
    if isinstance(value, bool) or value is None:
        raise ValueError(f"expected a string, got {value!r}")
    if isinstance(value, (str, int, float)):
        return str(value)
    raise ValueError(f"expected a string, got {type(value).__name__}")


def _to_port(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"expected an integer port, got {value!r}")
    if isinstance(value, int):
        port = value
    elif isinstance(value, str):
        try:
            port = int(value.strip())
        except ValueError:
            raise ValueError(f"expected an integer port, got {value!r}") from None
    else:
        raise ValueError(f"expected an integer port, got {type(value).__name__}")

    if not 1 <= port <= 65535:
        raise ValueError(f"port out of range 1-65535: {port}")
    return port


def _to_choice(value: Any, choices: tuple[str, ...]) -> str:
    text = _to_text(value).strip().lower()
    if text not in choices and _CHOICE_ALIASES.get(text) in choices:
        text = _CHOICE_ALIASES[text]
    if text not in choices:
        raise ValueError(f"expected one of {', '.join(choices)}, got {value!r}")
    return text


def _to_url(value: Any) -> str:
    text = _to_text(value).strip()
    if text:
        parse_database_url(text)
    return text


def coerce_value(key: ConfigKey, value: Any) -> Any:
    """
    Convert a raw value to the type declared for ``key``.

    Returns:
        str for string, choice and url keys, int for port keys and
        timedelta for duration keys

    Raises:
        ValueError: If the value cannot be converted
    """
    if key.value_type is ValueType.STRING:
        return _to_text(value)
    if key.value_type is ValueType.PORT:
        return _to_port(value)
    if key.value_type is ValueType.DURATION:
        return parse_duration(value)
    if key.value_type is ValueType.CHOICE:
        return _to_choice(value, key.choices)
    if key.value_type is ValueType.URL:
        return _to_url(value)
    raise ValueError(f"unsupported value type {key.value_type!r}")
