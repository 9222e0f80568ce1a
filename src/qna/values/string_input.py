"""String-to-typed-value parsers.

Each parser accepts either a raw string (as typed by an operator or read from
an env file) or an already-typed value (from JSON/YAML bundles), and returns
the typed value or raises AnswerValidationError with a message fit to show to
the operator. ``None`` means "unset" and passes through every parser; the
caller decides whether an unset value is acceptable.
"""

from __future__ import annotations

import math
import re

from ..errors import AnswerValidationError

_TRUE_RE = re.compile(r"^(?:y(?:es)?|t(?:rue)?|on|1)$", re.IGNORECASE)
_FALSE_RE = re.compile(r"^(?:no?|f(?:alse)?|off|0)$", re.IGNORECASE)
_INT_RE = re.compile(r"^[+-]?\d+$")
_NUMBER_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")


def stringify(value: object) -> str:
    """Renders a typed value the way an operator would have typed it."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return str(int(value))
    return str(value)


def _check_range(
    value: int | float,
    *,
    name: str,
    min_value: int | float | None,
    max_value: int | float | None,
) -> None:
    if min_value is not None and value < min_value:
        raise AnswerValidationError(
            f"Value '{stringify(value)}' for '{name}' must be greater than or equal to '{stringify(min_value)}'."
        )
    if max_value is not None and value > max_value:
        raise AnswerValidationError(
            f"Value '{stringify(value)}' for '{name}' must be less than or equal to '{stringify(max_value)}'."
        )


def parse_bool(value: object, *, name: str = "value", **_: object) -> bool | None:
    if value is None or isinstance(value, bool):
        return value  # type: ignore[return-value]

    raw = stringify(value).strip()
    if _TRUE_RE.match(raw):
        return True
    if _FALSE_RE.match(raw):
        return False
    raise AnswerValidationError(f"'{raw}' for '{name}' is not a recognized yes/no answer.")


def parse_int(
    value: object,
    *,
    name: str = "value",
    min_value: int | float | None = None,
    max_value: int | float | None = None,
    **_: object,
) -> int | None:
    if value is None:
        return None

    if isinstance(value, bool):
        raise AnswerValidationError(f"'{stringify(value)}' does not appear to be an integer.")

    if isinstance(value, int):
        out = value
    elif isinstance(value, float) and value.is_integer():
        out = int(value)
    else:
        raw = str(value).strip()
        if not _INT_RE.match(raw):
            raise AnswerValidationError(f"'{raw}' does not appear to be an integer.")
        out = int(raw)

    _check_range(out, name=name, min_value=min_value, max_value=max_value)
    return out


def parse_float(
    value: object,
    *,
    name: str = "value",
    min_value: int | float | None = None,
    max_value: int | float | None = None,
    **_: object,
) -> float | None:
    if value is None:
        return None

    if isinstance(value, bool):
        raise AnswerValidationError(f"'{stringify(value)}' does not appear to be a number.")

    if isinstance(value, (int, float)):
        out = float(value)
    else:
        raw = str(value).strip()
        if not _NUMBER_RE.match(raw):
            raise AnswerValidationError(f"'{raw}' does not appear to be a number.")
        out = float(raw)

    _check_range(out, name=name, min_value=min_value, max_value=max_value)
    return out


def parse_string(
    value: object,
    *,
    name: str = "value",
    min_length: int | None = None,
    max_length: int | None = None,
    match_re: str | None = None,
    **_: object,
) -> str | None:
    if value is None:
        return None

    out = value if isinstance(value, str) else stringify(value)

    if min_length is not None and len(out) < min_length:
        raise AnswerValidationError(
            f"'{name}' must be at least {min_length} characters long; got {len(out)}."
        )
    if max_length is not None and len(out) > max_length:
        raise AnswerValidationError(
            f"'{name}' must be no more than {max_length} characters long; got {len(out)}."
        )
    if match_re is not None and re.search(match_re, out) is None:
        raise AnswerValidationError(f"'{out}' for '{name}' does not match the required pattern '{match_re}'.")

    return out
