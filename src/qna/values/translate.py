from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from ..errors import InvalidConfigurationError
from .string_input import parse_bool, parse_float, parse_int, parse_string

TypeParser = Callable[..., Any]

_TYPE_HINT = "Must be either a type function or 'string', 'int', 'numeric', or 'bool'."

TYPE_ALIASES: Mapping[str, TypeParser] = {
    "string": parse_string,
    "int": parse_int,
    "integer": parse_int,
    "float": parse_float,
    "numeric": parse_float,
    "bool": parse_bool,
    "boolean": parse_bool,
}

# Validation keys (snake_case, as normalized from bundles). The per-value
# constraints are handed to the type parser; the rest are applied by the
# question resolver.
VALUE_CONSTRAINTS: Mapping[str, str] = {
    "min": "min_value",
    "max": "max_value",
    "min_length": "min_length",
    "max_length": "max_length",
    "match_re": "match_re",
}
ANSWER_CONSTRAINTS: frozenset[str] = frozenset({"required", "min_count", "max_count"})
VALIDATION_KEYS: frozenset[str] = frozenset(VALUE_CONSTRAINTS) | ANSWER_CONSTRAINTS


def translate_type(type_token: object) -> TypeParser:
    """Resolves a bundle type token (or a callable) into a parser function.

    Raises:
        InvalidConfigurationError: If the token is neither a callable nor a
            recognized alias.
    """
    if callable(type_token):
        return type_token  # type: ignore[return-value]

    if type_token is None:
        return parse_string

    if not isinstance(type_token, str):
        raise InvalidConfigurationError(
            f"Invalid type designation type '{type(type_token).__name__}'. {_TYPE_HINT}",
            data={"type": repr(type_token)},
        )

    parser = TYPE_ALIASES.get(type_token.strip().lower())
    if parser is None:
        raise InvalidConfigurationError(
            f"Invalid parameter type '{type_token}'. {_TYPE_HINT}",
            data={"type": type_token},
        )
    return parser


def is_boolean_type(type_token: object) -> bool:
    return translate_type(type_token) is parse_bool


def is_string_type(type_token: object) -> bool:
    return translate_type(type_token) is parse_string


def coerce_value(
    value: object,
    type_token: object,
    *,
    name: str,
    validations: Mapping[str, Any] | None = None,
) -> Any:
    """Parses one value through its declared type and per-value constraints."""
    parser = translate_type(type_token)
    constraints = {
        VALUE_CONSTRAINTS[k]: v
        for k, v in (validations or {}).items()
        if k in VALUE_CONSTRAINTS and v is not None
    }
    return parser(value, name=name, **constraints)
