"""Type coercion and constraint validation for answers and parameter values."""

from .string_input import parse_bool, parse_float, parse_int, parse_string, stringify
from .translate import (
    TYPE_ALIASES,
    VALIDATION_KEYS,
    coerce_value,
    is_boolean_type,
    is_string_type,
    translate_type,
)

__all__ = [
    "TYPE_ALIASES",
    "VALIDATION_KEYS",
    "coerce_value",
    "is_boolean_type",
    "is_string_type",
    "parse_bool",
    "parse_float",
    "parse_int",
    "parse_string",
    "stringify",
    "translate_type",
]
