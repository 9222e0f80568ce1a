# src/qna/interactions/models.py
from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, ClassVar, Union

from ..core.types import ActionKind, Disposition, ReviewScope
from ..errors import InvalidConfigurationError
from ..values.translate import VALIDATION_KEYS, is_string_type, translate_type

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")

# Older bundles spell the type field 'paramType'.
_KEY_ALIASES = {"param_type": "type"}


def snake_key(key: str) -> str:
    """'noSkipDefined' -> 'no_skip_defined'; snake_case keys pass through."""
    k = _CAMEL_BOUNDARY.sub("_", str(key)).lower()
    return _KEY_ALIASES.get(k, k)


def normalize_keys(raw: Mapping[str, Any]) -> dict[str, Any]:
    return {snake_key(k): v for k, v in raw.items()}


def _config_error(index: int, message: str, **data: object) -> InvalidConfigurationError:
    return InvalidConfigurationError(f"Interaction {index} {message}", data={"index": index, **data})


def _optional_str(d: Mapping[str, Any], key: str, index: int) -> str | None:
    v = d.get(key)
    if v is not None and not isinstance(v, str):
        raise _config_error(index, f"defines a non-string '{key}' ({type(v).__name__}).", key=key)
    return v


def _validations(d: Mapping[str, Any], index: int) -> dict[str, Any]:
    """Merges the 'validations' mapping with flat validation keys."""
    raw = d.get("validations") or {}
    if not isinstance(raw, Mapping):
        raise _config_error(index, "defines 'validations' that is not a mapping.")

    out = normalize_keys(raw)
    unknown = sorted(k for k in out if k not in VALIDATION_KEYS)
    if unknown:
        raise _config_error(index, f"defines unknown validations: {unknown}.", unknown=unknown)

    for k in VALIDATION_KEYS:
        if k in d and k not in out:
            out[k] = d[k]
    return out


def _check_type(type_token: object, index: int) -> None:
    try:
        translate_type(type_token)
    except InvalidConfigurationError as e:
        raise _config_error(index, f"has an unknown parameter type: {e.message}", type=repr(type_token)) from e


@dataclass(kw_only=True)
class ParameterBinding:
    """Fields shared by every item that resolves to a named parameter."""

    index: int
    parameter: str
    type: Any = None
    validations: dict[str, Any] = field(default_factory=dict)
    condition: str | None = None
    else_value: Any = None
    else_source: str | None = None
    no_skip_defined: bool = False
    handling: Any = None
    disposition: Disposition | None = None

    @staticmethod
    def _binding_fields(d: Mapping[str, Any], *, index: int, label: str) -> dict[str, Any]:
        parameter = d.get("parameter")
        if not isinstance(parameter, str) or not parameter.strip():
            raise _config_error(index, f"{label} does not define a 'parameter'.")

        type_token = d.get("type")
        _check_type(type_token, index)

        return {
            "index": index,
            "parameter": parameter.strip(),
            "type": type_token,
            "validations": _validations(d, index),
            "condition": _optional_str(d, "condition", index),
            "else_value": d.get("else_value"),
            "else_source": _optional_str(d, "else_source", index),
            "no_skip_defined": bool(d.get("no_skip_defined", False)),
            "handling": d.get("handling"),
        }


@dataclass(kw_only=True)
class Question(ParameterBinding):
    kind: ClassVar[ActionKind] = ActionKind.QUESTION

    prompt: str
    default: Any = None
    options: list[Any] | None = None
    multi_value: bool = False
    separator: str = ","

    @staticmethod
    def from_dict(d: Mapping[str, Any], *, index: int) -> "Question":
        """Parses a question from a key-normalized bundle entry.

        Raises:
            InvalidConfigurationError: On a missing prompt or parameter, an
                unknown type, bad options, or a default outside the options.
        """
        prompt = d.get("prompt")
        if not isinstance(prompt, str) or not prompt.strip():
            raise _config_error(index, "does not define a 'prompt'.")

        fields_ = ParameterBinding._binding_fields(d, index=index, label="question")

        options = d.get("options")
        if options is not None and not isinstance(options, list):
            raise _config_error(index, "defines 'options' that is not a list.")

        multi_value = bool(d.get("multi_value", False))

        separator = d.get("separator", ",")
        if not isinstance(separator, str) or separator == "":
            raise _config_error(index, "defines an empty or non-string 'separator'.")

        default = d.get("default")
        if options is not None and default is not None:
            defaults = default if (multi_value and isinstance(default, list)) else [default]
            missing = [x for x in defaults if x not in options]
            if missing:
                raise _config_error(
                    index,
                    f"default {default!r} is not among the options {options!r}.",
                    default=repr(default),
                )

        return Question(
            prompt=prompt,
            default=default,
            options=options,
            multi_value=multi_value,
            separator=separator,
            **fields_,
        )


@dataclass(kw_only=True)
class MapEntry(ParameterBinding):
    """One parameter derived by a mapping action, from a 'source' or a 'value'."""

    position: int
    source: str | None = None
    value: Any = None

    @staticmethod
    def from_dict(d: Mapping[str, Any], *, index: int, position: int) -> "MapEntry":
        fields_ = ParameterBinding._binding_fields(d, index=index, label=f"map {position}")

        has_source = "source" in d
        has_value = "value" in d
        if has_source == has_value:
            raise _config_error(
                index,
                f"map {position} for '{fields_['parameter']}' must specify exactly one of 'source' or 'value'.",
                position=position,
            )

        source = None
        if has_source:
            source = d["source"]
            if not isinstance(source, str) or not source.strip():
                raise _config_error(index, f"map {position} defines an empty or non-string 'source'.")
            if not callable(fields_["type"]) and is_string_type(fields_["type"]):
                raise _config_error(
                    index,
                    f"map {position} for '{fields_['parameter']}' maps a 'source' expression and must "
                    "declare a boolean or numeric 'type'.",
                    position=position,
                )

        return MapEntry(position=position, source=source, value=d.get("value"), **fields_)


@dataclass(kw_only=True)
class MapAction:
    kind: ClassVar[ActionKind] = ActionKind.MAPPING

    index: int
    maps: list[MapEntry]
    condition: str | None = None
    disposition: Disposition | None = None

    @staticmethod
    def from_dict(d: Mapping[str, Any], *, index: int) -> "MapAction":
        raw_maps = d.get("maps")
        if not isinstance(raw_maps, list) or not raw_maps:
            raise _config_error(index, "defines 'maps' that is not a non-empty list.")

        maps: list[MapEntry] = []
        for position, raw in enumerate(raw_maps):
            if not isinstance(raw, Mapping):
                raise _config_error(index, f"map {position} is not a mapping.")
            maps.append(MapEntry.from_dict(normalize_keys(raw), index=index, position=position))

        return MapAction(index=index, maps=maps, condition=_optional_str(d, "condition", index))


@dataclass(kw_only=True)
class Statement:
    kind: ClassVar[ActionKind] = ActionKind.STATEMENT

    index: int
    statement: str
    condition: str | None = None
    output_options: dict[str, Any] = field(default_factory=dict)
    disposition: Disposition | None = None

    @staticmethod
    def from_dict(d: Mapping[str, Any], *, index: int) -> "Statement":
        statement = d.get("statement")
        if not isinstance(statement, str):
            raise _config_error(index, "defines a non-string 'statement'.")

        output_options = d.get("output_options") or {}
        if not isinstance(output_options, Mapping):
            raise _config_error(index, "defines 'outputOptions' that is not a mapping.")

        return Statement(
            index=index,
            statement=statement,
            condition=_optional_str(d, "condition", index),
            output_options=normalize_keys(output_options),
        )


@dataclass(kw_only=True)
class Review:
    kind: ClassVar[ActionKind] = ActionKind.REVIEW

    index: int
    review: ReviewScope
    condition: str | None = None
    parameter: str | None = None
    disposition: Disposition | None = None

    @staticmethod
    def from_dict(d: Mapping[str, Any], *, index: int) -> "Review":
        raw_scope = d.get("review")
        try:
            scope = ReviewScope(str(raw_scope).strip().lower())
        except ValueError as e:
            allowed = [s.value for s in ReviewScope]
            raise _config_error(
                index, f"has an invalid review scope {raw_scope!r}. Allowed: {allowed}", review=repr(raw_scope)
            ) from e

        return Review(
            index=index,
            review=scope,
            condition=_optional_str(d, "condition", index),
            parameter=_optional_str(d, "parameter", index),
        )


Action = Union[Question, MapAction, Statement, Review]

ACTION_TYPES: Mapping[ActionKind, Any] = {
    ActionKind.QUESTION: Question,
    ActionKind.MAPPING: MapAction,
    ActionKind.STATEMENT: Statement,
    ActionKind.REVIEW: Review,
}
