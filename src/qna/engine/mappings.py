"""Values the engine derives without asking: map entries, else-branches and
initial parameters picked up by a defined-skip.

There is nobody to re-prompt for these, so every coercion failure is fatal
(InvalidParameterValueError).
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from ..errors import InvalidParameterValueError
from ..interactions.models import MapEntry, ParameterBinding, Question
from ..values.string_input import stringify
from ..values.translate import coerce_value, is_boolean_type
from .expressions import ExpressionEvaluator


def evaluate_source(
    binding: ParameterBinding,
    expression: str,
    evaluator: ExpressionEvaluator,
    context: Mapping[str, Any],
) -> str:
    """Evaluates an expression for the binding's type and returns it as raw text."""
    if is_boolean_type(binding.type):
        return stringify(evaluator.eval_truth(expression, context))
    return stringify(evaluator.eval_number(expression, context))


def _check_options(binding: ParameterBinding, coerced: Any, *, origin: str, value: Any) -> None:
    if not isinstance(binding, Question) or binding.options is None or coerced is None:
        return
    for v in coerced if isinstance(coerced, list) else [coerced]:
        if v not in binding.options:
            raise InvalidParameterValueError(
                f"Invalid {origin} for parameter '{binding.parameter}' (interaction {binding.index}): "
                f"{v!r} is not one of the options {binding.options!r}.",
                data={"parameter": binding.parameter, "index": binding.index, "value": repr(value)},
            )


def coerce_binding_value(binding: ParameterBinding, value: Any, *, origin: str) -> Any:
    """Coerces a non-interactive value through the binding's type and validations.

    Multi-value questions take a list, or a string split on their separator.
    Questions with options only accept values listed among them.
    """
    try:
        if isinstance(binding, Question) and binding.multi_value and value is not None:
            if isinstance(value, str):
                items: list[Any] = [
                    t.strip() for t in re.split(re.escape(binding.separator), value) if t.strip()
                ]
            elif isinstance(value, list):
                items = value
            else:
                items = [value]
            coerced: Any = [
                coerce_value(v, binding.type, name=binding.parameter, validations=binding.validations)
                for v in items
            ]
        else:
            coerced = coerce_value(value, binding.type, name=binding.parameter, validations=binding.validations)
    except ValueError as e:
        raise InvalidParameterValueError(
            f"Invalid {origin} for parameter '{binding.parameter}' (interaction {binding.index}): {e}",
            data={"parameter": binding.parameter, "index": binding.index, "value": repr(value)},
        ) from e

    _check_options(binding, coerced, origin=origin, value=value)
    return coerced


def resolve_map_entry(entry: MapEntry, evaluator: ExpressionEvaluator, context: Mapping[str, Any]) -> Any:
    if entry.source is not None:
        raw = evaluate_source(entry, entry.source, evaluator, context)
        return coerce_binding_value(entry, raw, origin="mapped value")
    return coerce_binding_value(entry, entry.value, origin="mapped value")


def resolve_else(
    binding: ParameterBinding,
    evaluator: ExpressionEvaluator,
    context: Mapping[str, Any],
) -> tuple[bool, Any]:
    """Returns (has_value, value) for a condition-skipped binding."""
    if binding.else_value is not None:
        return True, coerce_binding_value(binding, binding.else_value, origin="else value")
    if binding.else_source is not None:
        raw = evaluate_source(binding, binding.else_source, evaluator, context)
        return True, coerce_binding_value(binding, raw, origin="else value")
    return False, None
