# src/qna/engine/store.py
from __future__ import annotations

import copy
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from ..core.types import Disposition
from ..interactions.models import MapEntry, ParameterBinding, Question, Review


@dataclass(frozen=True)
class Result:
    """One resolved parameter: the final value plus a snapshot of what produced it.

    Stored fields:
    - parameter: The parameter name.
    - value: The typed value (a list for multi-value questions; None when unset).
    - disposition: How the value was arrived at.
    - action: A copy of the question, map entry or review, taken when the
      value was recorded (its disposition is filled in).
    - handling: Pass-through metadata copied from the action.
    """

    parameter: str
    value: Any
    disposition: Disposition
    action: ParameterBinding | Review
    handling: Any = None

    @property
    def index(self) -> int:
        return self.action.index

    def to_dict(self) -> dict[str, object]:
        """Converts the result into a JSON/YAML-friendly mapping."""
        out: dict[str, object] = {
            "parameter": self.parameter,
            "value": copy.deepcopy(self.value),
            "disposition": self.disposition.value,
            "index": self.index,
        }
        if isinstance(self.action, Question):
            out["prompt"] = self.action.prompt
        elif isinstance(self.action, MapEntry):
            if self.action.source is not None:
                out["source"] = self.action.source
            else:
                out["mapped_value"] = copy.deepcopy(self.action.value)
        elif isinstance(self.action, Review):
            out["review"] = self.action.review.value
        if self.handling is not None:
            out["handling"] = copy.deepcopy(self.handling)
        return out


class ParameterStore:
    """Holds resolved results plus the externally supplied initial parameters.

    At most one current result exists per parameter: recording a parameter
    again supersedes the earlier result. Resolved values take precedence over
    initial values, and falsy resolved values (False, 0, "", None) still count
    as resolved.
    """

    def __init__(self, initial_parameters: Mapping[str, Any] | None = None) -> None:
        self._initial: dict[str, Any] = copy.deepcopy(dict(initial_parameters or {}))
        self._results: list[Result] = []

    def _find(self, parameter: str) -> Result | None:
        for r in self._results:
            if r.parameter == parameter:
                return r
        return None

    def get(self, parameter: str) -> Any:
        r = self._find(parameter)
        if r is not None:
            return copy.deepcopy(r.value)
        return copy.deepcopy(self._initial.get(parameter))

    def has(self, parameter: str) -> bool:
        return self.has_result(parameter) or parameter in self._initial

    def has_result(self, parameter: str) -> bool:
        return self._find(parameter) is not None

    def initial_value(self, parameter: str) -> Any:
        return copy.deepcopy(self._initial.get(parameter))

    def get_result(self, parameter: str) -> Result | None:
        r = self._find(parameter)
        return copy.deepcopy(r) if r is not None else None

    def record_result(self, action: ParameterBinding | Review, value: Any, disposition: Disposition) -> Result:
        name = action.parameter
        if name is None:
            raise ValueError("Cannot record a result without a parameter name.")

        snapshot = copy.deepcopy(action)
        snapshot.disposition = disposition
        result = Result(
            parameter=name,
            value=copy.deepcopy(value),
            disposition=disposition,
            action=snapshot,
            handling=copy.deepcopy(getattr(action, "handling", None)),
        )

        self._results = [r for r in self._results if r.parameter != name]
        self._results.append(result)
        return result

    def remove(self, parameters: Iterable[str]) -> list[str]:
        """Deletes the current results for the given parameters; returns those removed."""
        doomed = set(parameters)
        removed = [r.parameter for r in self._results if r.parameter in doomed]
        self._results = [r for r in self._results if r.parameter not in doomed]
        return removed

    def evaluation_context(self) -> dict[str, Any]:
        ctx = copy.deepcopy(self._initial)
        for r in self._results:
            ctx[r.parameter] = copy.deepcopy(r.value)
        return ctx

    def all_values(self) -> dict[str, Any]:
        """Resolved parameters only, in resolution order; unused initial parameters are left out."""
        return {r.parameter: copy.deepcopy(r.value) for r in self._results}

    def all_results(self) -> list[Result]:
        return copy.deepcopy(self._results)
