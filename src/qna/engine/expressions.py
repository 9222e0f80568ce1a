from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol


class ExpressionEvaluator(Protocol):
    def eval_truth(self, expression: str, parameters: Mapping[str, Any]) -> bool:
        """
        Evaluate a condition against the currently known parameter values.
        Must raise ExpressionError on malformed syntax.
        """
        ...

    def eval_number(self, expression: str, parameters: Mapping[str, Any]) -> int | float:
        """Evaluate an arithmetic expression; non-numeric results raise ExpressionError."""
        ...
