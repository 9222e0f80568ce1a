# src/qna/engine/questioner.py
from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from typing import Any

from rich.console import Console

from ..config.models import PrintOptions
from ..core.types import ANSWERED, CONDITION_SKIPPED, DEFINED_SKIPPED
from ..errors import InvalidConfigurationError
from ..interactions.models import Action, MapAction, MapEntry, ParameterBinding, Question, Review, Statement
from ..interactions.validator import parse_interactions
from ..io.lines import LineSource, default_line_source
from ..io.printer import OutputSink, Printer
from .expressions import ExpressionEvaluator
from .expressions_impl import DefaultExpressionEvaluator
from .mappings import coerce_binding_value, resolve_else, resolve_map_entry
from .questions import QuestionResolver
from .reviews import ReviewResolver, review_window
from .store import ParameterStore, Result

logger = logging.getLogger(__name__)


class Questioner:
    """Runs an interaction bundle against an operator and collects parameter values.

    The bundle is validated and deep-copied when the questioner is built, so
    configuration mistakes surface before anything is asked. question() then
    resolves every action in order, re-running from the first action whenever
    the operator rejects a review.
    """

    def __init__(
        self,
        *,
        interactions: object = None,
        initial_parameters: Mapping[str, Any] | None = None,
        no_skip_defined: bool = False,
        input: LineSource | None = None,
        output: OutputSink | Console | None = None,
        print_options: PrintOptions | Mapping[str, Any] | None = None,
        evaluator: ExpressionEvaluator | None = None,
        record_review_results: bool = True,
    ) -> None:
        self._actions: list[Action] = parse_interactions(interactions) if interactions is not None else []
        self._initial_parameters: dict[str, Any] = copy.deepcopy(dict(initial_parameters or {}))
        self.no_skip_defined = bool(no_skip_defined)
        self.record_review_results = bool(record_review_results)
        self.evaluator: ExpressionEvaluator = evaluator or DefaultExpressionEvaluator()

        if not isinstance(print_options, PrintOptions):
            print_options = PrintOptions.from_dict(print_options)
        self.printer = Printer(output, print_options)
        self.source: LineSource = input if input is not None else default_line_source()

        self._store = ParameterStore(self._initial_parameters)
        self._questions = QuestionResolver(self.printer, self.source)
        self._reviews = ReviewResolver(self.printer, self.source)

    # ---- running ----

    def question(self) -> dict[str, Any]:
        """Resolves every action, prompting where needed, and returns the values.

        Raises:
            InvalidConfigurationError: If no actions were supplied.
            InvalidParameterValueError: If an initial parameter, else-value or
                mapping fails its type or validations.
            ExpressionError: If a condition or source expression is malformed.
            InputClosedError: If input ends while an answer is pending.
        """
        if not self._actions:
            raise InvalidConfigurationError("No interactions defined; nothing to question.")

        self._store = ParameterStore(self._initial_parameters)
        self._questions.raw_answers.clear()

        passes = 1
        while not self._process_actions():
            passes += 1
            logger.info("Restarting from the first interaction (pass %d).", passes)

        logger.debug("Questioning complete after %d pass(es); %d result(s).", passes, len(self._store.all_results()))
        return self.values

    def _reset_dispositions(self) -> None:
        for action in self._actions:
            action.disposition = None
            if isinstance(action, MapAction):
                for entry in action.maps:
                    entry.disposition = None

    def _process_actions(self) -> bool:
        """Runs one pass over the actions; False means a review was rejected."""
        self._reset_dispositions()

        for position, action in enumerate(self._actions):
            logger.debug("Processing interaction %d (%s).", action.index, action.kind.name.lower())
            if isinstance(action, Question):
                self._process_binding(action)
            elif isinstance(action, MapAction):
                self._process_map_action(action)
            elif isinstance(action, Statement):
                self._process_statement(action)
            elif isinstance(action, Review):
                if not self._process_review(action, position):
                    return False
        return True

    def _condition_holds(self, condition: str | None) -> bool:
        if condition is None:
            return True
        return self.evaluator.eval_truth(condition, self._store.evaluation_context())

    def _process_binding(self, binding: ParameterBinding, *, enclosing_condition: bool = True) -> None:
        if not enclosing_condition or not self._condition_holds(binding.condition):
            binding.disposition = CONDITION_SKIPPED
            has_value, value = resolve_else(binding, self.evaluator, self._store.evaluation_context())
            if has_value:
                self._store.record_result(binding, value, CONDITION_SKIPPED)
            logger.debug("'%s' condition-skipped (else value: %s).", binding.parameter, has_value)
            return

        if self._skip_defined(binding):
            return

        if isinstance(binding, Question):
            value = self._questions.resolve(binding)
        elif isinstance(binding, MapEntry):
            value = resolve_map_entry(binding, self.evaluator, self._store.evaluation_context())
        else:
            raise TypeError(f"Unsupported parameter binding: {type(binding).__name__}")

        binding.disposition = ANSWERED
        self._store.record_result(binding, value, ANSWERED)

    def _skip_defined(self, binding: ParameterBinding) -> bool:
        if self.no_skip_defined or binding.no_skip_defined:
            return False

        name = binding.parameter
        if self._store.has_result(name):
            binding.disposition = DEFINED_SKIPPED
            logger.debug("'%s' already resolved; defined-skipped.", name)
            return True

        if not self._store.has(name):
            return False

        value = coerce_binding_value(binding, self._store.initial_value(name), origin="initial value")
        binding.disposition = DEFINED_SKIPPED
        self._store.record_result(binding, value, DEFINED_SKIPPED)
        logger.debug("'%s' taken from initial parameters; defined-skipped.", name)
        return True

    def _process_map_action(self, action: MapAction) -> None:
        holds = self._condition_holds(action.condition)
        action.disposition = ANSWERED if holds else CONDITION_SKIPPED
        for entry in action.maps:
            self._process_binding(entry, enclosing_condition=holds)

    def _process_statement(self, statement: Statement) -> None:
        if not self._condition_holds(statement.condition):
            statement.disposition = CONDITION_SKIPPED
            return

        opts = statement.output_options
        self.printer.line(statement.statement, style=opts.get("style"), wrap=bool(opts.get("wrap", True)))
        statement.disposition = ANSWERED

    def _process_review(self, review: Review, position: int) -> bool:
        if not self._condition_holds(review.condition):
            review.disposition = CONDITION_SKIPPED
            return True

        window = review_window(self._actions, position)
        accepted = self._reviews.resolve(review, window, self._store)
        review.disposition = ANSWERED

        if accepted:
            if review.parameter and self.record_review_results:
                self._store.record_result(review, True, ANSWERED)
            return True

        removed = self._store.remove(item.parameter for item in window)
        logger.info("Review at interaction %d rejected; cleared %s.", review.index, removed)
        return False

    # ---- queries ----

    def get(self, parameter: str) -> Any:
        return self._store.get(parameter)

    def has(self, parameter: str) -> bool:
        return self._store.has(parameter)

    def get_result(self, parameter: str) -> Result | None:
        return self._store.get_result(parameter)

    @property
    def values(self) -> dict[str, Any]:
        return self._store.all_values()

    @property
    def results(self) -> list[Result]:
        return self._store.all_results()

    @property
    def interactions(self) -> list[Action]:
        return copy.deepcopy(self._actions)
