# src/qna/engine/reviews.py
from __future__ import annotations

import logging
from collections.abc import Sequence

from rich.text import Text

from ..core.types import Disposition, ReviewScope
from ..errors import AnswerValidationError
from ..interactions.models import Action, MapAction, ParameterBinding, Question, Review
from ..io.lines import LineSource, read_line
from ..io.printer import HEADER_STYLE, PARAMETER_STYLE, VALUE_STYLE, Printer
from ..values.string_input import parse_bool, stringify
from .store import ParameterStore

logger = logging.getLogger(__name__)

VERIFY_PROMPT = "Verified? [y/n]"
RETRY_MESSAGE = "Please answer yes or no (y/n)."
UNSET_LABEL = "(unset)"


def review_window(actions: Sequence[Action], position: int) -> list[ParameterBinding]:
    """Collects the items a review at ``position`` covers.

    The window starts after the previous review marker (skipped or not).
    Statements are never included; map entries only for scope 'all'; skipped
    items never.
    """
    review = actions[position]
    if not isinstance(review, Review):
        raise ValueError(f"Interaction {position} is not a review.")

    start = 0
    for i in range(position):
        if isinstance(actions[i], Review):
            start = i + 1

    items: list[ParameterBinding] = []
    for action in actions[start:position]:
        if isinstance(action, Question):
            candidates: Sequence[ParameterBinding] = [action]
        elif isinstance(action, MapAction) and review.review is ReviewScope.ALL:
            candidates = action.maps
        else:
            continue
        items.extend(c for c in candidates if c.disposition is Disposition.ANSWERED)
    return items


def _display_value(value: object) -> str:
    if value is None:
        return UNSET_LABEL
    if isinstance(value, list):
        return ", ".join(stringify(v) for v in value)
    return stringify(value)


def render_review(review: Review, window: Sequence[ParameterBinding], store: ParameterStore) -> Text:
    noun = "answer(s)" if review.review is ReviewScope.QUESTIONS else "value(s)"
    text = Text("\n")
    text.append(f"Review {len(window)} {noun}:", style=HEADER_STYLE)
    text.append("\n")

    for item in window:
        text.append("\n")
        if isinstance(item, Question):
            text.append(item.prompt + "\n")
        text.append("[")
        text.append(item.parameter, style=PARAMETER_STYLE)
        text.append("]: ")
        text.append(_display_value(store.get(item.parameter)), style=VALUE_STYLE)
        text.append("\n")

    text.append("\n" + VERIFY_PROMPT + "\n")
    return text


class ReviewResolver:
    def __init__(self, printer: Printer, source: LineSource) -> None:
        self.printer = printer
        self.source = source

    def resolve(self, review: Review, window: Sequence[ParameterBinding], store: ParameterStore) -> bool:
        """Shows the window and returns True when the operator verifies it."""
        if not window:
            logger.debug("Review at interaction %d has nothing to review; accepted.", review.index)
            return True

        self.printer.print(render_review(review, window, store))
        while True:
            line = read_line(self.source)
            try:
                return bool(parse_bool(line.strip(), name="review"))
            except AnswerValidationError:
                logger.warning("Unrecognized review reply %r at interaction %d.", line, review.index)
                self.printer.warn(RETRY_MESSAGE)
                self.printer.line(VERIFY_PROMPT)
