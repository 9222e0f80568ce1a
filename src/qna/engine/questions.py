# src/qna/engine/questions.py
from __future__ import annotations

import logging
import re
from typing import Any

from rich.text import Text

from ..errors import AnswerValidationError
from ..interactions.models import Question
from ..io.lines import LineSource, read_line
from ..io.printer import Printer
from ..values.string_input import parse_bool, stringify
from ..values.translate import coerce_value, is_boolean_type

logger = logging.getLogger(__name__)

# Typed on its own, clears the value (and the default offered on later re-asks).
BLANK_ANSWER = "-"

NO_DEFAULT_MESSAGE = "No default defined. Please provide a valid answer."

HINT_STYLE = "dim"


def split_tokens(q: Question, raw: str) -> list[str]:
    """Splits a multi-value answer on the literal separator; single answers are one token."""
    if not q.multi_value:
        return [raw.strip()]
    return [t.strip() for t in re.split(re.escape(q.separator), raw) if t.strip()]


def static_default_raw(q: Question) -> str | None:
    """Expresses the configured default the way an operator would type it.

    Options defaults become 1-based option numbers.
    """
    if q.default is None:
        return None

    defaults = q.default if (q.multi_value and isinstance(q.default, list)) else [q.default]
    if q.options is not None:
        tokens = [str(q.options.index(d) + 1) for d in defaults]
    else:
        tokens = [stringify(d) for d in defaults]
    return q.separator.join(tokens)


def default_raw(q: Question, raw_answers: dict[int, str]) -> str | None:
    raw = raw_answers.get(q.index)
    if raw is None:
        return static_default_raw(q)
    if raw == BLANK_ANSWER:
        return None
    return raw


def default_label(q: Question, raw: str) -> str:
    """Display form of a raw default: option text for options, y/n for booleans."""
    if q.options is not None:
        labels = []
        for token in split_tokens(q, raw):
            if token.isdigit() and 1 <= int(token) <= len(q.options):
                labels.append(stringify(q.options[int(token) - 1]))
            else:
                labels.append(token)
        return q.separator.join(labels)

    if is_boolean_type(q.type) and not q.multi_value:
        try:
            return "y" if parse_bool(raw, name=q.parameter) else "n"
        except AnswerValidationError:
            return raw

    return raw


def render_question(q: Question, default: str | None) -> Text:
    text = Text("\n" + q.prompt)

    if q.options is None:
        if default is not None:
            text.append(f"\n[{default_label(q, default)}|-]", style=HINT_STYLE)
        elif is_boolean_type(q.type) and not q.multi_value:
            text.append("\n[y/n]", style=HINT_STYLE)
        text.append("\n")
    else:
        if default is not None:
            text.append(f"\n[{default_label(q, default)}]", style=HINT_STYLE)
        text.append("\n\n")
        for i, opt in enumerate(q.options, start=1):
            text.append(f"{i}) {stringify(opt)}\n")

    if q.multi_value:
        what = "option numbers" if q.options is not None else "values"
        text.append(f"Enter one or more {what} separated by '{q.separator}'.\n", style=HINT_STYLE)

    return text


def _select(q: Question, token: str) -> Any:
    options = q.options or []
    n = len(options)
    # 0 and empty select nothing only when the question is explicitly optional
    lowest = 0 if q.validations.get("required") is False else 1

    if token == "":
        if lowest == 0:
            return None
    elif re.fullmatch(r"\d+", token):
        choice = int(token)
        if lowest <= choice <= n:
            return None if choice == 0 else options[choice - 1]

    raise AnswerValidationError(f"Invalid selection. Please enter a number between 1 and {n}.")


def _coerce(q: Question, token: str) -> Any:
    try:
        return coerce_value(token, q.type, name=q.parameter, validations=q.validations)
    except ValueError as e:
        # Callable types may raise plain ValueError.
        raise AnswerValidationError(str(e)) from e


def _check_answer(q: Question, value: Any) -> None:
    if q.validations.get("required") and (value is None or value == []):
        raise AnswerValidationError(f"A value for '{q.parameter}' is required.")

    if not q.multi_value or value is None:
        return

    count = len(value)
    min_count = q.validations.get("min_count")
    max_count = q.validations.get("max_count")
    if min_count is not None and count < min_count:
        raise AnswerValidationError(f"Expected at least {min_count} value(s) for '{q.parameter}'; got {count}.")
    if max_count is not None and count > max_count:
        raise AnswerValidationError(f"Expected at most {max_count} value(s) for '{q.parameter}'; got {count}.")


def parse_answer(q: Question, line: str, default: str | None) -> tuple[str, Any]:
    """Turns one operator line into the question's typed value.

    Returns:
        The effective raw answer (the default when the line was empty) and
        the parsed value: a single value, or a list for multi-value questions.

    Raises:
        AnswerValidationError: When the answer should be asked again.
    """
    raw = line.strip()
    if raw == "":
        if default is not None:
            raw = default
        elif q.options is None:
            raise AnswerValidationError(NO_DEFAULT_MESSAGE)

    if raw == BLANK_ANSWER:
        value: Any = None
    elif q.multi_value:
        tokens = split_tokens(q, raw)
        if q.options is not None:
            value = [v for v in (_select(q, t) for t in tokens or [""]) if v is not None]
        else:
            value = [_coerce(q, t) for t in tokens]
    elif q.options is not None:
        value = _select(q, raw)
    else:
        value = _coerce(q, raw)

    _check_answer(q, value)
    # An empty selection leaves no default behind for later re-asks.
    return raw or BLANK_ANSWER, value


class QuestionResolver:
    """Asks questions until each gets an acceptable answer.

    Accepted raw answers are remembered per action index so that a question
    re-asked after a review rejection offers the previous answer as its
    default.
    """

    def __init__(self, printer: Printer, source: LineSource) -> None:
        self.printer = printer
        self.source = source
        self.raw_answers: dict[int, str] = {}

    def resolve(self, q: Question) -> Any:
        while True:
            default = default_raw(q, self.raw_answers)
            self.printer.print(render_question(q, default))

            line = read_line(self.source)
            try:
                raw, value = parse_answer(q, line, default)
            except AnswerValidationError as e:
                self.raw_answers.pop(q.index, None)
                logger.warning("Answer for '%s' (action %d) rejected: %s", q.parameter, q.index, e)
                self.printer.warn(str(e))
                continue

            self.raw_answers[q.index] = raw
            return value
