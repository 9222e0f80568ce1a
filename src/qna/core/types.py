from __future__ import annotations

from enum import Enum


class ActionKind(str, Enum):
    """Discriminator for the action union.

    The value is the bundle field that marks an entry as that kind.
    """

    QUESTION = "prompt"
    MAPPING = "maps"
    STATEMENT = "statement"
    REVIEW = "review"


class Disposition(str, Enum):
    """Outcome tag attached to a processed action or map entry."""

    ANSWERED = "answered"
    CONDITION_SKIPPED = "condition-skipped"
    DEFINED_SKIPPED = "defined-skipped"


class ReviewScope(str, Enum):
    QUESTIONS = "questions"
    ALL = "all"


ANSWERED = Disposition.ANSWERED
CONDITION_SKIPPED = Disposition.CONDITION_SKIPPED
DEFINED_SKIPPED = Disposition.DEFINED_SKIPPED
