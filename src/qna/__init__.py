"""qna: scripted, sequential question-and-answer sessions driven by declarative bundles."""

from importlib.metadata import PackageNotFoundError, version

from .core.types import ANSWERED, CONDITION_SKIPPED, DEFINED_SKIPPED, Disposition
from .engine.questioner import Questioner
from .engine.store import Result
from .errors import (
    AnswerValidationError,
    ExpressionError,
    InputClosedError,
    InvalidConfigurationError,
    InvalidParameterValueError,
    QnAError,
)

try:
    __version__ = version("question-and-answer")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "ANSWERED",
    "CONDITION_SKIPPED",
    "DEFINED_SKIPPED",
    "AnswerValidationError",
    "Disposition",
    "ExpressionError",
    "InputClosedError",
    "InvalidConfigurationError",
    "InvalidParameterValueError",
    "QnAError",
    "Questioner",
    "Result",
    "__version__",
]
