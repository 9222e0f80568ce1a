from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class QnAError(RuntimeError):
    """Represents an expected, structured failure raised by the engine.

    The optional data payload is intended to carry machine-readable context
    (e.g., the offending action index, parameter name, or raw value).
    """

    message: str
    data: dict[str, object] | None = None

    def __str__(self) -> str:
        return self.message


class InvalidConfigurationError(QnAError):
    """The action list is malformed. Raised before any interaction occurs."""


class InvalidParameterValueError(QnAError):
    """A value that cannot be re-asked failed coercion or validation.

    Covers initial parameters picked up by a defined-skip, else-values and
    mapping results. There is nobody to re-prompt, so these are fatal.
    """


class ExpressionError(QnAError):
    """A condition or source expression could not be parsed or evaluated."""


class InputClosedError(QnAError):
    """The line source reached end of input while an answer was pending."""


class AnswerValidationError(ValueError):
    """A raw answer does not satisfy its type or constraints.

    Recoverable: questions and reviews re-prompt on this error.
    """
