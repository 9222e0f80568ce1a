"""The resolution engine: dispatch loop, resolvers, parameter store and expressions."""

from .expressions import ExpressionEvaluator
from .expressions_impl import DefaultExpressionEvaluator
from .questioner import Questioner
from .store import ParameterStore, Result

__all__ = ["DefaultExpressionEvaluator", "ExpressionEvaluator", "ParameterStore", "Questioner", "Result"]
