"""Action models and construction-time validation of interaction bundles."""

from .models import Action, MapAction, MapEntry, ParameterBinding, Question, Review, Statement
from .validator import count_by_kind, extract_actions, parse_interactions

__all__ = [
    "Action",
    "MapAction",
    "MapEntry",
    "ParameterBinding",
    "Question",
    "Review",
    "Statement",
    "count_by_kind",
    "extract_actions",
    "parse_interactions",
]
