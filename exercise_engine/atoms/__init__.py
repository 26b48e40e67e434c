"""
Answer evaluators for every exercise type.

Each exercise type has its own module with:
- a frozen content model (the answer key)
- parse(): lenient construction from raw content
- evaluate(): per-unit correctness
- clear_wrong(): retry support (wrong units cleared, correct units kept)
"""

from enum import Enum
from typing import TYPE_CHECKING, Any

from exercise_engine.errors import UnknownExerciseTypeError

if TYPE_CHECKING:
    from .base import AnswerEvaluator, ExerciseContentBase


class ExerciseType(str, Enum):
    """Supported exercise types."""
    CLOZE = "cloze"
    CATEGORIZATION = "categorization"
    ORDERING = "ordering"
    MATCHING = "matching"
    MEMORY_GAME = "memory_game"
    IMAGE_LABELING = "image_labeling"
    TEXT_SELECTION = "text_selection"
    SENTENCE_BUILDER = "sentence_builder"
    TABLE_COMPLETION = "table_completion"
    RATING_SCALE = "rating_scale"
    HIGHLIGHT = "highlight"


# Legacy block type names used by stored content
_ALIASES = {
    "fill_in_blanks": ExerciseType.CLOZE,
    "fill-in-blanks": ExerciseType.CLOZE,
    "memory-game": ExerciseType.MEMORY_GAME,
}


# Evaluator registry - populated by @register decorator
EVALUATORS: dict[ExerciseType, "AnswerEvaluator"] = {}


def register(exercise_type: ExerciseType):
    """Decorator to register an evaluator."""
    def decorator(cls):
        EVALUATORS[exercise_type] = cls()
        return cls
    return decorator


def coerce_type(exercise_type: "str | ExerciseType") -> ExerciseType | None:
    """Resolve a type name (or legacy alias) to an ExerciseType."""
    if isinstance(exercise_type, ExerciseType):
        return exercise_type
    key = str(exercise_type).strip().lower()
    if key in _ALIASES:
        return _ALIASES[key]
    try:
        return ExerciseType(key.replace("-", "_"))
    except ValueError:
        return None


def get_evaluator(exercise_type: "str | ExerciseType") -> "AnswerEvaluator | None":
    """Get the evaluator for an exercise type."""
    resolved = coerce_type(exercise_type)
    if resolved is None:
        return None
    return EVALUATORS.get(resolved)


def require_evaluator(exercise_type: "str | ExerciseType") -> "AnswerEvaluator":
    """Get the evaluator for an exercise type or raise UnknownExerciseTypeError."""
    evaluator = get_evaluator(exercise_type)
    if evaluator is None:
        raise UnknownExerciseTypeError(exercise_type)
    return evaluator


def parse_content(exercise_type: "str | ExerciseType", raw: Any) -> "ExerciseContentBase":
    """Build the tagged answer key for an exercise from raw content."""
    return require_evaluator(exercise_type).parse(raw)


# Import evaluators to trigger registration
from . import cloze
from . import categorization
from . import ordering
from . import matching
from . import memory_game
from . import image_labeling
from . import text_selection
from . import sentence_builder
from . import table_completion
from . import rating_scale
from . import highlight

__all__ = [
    "EVALUATORS",
    "ExerciseType",
    "coerce_type",
    "get_evaluator",
    "parse_content",
    "register",
    "require_evaluator",
]
