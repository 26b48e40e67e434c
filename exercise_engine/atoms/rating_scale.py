"""
Rating scale evaluator.

A single numeric choice between min_value and max_value. With a target value
the answer is right or wrong; without one the question is subjective and any
in-range value counts as correct.

Working answer: the chosen value, or None.
"""

from typing import Any, Literal

from . import ExerciseType, register
from .base import (
    Evaluation,
    ExerciseContentBase,
    UnitStatus,
    as_mapping,
    build_content,
)


class RatingScaleContent(ExerciseContentBase):
    """Answer key for a rating scale question."""

    kind: Literal["rating_scale"] = "rating_scale"
    question: str = ""
    min_value: int = 1
    max_value: int = 5
    min_label: str = ""
    max_label: str = ""
    correct_answer: int | None = None

    @property
    def is_subjective(self) -> bool:
        return self.correct_answer is None


_CAMEL_KEYS = {
    "minValue": "min_value",
    "maxValue": "max_value",
    "minLabel": "min_label",
    "maxLabel": "max_label",
    "correctAnswer": "correct_answer",
}


def coerce_rating(raw: Any) -> int | None:
    """Integer rating from an int, numeric string or {"value": ..} dict."""
    if isinstance(raw, dict):
        raw = raw.get("value")
    if isinstance(raw, bool) or raw is None:
        return None
    if isinstance(raw, int):
        return raw
    try:
        return int(float(str(raw).strip()))
    except (ValueError, OverflowError):
        return None


@register(ExerciseType.RATING_SCALE)
class RatingScaleEvaluator:
    """Evaluator for rating scale questions."""

    partial_credit = False

    def parse(self, raw: Any) -> RatingScaleContent:
        data = {_CAMEL_KEYS.get(k, k): v for k, v in as_mapping(raw).items()}
        return build_content(RatingScaleContent, data, "rating_scale")

    def empty_answer(self, content: RatingScaleContent) -> None:
        return None

    def normalize_answer(self, content: RatingScaleContent, raw: Any) -> int | None:
        return coerce_rating(raw)

    def evaluate(self, content: RatingScaleContent, answer: Any) -> Evaluation:
        if content.min_value > content.max_value:
            return Evaluation.empty(self.partial_credit)

        value = self.normalize_answer(content, answer)
        if value is None:
            status = UnitStatus.EMPTY
        elif not content.min_value <= value <= content.max_value:
            status = UnitStatus.WRONG
        elif content.is_subjective or value == content.correct_answer:
            status = UnitStatus.CORRECT
        else:
            status = UnitStatus.WRONG

        return Evaluation.from_units([("value", status)], self.partial_credit)

    def clear_wrong(self, content: RatingScaleContent, answer: Any, evaluation: Evaluation) -> int | None:
        if evaluation.wrong_units:
            return None
        return self.normalize_answer(content, answer)

    def is_complete(self, content: RatingScaleContent, answer: Any) -> bool:
        return self.normalize_answer(content, answer) is not None
