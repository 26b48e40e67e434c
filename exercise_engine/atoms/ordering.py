"""
Ordering evaluator.

The learner arranges items into sequence. Judged as exact sequence equality:
one misplaced item makes the whole attempt incorrect, so ordering grants no
partial credit. Per-position statuses are still reported so a retry keeps the
items that already sit in the right slot.

Accepted content shapes:
    "first\\nsecond\\nthird"                     (one item per line)
    {"instruction": "...", "correct_order": ["first", "second"]}
    {"items": ["first", "second"]}               (alias)
"""

from typing import Any, Literal

from . import ExerciseType, register
from .base import (
    Evaluation,
    ExerciseContentBase,
    UnitStatus,
    as_mapping,
    build_content,
    coerce_slots,
    is_blank,
    normalize_text,
)


class OrderingContent(ExerciseContentBase):
    """Answer key for an ordering exercise."""

    kind: Literal["ordering"] = "ordering"
    correct_order: tuple[str, ...] = ()


def sequence_units(expected: tuple[str, ...], given: list[str | None]) -> list[tuple[str, UnitStatus]]:
    """Per-position statuses; positions past the expected length count as wrong."""
    units = []
    for i, item in enumerate(expected):
        value = given[i] if i < len(given) else None
        if is_blank(value):
            status = UnitStatus.EMPTY
        elif normalize_text(value) == normalize_text(item):
            status = UnitStatus.CORRECT
        else:
            status = UnitStatus.WRONG
        units.append((str(i), status))
    for i in range(len(expected), len(given)):
        if not is_blank(given[i]):
            units.append((str(i), UnitStatus.WRONG))
    return units


@register(ExerciseType.ORDERING)
class OrderingEvaluator:
    """Evaluator for ordering exercises."""

    partial_credit = False

    def parse(self, raw: Any) -> OrderingContent:
        if isinstance(raw, str):
            lines = [line.strip() for line in raw.splitlines() if line.strip()]
            return build_content(OrderingContent, {"correct_order": lines}, "ordering")

        data = dict(as_mapping(raw))
        if not data.get("correct_order") and isinstance(data.get("items"), list):
            data["correct_order"] = data["items"]
        if not data.get("instruction") and data.get("question"):
            data["instruction"] = data["question"]
        return build_content(OrderingContent, data, "ordering")

    def empty_answer(self, content: OrderingContent) -> list[str | None]:
        return [None] * len(content.correct_order)

    def normalize_answer(self, content: OrderingContent, raw: Any) -> list[str | None]:
        return coerce_slots(raw, len(content.correct_order), truncate=False)

    def evaluate(self, content: OrderingContent, answer: Any) -> Evaluation:
        """Exact sequence equality; statuses per position."""
        if not content.correct_order:
            return Evaluation.empty(self.partial_credit)
        given = self.normalize_answer(content, answer)
        return Evaluation.from_units(sequence_units(content.correct_order, given), self.partial_credit)

    def clear_wrong(self, content: OrderingContent, answer: Any, evaluation: Evaluation) -> list[str | None]:
        """Misplaced items leave their slot; correctly placed items stay."""
        given = self.normalize_answer(content, answer)
        for key in evaluation.wrong_units:
            given[int(key)] = None
        return given[: len(content.correct_order)]

    def is_complete(self, content: OrderingContent, answer: Any) -> bool:
        given = self.normalize_answer(content, answer)
        return bool(content.correct_order) and all(
            not is_blank(v) for v in given[: len(content.correct_order)]
        )
