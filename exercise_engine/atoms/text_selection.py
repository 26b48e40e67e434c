"""
Text selection evaluator.

The learner clicks selectable units (words or phrases) of a text. Every
correct selection is one unit; every selection that is not a target adds a
wrong unit, so selecting everything is never fully correct.

Working answer: list of selected unit texts.
"""

from typing import Any, Literal

from . import ExerciseType, register
from .base import (
    Evaluation,
    ExerciseContentBase,
    UnitStatus,
    as_mapping,
    build_content,
    coerce_selection,
    normalize_text,
)


class TextSelectionContent(ExerciseContentBase):
    """Answer key for a text selection exercise."""

    kind: Literal["text_selection"] = "text_selection"
    text: str = ""
    selectable_units: tuple[str, ...] = ()
    correct_selections: tuple[str, ...] = ()
    min_selections: int | None = None
    max_selections: int | None = None


_CAMEL_KEYS = {
    "selectableUnits": "selectable_units",
    "correctSelections": "correct_selections",
    "minSelections": "min_selections",
    "maxSelections": "max_selections",
}


def selection_units(targets: tuple[str, ...], selected: list[str]) -> list[tuple[str, UnitStatus]]:
    """
    Statuses for a target set against a selection.

    Targets are keyed by position ("t0", "t1"...), extra selections by their
    normalized text ("x:word").
    """
    target_keys = [normalize_text(t) for t in targets]
    chosen = {normalize_text(s) for s in selected}

    units = []
    for index, key in enumerate(target_keys):
        status = UnitStatus.CORRECT if key in chosen else UnitStatus.EMPTY
        units.append((f"t{index}", status))
    for text in selected:
        key = normalize_text(text)
        if key not in target_keys:
            units.append((f"x:{key}", UnitStatus.WRONG))
    return units


def keep_targets(targets: tuple[str, ...], selected: list[str]) -> list[str]:
    """Drop every selection that is not a target."""
    target_keys = {normalize_text(t) for t in targets}
    return [s for s in selected if normalize_text(s) in target_keys]


@register(ExerciseType.TEXT_SELECTION)
class TextSelectionEvaluator:
    """Evaluator for text selection exercises."""

    partial_credit = True

    def parse(self, raw: Any) -> TextSelectionContent:
        data = {_CAMEL_KEYS.get(k, k): v for k, v in as_mapping(raw).items()}
        for key in ("selectable_units", "correct_selections"):
            if isinstance(data.get(key), list):
                data[key] = coerce_selection(data[key])
        return build_content(TextSelectionContent, data, "text_selection")

    def empty_answer(self, content: TextSelectionContent) -> list[str]:
        return []

    def normalize_answer(self, content: TextSelectionContent, raw: Any) -> list[str]:
        return coerce_selection(raw)

    def evaluate(self, content: TextSelectionContent, answer: Any) -> Evaluation:
        if not content.correct_selections:
            return Evaluation.empty(self.partial_credit)
        selected = self.normalize_answer(content, answer)
        return Evaluation.from_units(
            selection_units(content.correct_selections, selected), self.partial_credit
        )

    def clear_wrong(self, content: TextSelectionContent, answer: Any, evaluation: Evaluation) -> list[str]:
        return keep_targets(content.correct_selections, self.normalize_answer(content, answer))

    def is_complete(self, content: TextSelectionContent, answer: Any) -> bool:
        needed = content.min_selections or len(content.correct_selections)
        return bool(content.correct_selections) and len(self.normalize_answer(content, answer)) >= needed
