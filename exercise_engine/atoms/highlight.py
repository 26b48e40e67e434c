"""
Highlight evaluator.

The learner marks words in a passage. Target words form a set; extra
highlights count as wrong units, the same way text selection scores them.

Accepted content shapes:
    {"text": "...", "correctHighlights": [{"start": 4, "end": 9, "text": "quick"}]}
    {"text": "...", "target_words": ["quick", "fox"]}
"""

from typing import Any, Literal

from . import ExerciseType, register
from .base import (
    Evaluation,
    ExerciseContentBase,
    as_mapping,
    build_content,
    coerce_selection,
)
from .text_selection import keep_targets, selection_units


class HighlightContent(ExerciseContentBase):
    """Answer key for a highlight exercise."""

    kind: Literal["highlight"] = "highlight"
    text: str = ""
    target_words: tuple[str, ...] = ()


def _span_text(text: str, span: Any) -> str | None:
    """Text of a {start, end, text} span, sliced from the passage if needed."""
    if isinstance(span, str):
        return span
    if not isinstance(span, dict):
        return None
    if span.get("text"):
        return str(span["text"])
    start, end = span.get("start"), span.get("end")
    if isinstance(start, int) and isinstance(end, int) and 0 <= start < end <= len(text):
        return text[start:end]
    return None


@register(ExerciseType.HIGHLIGHT)
class HighlightEvaluator:
    """Evaluator for highlight exercises."""

    partial_credit = True

    def parse(self, raw: Any) -> HighlightContent:
        data = dict(as_mapping(raw))
        text = str(data.get("text") or "")
        spans = data.get("correctHighlights") or data.get("correct_highlights")
        if not data.get("target_words") and isinstance(spans, list):
            data["target_words"] = coerce_selection([_span_text(text, s) for s in spans])
        elif isinstance(data.get("target_words"), list):
            data["target_words"] = coerce_selection(data["target_words"])
        return build_content(HighlightContent, data, "highlight")

    def empty_answer(self, content: HighlightContent) -> list[str]:
        return []

    def normalize_answer(self, content: HighlightContent, raw: Any) -> list[str]:
        if isinstance(raw, (list, tuple)):
            raw = [_span_text(content.text, span) for span in raw]
        return coerce_selection(raw)

    def evaluate(self, content: HighlightContent, answer: Any) -> Evaluation:
        if not content.target_words:
            return Evaluation.empty(self.partial_credit)
        selected = self.normalize_answer(content, answer)
        return Evaluation.from_units(selection_units(content.target_words, selected), self.partial_credit)

    def clear_wrong(self, content: HighlightContent, answer: Any, evaluation: Evaluation) -> list[str]:
        return keep_targets(content.target_words, self.normalize_answer(content, answer))

    def is_complete(self, content: HighlightContent, answer: Any) -> bool:
        return bool(content.target_words) and len(self.normalize_answer(content, answer)) >= len(content.target_words)
