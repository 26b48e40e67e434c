"""
Sentence builder evaluator.

The learner assembles a sentence from a word bank. Judged as exact sequence
equality of words, so there is no partial credit. Word positions are still
reported so a retry keeps the words already in place.

Working answer: list of words in the built order.
"""

from typing import Any, Literal

from . import ExerciseType, register
from .base import (
    Evaluation,
    ExerciseContentBase,
    as_mapping,
    build_content,
    coerce_slots,
    is_blank,
)
from .ordering import sequence_units


class SentenceBuilderContent(ExerciseContentBase):
    """Answer key for a sentence builder exercise."""

    kind: Literal["sentence_builder"] = "sentence_builder"
    words: tuple[str, ...] = ()
    correct_sentence: str = ""

    @property
    def tokens(self) -> tuple[str, ...]:
        return tuple(self.correct_sentence.split())


@register(ExerciseType.SENTENCE_BUILDER)
class SentenceBuilderEvaluator:
    """Evaluator for sentence builder exercises."""

    partial_credit = False

    def parse(self, raw: Any) -> SentenceBuilderContent:
        data = dict(as_mapping(raw))
        if "correctSentence" in data:
            data.setdefault("correct_sentence", data.pop("correctSentence"))
        if not data.get("words") and isinstance(data.get("correct_sentence"), str):
            data["words"] = data["correct_sentence"].split()
        return build_content(SentenceBuilderContent, data, "sentence_builder")

    def empty_answer(self, content: SentenceBuilderContent) -> list[str | None]:
        return [None] * len(content.tokens)

    def normalize_answer(self, content: SentenceBuilderContent, raw: Any) -> list[str | None]:
        if isinstance(raw, str):
            raw = raw.split()
        return coerce_slots(raw, len(content.tokens), truncate=False)

    def evaluate(self, content: SentenceBuilderContent, answer: Any) -> Evaluation:
        if not content.tokens:
            return Evaluation.empty(self.partial_credit)
        built = self.normalize_answer(content, answer)
        return Evaluation.from_units(sequence_units(content.tokens, built), self.partial_credit)

    def clear_wrong(self, content: SentenceBuilderContent, answer: Any, evaluation: Evaluation) -> list[str | None]:
        built = self.normalize_answer(content, answer)
        for key in evaluation.wrong_units:
            built[int(key)] = None
        return built[: len(content.tokens)]

    def is_complete(self, content: SentenceBuilderContent, answer: Any) -> bool:
        built = self.normalize_answer(content, answer)
        return bool(content.tokens) and all(not is_blank(w) for w in built[: len(content.tokens)])
