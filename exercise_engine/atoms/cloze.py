"""
Cloze (fill in the blanks) evaluator.

The sentence contains blanks; the learner drops words from a bank made of the
hidden words plus distractors. Each blank is one unit.

Accepted content shapes:
    "The [cat] sat on the [mat]"                      (bracket markers)
    {"sentence": "The _____ sat", "hidden_words": ["cat"], "distractors": ["dog"]}
"""

import re
from typing import Any, Literal

from loguru import logger

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

BLANK = "_____"
_MARKER = re.compile(r"\[(.*?)\]")


class ClozeContent(ExerciseContentBase):
    """Answer key for a cloze exercise."""

    kind: Literal["cloze"] = "cloze"
    sentence: str = ""
    hidden_words: tuple[str, ...] = ()
    distractors: tuple[str, ...] = ()

    @property
    def word_bank(self) -> tuple[str, ...]:
        """Every draggable word, answers first."""
        return self.hidden_words + self.distractors


def _from_markers(text: str) -> dict[str, Any]:
    hidden = [m.strip() for m in _MARKER.findall(text)]
    return {"sentence": _MARKER.sub(BLANK, text), "hidden_words": hidden}


@register(ExerciseType.CLOZE)
class ClozeEvaluator:
    """Evaluator for cloze exercises."""

    partial_credit = True

    def parse(self, raw: Any) -> ClozeContent:
        """Build the answer key from marker text or a structured dict."""
        if isinstance(raw, str):
            return build_content(ClozeContent, _from_markers(raw), "cloze")

        data = dict(as_mapping(raw))
        sentence = data.get("sentence") or data.get("text") or ""
        if not data.get("hidden_words") and isinstance(sentence, str) and _MARKER.search(sentence):
            data.update(_from_markers(sentence))
        elif isinstance(sentence, str):
            data["sentence"] = sentence

        content = build_content(ClozeContent, data, "cloze")
        if not content.hidden_words:
            logger.warning("Cloze content has no extractable blanks")
        return content

    def empty_answer(self, content: ClozeContent) -> list[str | None]:
        return [None] * len(content.hidden_words)

    def normalize_answer(self, content: ClozeContent, raw: Any) -> list[str | None]:
        return coerce_slots(raw, len(content.hidden_words))

    def evaluate(self, content: ClozeContent, answer: Any) -> Evaluation:
        """Compare each blank with its hidden word."""
        if not content.hidden_words:
            return Evaluation.empty(self.partial_credit)

        slots = self.normalize_answer(content, answer)
        units = []
        for i, expected in enumerate(content.hidden_words):
            given = slots[i]
            if is_blank(given):
                status = UnitStatus.EMPTY
            elif normalize_text(given) == normalize_text(expected):
                status = UnitStatus.CORRECT
            else:
                status = UnitStatus.WRONG
            units.append((str(i), status))

        return Evaluation.from_units(units, self.partial_credit)

    def clear_wrong(self, content: ClozeContent, answer: Any, evaluation: Evaluation) -> list[str | None]:
        slots = self.normalize_answer(content, answer)
        for key in evaluation.wrong_units:
            slots[int(key)] = None
        return slots

    def is_complete(self, content: ClozeContent, answer: Any) -> bool:
        slots = self.normalize_answer(content, answer)
        return bool(slots) and all(not is_blank(s) for s in slots)
