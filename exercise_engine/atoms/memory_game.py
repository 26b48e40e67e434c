"""
Memory (pairing) game evaluator.

Cards come in pairs; the learner turns two cards at a time. Each pair is one
unit, identified by its pair index. Card ids are "<pair>a" / "<pair>b".

Working answer: the list of card pairs the learner has claimed as matches,
e.g. [["0a", "0b"], ["1a", "2b"]].
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

from . import ExerciseType, register
from .base import (
    Evaluation,
    ExerciseContentBase,
    UnitStatus,
    as_mapping,
    build_content,
)


class MemoryPair(BaseModel):
    """Two cards that belong together."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    card_a: str = "?"
    card_b: str = "?"


class MemoryGameContent(ExerciseContentBase):
    """Answer key for a memory game."""

    kind: Literal["memory_game"] = "memory_game"
    pairs: tuple[MemoryPair, ...] = ()
    card_back_emoji: str | None = None
    card_back_image: str | None = None

    @property
    def cards(self) -> tuple[tuple[str, str, int], ...]:
        """(card_id, text, pair_index) for every card, unshuffled."""
        cards = []
        for index, pair in enumerate(self.pairs):
            cards.append((f"{index}a", pair.card_a, index))
            cards.append((f"{index}b", pair.card_b, index))
        return tuple(cards)


def pair_index(card_id: str) -> int | None:
    """Pair index encoded in a card id, or None for a foreign id."""
    if len(card_id) < 2 or card_id[-1] not in "ab" or not card_id[:-1].isdigit():
        return None
    return int(card_id[:-1])


def _normalize_pair(pair: Any) -> dict[str, str] | None:
    if not isinstance(pair, dict):
        return None
    return {
        "card_a": str(pair.get("card_a") or pair.get("front") or "?"),
        "card_b": str(pair.get("card_b") or pair.get("back") or "?"),
    }


@register(ExerciseType.MEMORY_GAME)
class MemoryGameEvaluator:
    """Evaluator for memory games."""

    partial_credit = True

    def parse(self, raw: Any) -> MemoryGameContent:
        data = dict(as_mapping(raw))
        pairs = data.get("pairs")
        data["pairs"] = [p for p in map(_normalize_pair, pairs) if p] if isinstance(pairs, list) else []
        data.setdefault("card_back_emoji", data.get("cardBackEmoji"))
        data.setdefault("card_back_image", data.get("cardBackImage"))
        return build_content(MemoryGameContent, data, "memory_game")

    def empty_answer(self, content: MemoryGameContent) -> list[list[str]]:
        return []

    def normalize_answer(self, content: MemoryGameContent, raw: Any) -> list[list[str]]:
        claims: list[list[str]] = []
        if isinstance(raw, (list, tuple)):
            for claim in raw:
                if isinstance(claim, (list, tuple)) and len(claim) == 2:
                    claims.append([str(claim[0]), str(claim[1])])
        return claims

    def evaluate(self, content: MemoryGameContent, answer: Any) -> Evaluation:
        """A pair is correct once both its cards were claimed together."""
        if not content.pairs:
            return Evaluation.empty(self.partial_credit)

        matched: set[int] = set()
        mismatched: set[int] = set()
        for first, second in self.normalize_answer(content, answer):
            a, b = pair_index(first), pair_index(second)
            if a is not None and a == b and first != second and a < len(content.pairs):
                matched.add(a)
            else:
                mismatched.update(i for i in (a, b) if i is not None and i < len(content.pairs))

        units = []
        for index in range(len(content.pairs)):
            if index in matched:
                status = UnitStatus.CORRECT
            elif index in mismatched:
                status = UnitStatus.WRONG
            else:
                status = UnitStatus.EMPTY
            units.append((str(index), status))

        return Evaluation.from_units(units, self.partial_credit)

    def clear_wrong(self, content: MemoryGameContent, answer: Any, evaluation: Evaluation) -> list[list[str]]:
        """Mismatched claims are turned back over; found pairs stay face up."""
        return [
            claim for claim in self.normalize_answer(content, answer)
            if pair_index(claim[0]) is not None
            and pair_index(claim[0]) == pair_index(claim[1])
            and claim[0] != claim[1]
        ]

    def is_complete(self, content: MemoryGameContent, answer: Any) -> bool:
        return self.evaluate(content, answer).is_fully_correct
