"""
Matching evaluator.

Learners connect left items to right items. Each expected connection is one
unit, compared by item ids, never by the (shuffled) display position.
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
    build_items,
)


class MatchItem(BaseModel):
    """One side of a matching pair."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    text: str = ""


class MatchPair(BaseModel):
    """An expected left->right connection."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    left: str
    right: str


class MatchingContent(ExerciseContentBase):
    """Answer key for a matching exercise."""

    kind: Literal["matching"] = "matching"
    left_items: tuple[MatchItem, ...] = ()
    right_items: tuple[MatchItem, ...] = ()
    correct_matches: tuple[MatchPair, ...] = ()


_CAMEL_KEYS = {
    "leftItems": "left_items",
    "rightItems": "right_items",
    "correctMatches": "correct_matches",
}


def _from_pairs(pairs: list[Any]) -> dict[str, Any]:
    """Build ids from a plain [{"term": .., "definition": ..}] pair list."""
    left, right, matches = [], [], []
    for index, pair in enumerate(pairs):
        if not isinstance(pair, dict):
            continue
        term = pair.get("term", pair.get("left"))
        definition = pair.get("definition", pair.get("right"))
        if term is None or definition is None:
            continue
        left.append({"id": f"l{index}", "text": str(term)})
        right.append({"id": f"r{index}", "text": str(definition)})
        matches.append({"left": f"l{index}", "right": f"r{index}"})
    return {"left_items": left, "right_items": right, "correct_matches": matches}


def coerce_connections(raw: Any) -> dict[str, str]:
    """
    Working answer: {left_id: right_id}.

    Also accepts a list of {"leftId": .., "rightId": ..} connections.
    """
    if isinstance(raw, dict):
        return {str(k): str(v) for k, v in raw.items() if v is not None}
    connections: dict[str, str] = {}
    if isinstance(raw, (list, tuple)):
        for conn in raw:
            if not isinstance(conn, dict):
                continue
            left = conn.get("leftId", conn.get("left"))
            right = conn.get("rightId", conn.get("right"))
            if left is not None and right is not None:
                connections[str(left)] = str(right)
    return connections


@register(ExerciseType.MATCHING)
class MatchingEvaluator:
    """Evaluator for matching exercises."""

    partial_credit = True

    def parse(self, raw: Any) -> MatchingContent:
        data = {_CAMEL_KEYS.get(k, k): v for k, v in as_mapping(raw).items()}
        if not data.get("correct_matches") and isinstance(data.get("pairs"), list):
            data.update(_from_pairs(data["pairs"]))
        for key, model in (("left_items", MatchItem), ("right_items", MatchItem), ("correct_matches", MatchPair)):
            if isinstance(data.get(key), list):
                data[key] = build_items(model, data[key], "matching")
        return build_content(MatchingContent, data, "matching")

    def empty_answer(self, content: MatchingContent) -> dict[str, str]:
        return {}

    def normalize_answer(self, content: MatchingContent, raw: Any) -> dict[str, str]:
        return coerce_connections(raw)

    def evaluate(self, content: MatchingContent, answer: Any) -> Evaluation:
        if not content.correct_matches:
            return Evaluation.empty(self.partial_credit)

        connections = self.normalize_answer(content, answer)
        units = []
        for match in content.correct_matches:
            chosen = connections.get(match.left)
            if chosen is None:
                status = UnitStatus.EMPTY
            elif chosen == match.right:
                status = UnitStatus.CORRECT
            else:
                status = UnitStatus.WRONG
            units.append((match.left, status))

        return Evaluation.from_units(units, self.partial_credit)

    def clear_wrong(self, content: MatchingContent, answer: Any, evaluation: Evaluation) -> dict[str, str]:
        connections = self.normalize_answer(content, answer)
        wrong = set(evaluation.wrong_units)
        return {left: right for left, right in connections.items() if left not in wrong}

    def is_complete(self, content: MatchingContent, answer: Any) -> bool:
        connections = self.normalize_answer(content, answer)
        return bool(content.correct_matches) and all(
            m.left in connections for m in content.correct_matches
        )
