"""
Categorization evaluator.

Bucket sorting where learners assign items to categories.
Each item is one unit, identified by a stable item id so reordering items
inside a bucket never changes the result.

Accepted content shapes:
    {"categories": ["Fruit", "Veg"], "items": [{"id": "a", "text": "Apple", "category": "Fruit"}]}
    {"categories": {"Fruit": ["Apple"], "Veg": ["Leek"]}}      (bucket mapping)
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
    coerce_mapping,
    normalize_text,
)


class CategorizedItem(BaseModel):
    """An item and the category it belongs to."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    text: str = ""
    category: str


class CategorizationContent(ExerciseContentBase):
    """Answer key for a categorization exercise."""

    kind: Literal["categorization"] = "categorization"
    question: str = ""
    categories: tuple[str, ...] = ()
    items: tuple[CategorizedItem, ...] = ()

    def category_of(self, item_id: str) -> str | None:
        for item in self.items:
            if item.id == item_id:
                return item.category
        return None


def _with_ids(items: list[Any]) -> list[Any]:
    """Give id-less items a stable id derived from their text."""
    seen: set[str] = set()
    result = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            result.append(item)
            continue
        item = dict(item)
        item_id = str(item.get("id") or item.get("text") or f"item-{index}")
        if item_id in seen:
            item_id = f"{item_id}#{index}"
        seen.add(item_id)
        item["id"] = item_id
        result.append(item)
    return result


def _from_buckets(buckets: dict[str, Any]) -> tuple[list[str], list[dict[str, str]]]:
    categories = [str(c) for c in buckets]
    items = []
    for category, members in buckets.items():
        if isinstance(members, (list, tuple)):
            items.extend({"text": str(m), "category": str(category)} for m in members)
    return categories, items


@register(ExerciseType.CATEGORIZATION)
class CategorizationEvaluator:
    """Evaluator for categorization exercises."""

    partial_credit = True

    def parse(self, raw: Any) -> CategorizationContent:
        data = dict(as_mapping(raw))
        categories = data.get("categories")
        if isinstance(categories, dict):
            data["categories"], bucket_items = _from_buckets(categories)
            data.setdefault("items", bucket_items)
        items = data.get("items")
        if isinstance(items, list):
            data["items"] = build_items(CategorizedItem, _with_ids(items), "categorization")
        return build_content(CategorizationContent, data, "categorization")

    def empty_answer(self, content: CategorizationContent) -> dict[str, str]:
        return {}

    def normalize_answer(self, content: CategorizationContent, raw: Any) -> dict[str, str]:
        """
        Working answer: {item_id: category}.

        A bucket mapping {category: [item_id, ...]} is also accepted.
        """
        if isinstance(raw, dict) and raw and all(isinstance(v, (list, tuple)) for v in raw.values()):
            flat: dict[str, str] = {}
            for category, members in raw.items():
                for member in members:
                    flat[str(member)] = str(category)
            return flat
        return coerce_mapping(raw)

    def evaluate(self, content: CategorizationContent, answer: Any) -> Evaluation:
        """Each item is correct when placed in its own category."""
        if not content.items:
            return Evaluation.empty(self.partial_credit)

        placements = self.normalize_answer(content, answer)
        units = []
        for item in content.items:
            placed = placements.get(item.id)
            if placed is None:
                status = UnitStatus.EMPTY
            elif normalize_text(placed) == normalize_text(item.category):
                status = UnitStatus.CORRECT
            else:
                status = UnitStatus.WRONG
            units.append((item.id, status))

        return Evaluation.from_units(units, self.partial_credit)

    def clear_wrong(self, content: CategorizationContent, answer: Any, evaluation: Evaluation) -> dict[str, str]:
        """Wrongly placed items go back to the bank."""
        placements = self.normalize_answer(content, answer)
        wrong = set(evaluation.wrong_units)
        return {item_id: cat for item_id, cat in placements.items() if item_id not in wrong}

    def is_complete(self, content: CategorizationContent, answer: Any) -> bool:
        placements = self.normalize_answer(content, answer)
        return bool(content.items) and all(item.id in placements for item in content.items)
