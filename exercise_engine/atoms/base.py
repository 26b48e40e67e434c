"""
Base protocol and types for answer evaluators.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Protocol, TypeVar

from loguru import logger
from pydantic import BaseModel, ConfigDict, ValidationError


class UnitStatus(str, Enum):
    """Outcome of one atomic answer unit (blank, item, pair, cell...)."""

    CORRECT = "correct"
    WRONG = "wrong"
    EMPTY = "empty"


@dataclass(frozen=True)
class Evaluation:
    """Result of evaluating a working answer against an answer key."""

    correct_count: int
    total_count: int
    is_fully_correct: bool
    units: tuple[tuple[str, UnitStatus], ...] = ()
    partial_credit: bool = True

    @classmethod
    def from_units(
        cls,
        units: Iterable[tuple[str, UnitStatus]],
        partial_credit: bool = True,
    ) -> Evaluation:
        """Build an evaluation from per-unit statuses. 0/0 is never fully correct."""
        units = tuple(units)
        correct = sum(1 for _, status in units if status is UnitStatus.CORRECT)
        total = len(units)
        return cls(
            correct_count=correct,
            total_count=total,
            is_fully_correct=total > 0 and correct == total,
            units=units,
            partial_credit=partial_credit,
        )

    @classmethod
    def empty(cls, partial_credit: bool = True) -> Evaluation:
        """Zero-unit result for content with no extractable answer key."""
        return cls(0, 0, False, (), partial_credit)

    @property
    def ratio(self) -> float:
        """Correct fraction; 0.0 when there are no units."""
        return self.correct_count / self.total_count if self.total_count > 0 else 0.0

    @property
    def wrong_units(self) -> tuple[str, ...]:
        return tuple(key for key, status in self.units if status is UnitStatus.WRONG)

    @property
    def empty_units(self) -> tuple[str, ...]:
        return tuple(key for key, status in self.units if status is UnitStatus.EMPTY)

    @property
    def correct_units(self) -> tuple[str, ...]:
        return tuple(key for key, status in self.units if status is UnitStatus.CORRECT)

    def status_of(self, key: str) -> UnitStatus | None:
        """Status of a single unit, or None for an unknown key."""
        for unit_key, status in self.units:
            if unit_key == key:
                return status
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "correct_count": self.correct_count,
            "total_count": self.total_count,
            "is_fully_correct": self.is_fully_correct,
            "partial_credit": self.partial_credit,
            "units": {key: status.value for key, status in self.units},
        }


class ExerciseContentBase(BaseModel):
    """
    Base for every answer-key variant.

    Frozen: the answer key of a question instance never changes after it is
    created. Sequences are tuples for the same reason.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    instruction: str = ""


ContentT = TypeVar("ContentT", bound=ExerciseContentBase)


def build_content(model: type[ContentT], data: dict[str, Any], exercise_type: str) -> ContentT:
    """
    Validate raw content into a model, degrading to an empty answer key.

    Malformed content is logged and replaced by the model's defaults, which
    evaluate to zero units.
    """
    try:
        return model.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Malformed {exercise_type} content, using empty answer key: {e.error_count()} errors")
        return model()


ItemT = TypeVar("ItemT", bound=BaseModel)


def build_items(model: type[ItemT], items: Iterable[Any], exercise_type: str) -> list[ItemT]:
    """
    Validate answer-key entries one at a time.

    Entries that fail validation are dropped with a warning, so one broken
    item costs one unit instead of the whole answer key.
    """
    valid: list[ItemT] = []
    dropped = 0
    for item in items:
        try:
            valid.append(model.model_validate(item))
        except ValidationError:
            dropped += 1
    if dropped:
        logger.warning(f"Dropped {dropped} malformed {model.__name__} entries from {exercise_type} content")
    return valid


def as_mapping(raw: Any) -> dict[str, Any]:
    """Return raw content as a dict, or an empty dict for anything else."""
    if isinstance(raw, BaseModel):
        return raw.model_dump()
    return raw if isinstance(raw, dict) else {}


def normalize_text(value: Any) -> str:
    """Whitespace- and case-insensitive comparison key."""
    if value is None:
        return ""
    return " ".join(str(value).split()).casefold()


def is_blank(value: Any) -> bool:
    """True for None or whitespace-only answers."""
    return value is None or (isinstance(value, str) and not value.strip())


def coerce_slots(raw: Any, size: int, truncate: bool = True) -> list[str | None]:
    """
    Coerce a raw answer into a list of slots.

    Accepts a list/tuple of values or a {"index": value} mapping. Blank values
    become None; the list is padded with None to `size`. Mapping indexes at or
    beyond `size` (or `size + len(raw)` when not truncating) are ignored, so
    the result never grows with the index a client sends.
    """
    slots: list[str | None] = []
    if isinstance(raw, (list, tuple)):
        slots = [None if is_blank(v) else str(v) for v in raw]
    elif isinstance(raw, dict):
        limit = size if truncate else size + len(raw)
        indexed: dict[int, str] = {}
        for key, value in raw.items():
            try:
                idx = int(key)
            except (TypeError, ValueError):
                continue
            if 0 <= idx < limit and not is_blank(value):
                indexed[idx] = str(value)
        if indexed:
            slots = [indexed.get(i) for i in range(max(indexed) + 1)]

    if truncate:
        slots = slots[:size]
    if len(slots) < size:
        slots.extend([None] * (size - len(slots)))
    return slots


def coerce_mapping(raw: Any) -> dict[str, str]:
    """Coerce a raw answer into a {key: value} mapping of non-blank strings."""
    if isinstance(raw, dict):
        return {str(k): str(v) for k, v in raw.items() if not is_blank(v)}
    return {}


def coerce_selection(raw: Any) -> list[str]:
    """Coerce a raw selection answer into a de-duplicated list, keeping order."""
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, (list, tuple, set, frozenset)):
        return []
    seen: set[str] = set()
    result: list[str] = []
    for value in raw:
        if isinstance(value, dict):
            value = value.get("text")
        if is_blank(value):
            continue
        text = str(value)
        key = normalize_text(text)
        if key not in seen:
            seen.add(key)
            result.append(text)
    return result


class AnswerEvaluator(Protocol):
    """Protocol for exercise evaluators."""

    partial_credit: bool

    def parse(self, raw: Any) -> ExerciseContentBase:
        """Build the answer key from raw content. Never raises for malformed input."""
        ...

    def empty_answer(self, content: Any) -> Any:
        """Working answer with every unit unanswered."""
        ...

    def normalize_answer(self, content: Any, raw: Any) -> Any:
        """Coerce a raw (e.g. JSON-decoded) answer into this evaluator's working shape."""
        ...

    def evaluate(self, content: Any, answer: Any) -> Evaluation:
        """Judge the working answer against the answer key."""
        ...

    def clear_wrong(self, content: Any, answer: Any, evaluation: Evaluation) -> Any:
        """Return a copy of the answer with wrong units cleared and correct units kept."""
        ...

    def is_complete(self, content: Any, answer: Any) -> bool:
        """Whether every unit has been answered."""
        ...
