"""
Per-question telemetry.

TelemetryRecorder assembles the record handed to on_complete when a question
locks. It only reads the state it is given; the snapshot of the final answer
is a deep copy so later mutation by the caller cannot change the record.
"""

from __future__ import annotations

import copy
import math
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from exercise_engine.core.scoring import round_half_up

if TYPE_CHECKING:
    from exercise_engine.atoms.base import Evaluation
    from exercise_engine.session.state import AttemptState


@dataclass(frozen=True)
class TelemetryData:
    """Telemetry for one terminal evaluation."""

    exercise_id: str
    exercise_type: str
    time_seconds: int
    attempts: int
    hints_used: int
    last_answer: Any
    is_correct: bool
    score: int
    correct_count: int = 0
    total_count: int = 0
    hints_available: int = 0
    resets: int = 0
    session_attempts: int = 0
    session_hints: int = 0
    is_exam_mode: bool = False
    topic: str | None = None
    completed_at: str = ""

    # Adaptive fields, filled by callers that run variants or scaffolding
    variant: str | None = None
    scaffolding_offered: bool = False
    scaffolding_accepted: bool = False
    error_tags: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the camelCase wire shape."""
        data = asdict(self)
        data["error_tags"] = list(self.error_tags)
        return {_camel(key): value for key, value in data.items()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TelemetryData:
        """Create from a camelCase or snake_case dictionary."""
        known = {f for f in cls.__dataclass_fields__}
        kwargs = {}
        for key, value in data.items():
            snake = _snake(key)
            if snake in known:
                kwargs[snake] = value
        kwargs.setdefault("exercise_id", "")
        kwargs.setdefault("exercise_type", "")
        kwargs["time_seconds"] = whole_seconds(kwargs.get("time_seconds", 0))
        kwargs.setdefault("attempts", 1)
        kwargs.setdefault("hints_used", 0)
        kwargs.setdefault("last_answer", None)
        kwargs.setdefault("is_correct", False)
        kwargs.setdefault("score", 0)
        kwargs["error_tags"] = tuple(kwargs.get("error_tags") or ())
        return cls(**kwargs)


def whole_seconds(value: Any) -> int:
    """Elapsed seconds as a non-negative whole number, rounded half up."""
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(seconds) or seconds <= 0:
        return 0
    return round_half_up(Decimal(str(seconds)))


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _snake(name: str) -> str:
    return "".join(f"_{c.lower()}" if c.isupper() else c for c in name)


class TelemetryRecorder:
    """Builds TelemetryData from a locked AttemptState."""

    def record(
        self,
        state: AttemptState,
        evaluation: Evaluation,
        score: int,
        elapsed_sec: float,
        completed_at: datetime | None = None,
    ) -> TelemetryData:
        """
        Package the counters of a terminal evaluation.

        Args:
            state: State at the moment of the terminal lock
            evaluation: The evaluation that locked the question
            score: Final score awarded
            elapsed_sec: Seconds from state creation to lock, rounded half up (negative clamps to 0)
            completed_at: Wall-clock completion time (default: now, UTC)
        """
        completed = completed_at or datetime.now(UTC)
        return TelemetryData(
            exercise_id=state.exercise_id,
            exercise_type=state.exercise_type.value,
            time_seconds=whole_seconds(elapsed_sec),
            attempts=max(1, state.attempts_used),
            hints_used=state.hints_revealed,
            last_answer=copy.deepcopy(state.answer),
            is_correct=evaluation.is_fully_correct,
            score=score,
            correct_count=evaluation.correct_count,
            total_count=evaluation.total_count,
            hints_available=state.hints_available,
            resets=state.resets,
            session_attempts=state.session_attempts,
            session_hints=state.session_hints,
            is_exam_mode=state.is_exam_mode,
            topic=state.topic,
            completed_at=completed.isoformat(),
        )
