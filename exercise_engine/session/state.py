"""
Per-question attempt state.

AttemptState is an immutable value: every transition in
exercise_engine.session.machine returns a new instance.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

from exercise_engine.atoms import ExerciseType
from exercise_engine.atoms.base import Evaluation, ExerciseContentBase


class Phase(str, Enum):
    """Lifecycle phase of a question."""

    IDLE = "idle"
    INTERACTING = "interacting"
    READY_TO_CHECK = "ready_to_check"
    EVALUATING = "evaluating"
    RETRY_ALLOWED = "retry_allowed"
    LOCKED = "locked"


class LockReason(str, Enum):
    """Why a question stopped accepting submits."""

    SUCCESS = "success"
    MAX_ATTEMPTS = "max_attempts"
    EXAM = "exam"


@dataclass(frozen=True)
class AttemptState:
    """
    Attempt/hint bookkeeping for one question instance.

    Per-pass counters (attempts_used, hints_revealed) restart on "try again";
    resets and the session totals carry over.
    """

    exercise_type: ExerciseType
    content: ExerciseContentBase
    answer: Any
    hints: tuple[str, ...] = ()
    is_exam_mode: bool = False
    max_attempts: int = 3
    exercise_id: str = ""
    topic: str | None = None

    phase: Phase = Phase.IDLE
    attempts_used: int = 0
    hints_revealed: int = 0
    locked: bool = False
    lock_reason: LockReason | None = None
    started_at: float = 0.0
    resets: int = 0
    session_attempts: int = 0
    session_hints: int = 0

    last_evaluation: Evaluation | None = None
    score: int | None = None

    @property
    def hints_available(self) -> int:
        """Hints this question can reveal (none in exam mode)."""
        return 0 if self.is_exam_mode else len(self.hints)

    @property
    def hints_unlocked(self) -> int:
        """Hints the learner may have revealed so far: one per failed attempt."""
        return min(self.hints_available, self.attempts_used)

    @property
    def can_request_hint(self) -> bool:
        return not self.locked and self.hints_revealed < self.hints_unlocked

    @property
    def attempts_left(self) -> int:
        if self.locked:
            return 0
        return max(0, self.max_attempts - self.attempts_used)

    @property
    def revealed_hints(self) -> tuple[str, ...]:
        return self.hints[: self.hints_revealed]

    def evolve(self, **changes: Any) -> AttemptState:
        """Copy with changes applied."""
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        """Counters for debugging and restore."""
        return {
            "exercise_type": self.exercise_type.value,
            "exercise_id": self.exercise_id,
            "phase": self.phase.value,
            "attempts_used": self.attempts_used,
            "hints_revealed": self.hints_revealed,
            "locked": self.locked,
            "lock_reason": self.lock_reason.value if self.lock_reason else None,
            "resets": self.resets,
            "session_attempts": self.session_attempts,
            "session_hints": self.session_hints,
            "score": self.score,
        }
