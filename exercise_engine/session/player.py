"""
ExercisePlayer: runs the state machine for one question and executes effects.

The player owns the current AttemptState, reads the injected clocks and calls
the host callbacks:

    on_hint_used()                 once per hint revealed by request_hint()
    on_complete(score, telemetry)  exactly once per terminal lock

Callback failures are logged and kept in `delivery_failures`; they never roll
back the state and never block progression.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Callable

from loguru import logger

from exercise_engine.atoms import ExerciseType
from exercise_engine.core.scoring import DEFAULT_SCORING, ScoringConfig, max_possible_score
from exercise_engine.delivery.telemetry import TelemetryData
from exercise_engine.session import machine
from exercise_engine.session.effects import (
    CompleteExercise,
    Effect,
    RevealHint,
    ShowFeedback,
    Transition,
)
from exercise_engine.session.state import AttemptState

CompleteCallback = Callable[[int, TelemetryData], Any]
HintCallback = Callable[[], Any]


@dataclass(frozen=True)
class DeliveryFailure:
    """A host callback that raised."""

    callback: str
    error: str
    exercise_id: str = ""


class ExercisePlayer:
    """Drives one question through its attempts."""

    def __init__(
        self,
        exercise_type: str | ExerciseType,
        content: Any,
        hints: list[str] | None = None,
        is_exam_mode: bool = False,
        saved_answer: Any = None,
        on_complete: CompleteCallback | None = None,
        on_hint_used: HintCallback | None = None,
        exercise_id: str = "",
        topic: str | None = None,
        config: ScoringConfig = DEFAULT_SCORING,
        clock: Callable[[], float] = time.monotonic,
        wall_clock: Callable[[], datetime] | None = None,
    ):
        self.on_complete = on_complete
        self.on_hint_used = on_hint_used
        self.config = config
        self.clock = clock
        self.wall_clock = wall_clock or (lambda: datetime.now(UTC))

        self.delivery_failures: list[DeliveryFailure] = []
        self.feedback: ShowFeedback | None = None
        self.completion: CompleteExercise | None = None

        self.state: AttemptState = machine.start(
            exercise_type,
            content,
            hints=hints,
            is_exam_mode=is_exam_mode,
            saved_answer=saved_answer,
            started_at=self.clock(),
            exercise_id=exercise_id,
            topic=topic,
            config=config,
        )

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def is_locked(self) -> bool:
        return self.state.locked

    @property
    def answer(self) -> Any:
        return self.state.answer

    @property
    def score(self) -> int | None:
        return self.state.score

    @property
    def revealed_hints(self) -> tuple[str, ...]:
        return self.state.revealed_hints

    @property
    def max_possible_score(self) -> int:
        """Best score still reachable on this pass."""
        if self.state.locked:
            return self.state.score or 0
        return max_possible_score(self.state.attempts_used, self.state.hints_revealed, self.config)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def update_answer(self, answer: Any) -> AttemptState:
        return self._run(machine.update_answer(self.state, answer))

    def submit(self) -> AttemptState:
        transition = machine.submit(
            self.state,
            now=self.clock(),
            completed_at=self.wall_clock(),
            config=self.config,
        )
        return self._run(transition)

    def request_hint(self) -> AttemptState:
        return self._run(machine.request_hint(self.state))

    def try_again(self) -> AttemptState:
        if self.state.locked:
            self.feedback = None
            self.completion = None
        return self._run(machine.try_again(self.state, now=self.clock()))

    def reset_board(self) -> AttemptState:
        return self._run(machine.reset_board(self.state))

    # ------------------------------------------------------------------
    # Effect execution
    # ------------------------------------------------------------------

    def _run(self, transition: Transition) -> AttemptState:
        self.state = transition.state
        for effect in transition.effects:
            self._execute(effect)
        return self.state

    def _execute(self, effect: Effect) -> None:
        if isinstance(effect, ShowFeedback):
            self.feedback = effect
        elif isinstance(effect, RevealHint):
            if self.on_hint_used:
                self._deliver("on_hint_used", self.on_hint_used)
        elif isinstance(effect, CompleteExercise):
            self.completion = effect
            if self.on_complete:
                self._deliver("on_complete", self.on_complete, effect.score, effect.telemetry)

    def _deliver(self, name: str, callback: Callable[..., Any], *args: Any) -> None:
        try:
            callback(*args)
        except Exception as e:
            logger.error(f"{name} failed for exercise {self.state.exercise_id or self.state.exercise_type.value}: {e}")
            self.delivery_failures.append(
                DeliveryFailure(callback=name, error=str(e), exercise_id=self.state.exercise_id)
            )
