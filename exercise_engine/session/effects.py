"""
Effects returned by state-machine transitions.

Transitions never call out; the caller (usually ExercisePlayer) executes the
effects in order.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Union

from exercise_engine.atoms.base import Evaluation

if TYPE_CHECKING:
    from exercise_engine.delivery.telemetry import TelemetryData
    from exercise_engine.session.state import AttemptState


class FeedbackKind(str, Enum):
    """Classification of a submit."""

    CORRECT = "correct"
    WRONG = "wrong"  # at least one wrong unit
    PARTIAL = "partial"  # some correct, the rest empty
    INCOMPLETE = "incomplete"  # nothing attempted


@dataclass(frozen=True)
class ShowFeedback:
    kind: FeedbackKind
    evaluation: Evaluation
    attempts_left: int
    locked: bool


@dataclass(frozen=True)
class RevealHint:
    index: int
    text: str


@dataclass(frozen=True)
class CompleteExercise:
    score: int
    telemetry: TelemetryData


Effect = Union[ShowFeedback, RevealHint, CompleteExercise]


@dataclass(frozen=True)
class Transition:
    """New state plus the effects the caller must execute."""

    state: AttemptState
    effects: tuple[Effect, ...] = ()

    def of_type(self, effect_type: type) -> list:
        return [e for e in self.effects if isinstance(e, effect_type)]


def classify(evaluation: Evaluation) -> FeedbackKind:
    """Feedback kind for an evaluation."""
    if evaluation.is_fully_correct:
        return FeedbackKind.CORRECT
    if evaluation.wrong_units:
        return FeedbackKind.WRONG
    if evaluation.correct_count > 0:
        return FeedbackKind.PARTIAL
    return FeedbackKind.INCOMPLETE
