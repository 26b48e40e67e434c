"""Attempt/hint state machine and the player that executes its effects."""

from exercise_engine.session.effects import (
    CompleteExercise,
    FeedbackKind,
    RevealHint,
    ShowFeedback,
    Transition,
)
from exercise_engine.session.machine import (
    request_hint,
    reset_board,
    start,
    submit,
    try_again,
    update_answer,
)
from exercise_engine.session.player import DeliveryFailure, ExercisePlayer
from exercise_engine.session.state import AttemptState, LockReason, Phase

__all__ = [
    "AttemptState",
    "CompleteExercise",
    "DeliveryFailure",
    "ExercisePlayer",
    "FeedbackKind",
    "LockReason",
    "Phase",
    "RevealHint",
    "ShowFeedback",
    "Transition",
    "request_hint",
    "reset_board",
    "start",
    "submit",
    "try_again",
    "update_answer",
]
