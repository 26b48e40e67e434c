"""
Attempt/hint state machine.

    IDLE -> INTERACTING -> (READY_TO_CHECK) -> EVALUATING -> LOCKED(success)
                                                          -> LOCKED(max_attempts)
                                                          -> LOCKED(exam)
                                                          -> RETRY_ALLOWED -> INTERACTING

Every transition is a plain function taking the current AttemptState and
returning a Transition (new state + effects). Nothing here performs I/O;
ExercisePlayer executes the effects.

Hints are revealed on request (request_hint); each failed attempt unlocks one
more, so hintsUsed counts hints the learner actually asked for.
"""

from __future__ import annotations

import copy
from datetime import datetime
from typing import Any

from loguru import logger

from exercise_engine.atoms import ExerciseType, coerce_type, require_evaluator
from exercise_engine.atoms.base import ExerciseContentBase
from exercise_engine.core.scoring import DEFAULT_SCORING, ScoringConfig, final_score
from exercise_engine.delivery.telemetry import TelemetryRecorder
from exercise_engine.errors import UnknownExerciseTypeError
from exercise_engine.session.effects import (
    CompleteExercise,
    RevealHint,
    ShowFeedback,
    Transition,
    classify,
)
from exercise_engine.session.state import AttemptState, LockReason, Phase

_recorder = TelemetryRecorder()


def start(
    exercise_type: str | ExerciseType,
    content: Any,
    hints: list[str] | tuple[str, ...] | None = None,
    is_exam_mode: bool = False,
    saved_answer: Any = None,
    started_at: float = 0.0,
    exercise_id: str = "",
    topic: str | None = None,
    config: ScoringConfig = DEFAULT_SCORING,
) -> AttemptState:
    """
    Create the state for a freshly mounted (or restored) question.

    Raises:
        UnknownExerciseTypeError: No evaluator is registered for the type
    """
    resolved = coerce_type(exercise_type)
    if resolved is None:
        raise UnknownExerciseTypeError(exercise_type)
    evaluator = require_evaluator(resolved)

    if isinstance(content, ExerciseContentBase) and getattr(content, "kind", None) == resolved.value:
        parsed = content
    else:
        parsed = evaluator.parse(content)

    if saved_answer is not None:
        answer = evaluator.normalize_answer(parsed, copy.deepcopy(saved_answer))
        phase = Phase.INTERACTING
    else:
        answer = evaluator.empty_answer(parsed)
        phase = Phase.IDLE

    state = AttemptState(
        exercise_type=resolved,
        content=parsed,
        answer=answer,
        hints=tuple(str(h) for h in (hints or ())),
        is_exam_mode=is_exam_mode,
        max_attempts=max(1, config.max_attempts),
        exercise_id=exercise_id,
        topic=topic,
        phase=phase,
        started_at=started_at,
    )
    logger.debug(f"Exercise {exercise_id or resolved.value} started ({len(state.hints)} hints)")
    return state


def update_answer(state: AttemptState, answer: Any) -> Transition:
    """Replace the working answer. No-op once locked."""
    if state.locked:
        return Transition(state)

    evaluator = require_evaluator(state.exercise_type)
    normalized = evaluator.normalize_answer(state.content, copy.deepcopy(answer))
    phase = Phase.READY_TO_CHECK if evaluator.is_complete(state.content, normalized) else Phase.INTERACTING
    return Transition(state.evolve(answer=normalized, phase=phase))


def submit(
    state: AttemptState,
    now: float = 0.0,
    completed_at: datetime | None = None,
    config: ScoringConfig = DEFAULT_SCORING,
) -> Transition:
    """
    Evaluate the working answer and decide lock or retry.

    Submitting while locked is a no-op, so a double submit never counts twice.
    An empty answer still uses an attempt and yields INCOMPLETE feedback.

    Args:
        state: Current state
        now: Monotonic clock reading, compared with state.started_at
        completed_at: Wall-clock timestamp for telemetry (default: now, UTC)
        config: Scoring policy
    """
    if state.locked:
        logger.debug(f"Submit ignored, exercise {state.exercise_id or state.exercise_type.value} is locked")
        return Transition(state)

    evaluator = require_evaluator(state.exercise_type)
    evaluating = state.evolve(
        phase=Phase.EVALUATING,
        attempts_used=state.attempts_used + 1,
        session_attempts=state.session_attempts + 1,
    )
    evaluation = evaluator.evaluate(state.content, evaluating.answer)
    kind = classify(evaluation)

    lock_reason = None
    if evaluation.is_fully_correct:
        lock_reason = LockReason.SUCCESS
    elif state.is_exam_mode:
        lock_reason = LockReason.EXAM
    elif evaluating.attempts_used >= state.max_attempts:
        lock_reason = LockReason.MAX_ATTEMPTS

    if lock_reason is not None:
        awarded = final_score(evaluation, evaluating.attempts_used, evaluating.hints_revealed, config=config)
        locked = evaluating.evolve(
            phase=Phase.LOCKED,
            locked=True,
            lock_reason=lock_reason,
            last_evaluation=evaluation,
            score=awarded,
        )
        telemetry = _recorder.record(locked, evaluation, awarded, now - state.started_at, completed_at)
        logger.debug(
            f"Exercise {state.exercise_id or state.exercise_type.value} locked "
            f"({lock_reason.value}, {evaluation.correct_count}/{evaluation.total_count}, score {awarded})"
        )
        return Transition(
            locked,
            (
                ShowFeedback(kind, evaluation, attempts_left=0, locked=True),
                CompleteExercise(score=awarded, telemetry=telemetry),
            ),
        )

    retry = evaluating.evolve(
        phase=Phase.RETRY_ALLOWED,
        answer=evaluator.clear_wrong(state.content, evaluating.answer, evaluation),
        last_evaluation=evaluation,
    )
    logger.debug(
        f"Exercise {state.exercise_id or state.exercise_type.value} retry "
        f"{evaluating.attempts_used}/{state.max_attempts} ({kind.value}, "
        f"{retry.hints_unlocked - retry.hints_revealed} hints unlocked)"
    )
    feedback = ShowFeedback(
        kind,
        evaluation,
        attempts_left=state.max_attempts - evaluating.attempts_used,
        locked=False,
    )
    return Transition(retry, (feedback,))


def request_hint(state: AttemptState) -> Transition:
    """
    Reveal the next hint on the learner's request.

    Each failed attempt unlocks one more hint, up to the hints available.
    Ignored when locked, in exam mode, or when every unlocked hint is shown.
    """
    if not state.can_request_hint:
        return Transition(state)

    index = state.hints_revealed
    revealed = state.evolve(
        hints_revealed=index + 1,
        session_hints=state.session_hints + 1,
    )
    logger.debug(f"Exercise {state.exercise_id or state.exercise_type.value} hint {index + 1} revealed")
    return Transition(revealed, (RevealHint(index=index, text=state.hints[index]),))


def try_again(state: AttemptState, now: float = 0.0) -> Transition:
    """
    Restart a locked question as a fresh pass.

    Per-pass counters and the working answer reset; resets and the session
    totals carry over. Ignored while the question is still open.
    """
    if not state.locked:
        return Transition(state)

    evaluator = require_evaluator(state.exercise_type)
    fresh = state.evolve(
        answer=evaluator.empty_answer(state.content),
        phase=Phase.IDLE,
        attempts_used=0,
        hints_revealed=0,
        locked=False,
        lock_reason=None,
        started_at=now,
        resets=state.resets + 1,
        last_evaluation=None,
        score=None,
    )
    return Transition(fresh)


def reset_board(state: AttemptState) -> Transition:
    """
    Clear the working answer before completion (memory game reshuffle).

    Counts as a reset; attempts and hints are untouched.
    """
    if state.locked:
        return Transition(state)

    evaluator = require_evaluator(state.exercise_type)
    return Transition(
        state.evolve(
            answer=evaluator.empty_answer(state.content),
            phase=Phase.IDLE,
            resets=state.resets + 1,
        )
    )
