"""
Core Scoring Module.

Provides the scoring policy shared by every exercise type.

Design:
- ScoringConfig: Frozen policy constants (first-try score, hint penalty, retry score)
- score(): Pure policy function (correctness, attempts, hints, time) -> 0-100
- apply_partial_credit(): Proportional credit for unit-based exercises
- final_score(): Policy score combined with an evaluation result

Every function here is pure and total: identical inputs always return the
identical integer, so a failed telemetry upload can be retried safely.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from config import Settings
    from exercise_engine.atoms.base import Evaluation


@dataclass(frozen=True)
class ScoringConfig:
    """Scoring policy constants."""

    correct_first_try: int = 100
    hint_penalty: int = 2
    retry_partial: int = 50
    max_attempts: int = 3

    @classmethod
    def from_settings(cls, settings: Settings) -> ScoringConfig:
        """Build a policy from application settings."""
        return cls(
            correct_first_try=settings.correct_first_try_score,
            hint_penalty=settings.hint_penalty,
            retry_partial=settings.retry_partial_score,
            max_attempts=settings.max_attempts,
        )


DEFAULT_SCORING = ScoringConfig()

MAX_SCORE = 100


def round_half_up(value: Decimal) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def score(
    is_correct: bool,
    attempts: int,
    hints_used: int,
    response_time_sec: float = 0.0,
    config: ScoringConfig = DEFAULT_SCORING,
) -> int:
    """
    Score a single question from its attempt data.

    Rules:
        correct on attempt 1, no hints      -> correct_first_try
        correct on attempt 1, with hints    -> max(0, correct_first_try - hints x penalty)
        correct after one or more retries   -> retry_partial
        not correct                         -> 0

    Args:
        is_correct: Whether the final answer was fully correct
        attempts: Submissions used (values below 1 count as the first try)
        hints_used: Hints revealed (negative values count as 0)
        response_time_sec: Reserved; not weighted by the current policy
        config: Policy constants

    Returns:
        Integer score between 0 and 100
    """
    if not is_correct:
        return 0

    if attempts <= 1:
        hints = max(0, hints_used)
        raw = config.correct_first_try - hints * config.hint_penalty
        return min(MAX_SCORE, max(0, raw))

    return min(MAX_SCORE, max(0, config.retry_partial))


def apply_partial_credit(policy_score: int, correct_count: int, total_count: int) -> int:
    """
    Scale a policy score by the fraction of units answered correctly.

    0/0 is "not correct" and yields 0, never NaN. Rounding is round-half-up.
    """
    if total_count <= 0 or correct_count <= 0:
        return 0
    correct = min(correct_count, total_count)
    scaled = Decimal(policy_score) * Decimal(correct) / Decimal(total_count)
    return round_half_up(scaled)


def final_score(
    evaluation: Evaluation,
    attempts: int,
    hints_used: int,
    response_time_sec: float = 0.0,
    config: ScoringConfig = DEFAULT_SCORING,
) -> int:
    """
    Combine the scoring policy with an evaluation result.

    A fully correct answer receives the policy score. A partially correct
    answer on an exercise type that grants partial credit receives the score a
    correct answer would have earned at this attempt, scaled by
    correct/total. Everything else scores 0.
    """
    if evaluation.is_fully_correct:
        return score(True, attempts, hints_used, response_time_sec, config)

    if not evaluation.partial_credit or evaluation.correct_count <= 0:
        return 0

    base = score(True, attempts, hints_used, response_time_sec, config)
    return apply_partial_credit(base, evaluation.correct_count, evaluation.total_count)


def max_possible_score(
    attempts_used: int,
    hints_used: int,
    config: ScoringConfig = DEFAULT_SCORING,
) -> int:
    """Best score still reachable given the counters so far."""
    return score(True, attempts_used + 1, hints_used, config=config)
