"""
Question weighting and rewards.

Bloom-based points per question, partial points for exam grading, pair-based
ordering points and the XP/gem rewards derived from a policy score.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Sequence

from exercise_engine.core.scoring import DEFAULT_SCORING, ScoringConfig

# Base points per exercise type, before the Bloom multiplier
BASE_WEIGHTS: dict[str, int] = {
    "cloze": 7,
    "memory_game": 8,
    "ordering": 10,
    "categorization": 10,
    "matching": 8,
    "image_labeling": 10,
    "text_selection": 7,
    "sentence_builder": 8,
    "table_completion": 10,
    "rating_scale": 5,
    "highlight": 7,
}

DEFAULT_BASE_WEIGHT = 10

BLOOM_MULTIPLIERS: dict[str, float] = {
    "Remember": 1.0,
    "Understand": 1.2,
    "Apply": 1.5,
    "Analyze": 1.7,
    "Evaluate": 2.0,
    "Create": 2.2,
    # Legacy names
    "Knowledge": 1.0,
    "Comprehension": 1.2,
    "Application": 1.5,
    "Analysis": 1.7,
    "Synthesis": 2.0,
    "Evaluation": 2.0,
}

DEFAULT_BLOOM_LEVELS: dict[str, str] = {
    "cloze": "Understand",
    "memory_game": "Remember",
    "ordering": "Apply",
    "categorization": "Apply",
    "matching": "Understand",
    "image_labeling": "Remember",
    "text_selection": "Understand",
    "sentence_builder": "Apply",
    "table_completion": "Apply",
    "rating_scale": "Evaluate",
    "highlight": "Understand",
}


def _round_to(value: float, places: str) -> float:
    return float(Decimal(str(value)).quantize(Decimal(places), rounding=ROUND_HALF_UP))


def _normalize_type(exercise_type: str) -> str:
    return str(getattr(exercise_type, "value", exercise_type)).lower().replace("-", "_")


def question_weight(exercise_type: str, bloom_level: str | None = None) -> int:
    """
    Points a question is worth.

    Formula: BASE_WEIGHTS[type] x BLOOM_MULTIPLIERS[level]

    Unknown types weigh DEFAULT_BASE_WEIGHT; an unknown or missing Bloom level
    falls back to the type's default level, then to "Remember".
    """
    normalized = _normalize_type(exercise_type)
    base = BASE_WEIGHTS.get(normalized, DEFAULT_BASE_WEIGHT)

    level = bloom_level
    if not level or level not in BLOOM_MULTIPLIERS:
        level = DEFAULT_BLOOM_LEVELS.get(normalized, "Remember")

    return int(_round_to(base * BLOOM_MULTIPLIERS.get(level, 1.0), "1"))


def partial_points(correct_count: int, total_count: int, weight: float) -> float:
    """Points earned for correct/total units, rounded to one decimal."""
    if total_count <= 0:
        return 0.0
    ratio = max(0, min(correct_count, total_count)) / total_count
    return _round_to(weight * ratio, "0.1")


def ordering_pair_points(
    user_order: Sequence[str | None],
    correct_order: Sequence[str],
    weight: float,
) -> float:
    """
    Points for an ordering answer using pair-based comparison.

    Counts the pairs of items whose relative order matches the correct order.
    Requires equal lengths and at least two items, otherwise 0.
    """
    n = len(correct_order)
    if len(user_order) != n or n < 2:
        return 0.0

    positions = {item: idx for idx, item in enumerate(user_order) if item is not None}
    total_pairs = n * (n - 1) // 2

    correct_pairs = 0
    for i in range(n):
        for j in range(i + 1, n):
            pos_a = positions.get(correct_order[i])
            pos_b = positions.get(correct_order[j])
            if pos_a is not None and pos_b is not None and pos_a < pos_b:
                correct_pairs += 1

    return _round_to(weight * correct_pairs / total_pairs, "0.1")


def weighted_final_score(weight: float, performance: float, is_exam_mode: bool = False) -> float:
    """
    Weighted points for a question.

    Learning mode: weight x (score / 100)
    Exam mode: weight x correctness ratio (0-1)
    """
    ratio = performance if is_exam_mode else performance / 100
    return _round_to(weight * ratio, "0.1")


class RewardTier(str, Enum):
    """Feedback tier shown with a reward."""

    SUCCESS = "success"
    PARTIAL = "partial"
    FAILURE = "failure"


@dataclass(frozen=True)
class Reward:
    """Gamification reward for a completed question."""

    score: int
    xp: int
    gems: int
    tier: RewardTier


def reward_for(score: int, is_correct: bool, config: ScoringConfig = DEFAULT_SCORING) -> Reward:
    """
    XP equals the score; one gem for a correct answer, two for a perfect one.
    """
    gems = 0
    if is_correct:
        gems = 2 if score >= config.correct_first_try else 1

    if not is_correct:
        tier = RewardTier.FAILURE
    elif score >= config.correct_first_try:
        tier = RewardTier.SUCCESS
    else:
        tier = RewardTier.PARTIAL

    return Reward(score=score, xp=score, gems=gems, tier=tier)
