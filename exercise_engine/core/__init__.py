"""Scoring policy, question weighting and rewards."""

from exercise_engine.core.scoring import (
    DEFAULT_SCORING,
    MAX_SCORE,
    ScoringConfig,
    apply_partial_credit,
    final_score,
    max_possible_score,
    round_half_up,
    score,
)
from exercise_engine.core.weighting import (
    BASE_WEIGHTS,
    BLOOM_MULTIPLIERS,
    Reward,
    RewardTier,
    ordering_pair_points,
    partial_points,
    question_weight,
    reward_for,
    weighted_final_score,
)

__all__ = [
    "BASE_WEIGHTS",
    "BLOOM_MULTIPLIERS",
    "DEFAULT_SCORING",
    "MAX_SCORE",
    "Reward",
    "RewardTier",
    "ScoringConfig",
    "apply_partial_credit",
    "final_score",
    "max_possible_score",
    "ordering_pair_points",
    "partial_points",
    "question_weight",
    "reward_for",
    "round_half_up",
    "score",
    "weighted_final_score",
]
