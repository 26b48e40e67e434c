"""
Unit tests for question weighting and rewards.
"""

import pytest

from exercise_engine.atoms import ExerciseType
from exercise_engine.core.weighting import (
    RewardTier,
    ordering_pair_points,
    partial_points,
    question_weight,
    reward_for,
    weighted_final_score,
)


class TestQuestionWeight:
    """Test Bloom-weighted question points."""

    @pytest.mark.parametrize(
        "exercise_type,expected",
        [
            ("cloze", 8),  # 7 x 1.2
            ("ordering", 15),  # 10 x 1.5
            ("memory_game", 8),  # 8 x 1.0
            ("rating_scale", 10),  # 5 x 2.0
        ],
    )
    def test_default_bloom_level(self, exercise_type, expected):
        assert question_weight(exercise_type) == expected

    def test_explicit_bloom_level(self):
        assert question_weight("ordering", "Create") == 22
        assert question_weight("categorization", "Analyze") == 17

    def test_legacy_bloom_name(self):
        assert question_weight("ordering", "Synthesis") == 20

    def test_unknown_bloom_level_falls_back_to_type_default(self):
        assert question_weight("cloze", "Bogus") == question_weight("cloze")

    def test_unknown_type(self):
        assert question_weight("hologram") == 10

    def test_accepts_enum_and_dashes(self):
        assert question_weight(ExerciseType.MEMORY_GAME) == question_weight("memory-game")


class TestPoints:
    """Test partial and pair-based points."""

    def test_partial_points(self):
        assert partial_points(3, 4, 10) == 7.5
        assert partial_points(1, 3, 10) == 3.3

    def test_partial_points_without_units(self):
        assert partial_points(0, 0, 10) == 0.0

    def test_ordering_pairs_all_correct(self):
        assert ordering_pair_points(["a", "b", "c"], ["a", "b", "c"], 10) == 10.0

    def test_ordering_pairs_single_swap(self):
        """Swapping a and b breaks one of three pairs."""
        assert ordering_pair_points(["b", "a", "c"], ["a", "b", "c"], 10) == 6.7

    def test_ordering_pairs_length_mismatch(self):
        assert ordering_pair_points(["a", "b"], ["a", "b", "c"], 10) == 0.0

    def test_weighted_final_score_learning_mode(self):
        assert weighted_final_score(15, 50) == 7.5

    def test_weighted_final_score_exam_mode(self):
        assert weighted_final_score(15, 0.5, is_exam_mode=True) == 7.5


class TestRewards:
    """Test XP and gems."""

    def test_perfect_score(self):
        reward = reward_for(100, True)
        assert (reward.xp, reward.gems, reward.tier) == (100, 2, RewardTier.SUCCESS)

    def test_correct_after_retry(self):
        reward = reward_for(50, True)
        assert (reward.xp, reward.gems, reward.tier) == (50, 1, RewardTier.PARTIAL)

    def test_incorrect_with_partial_credit(self):
        reward = reward_for(33, False)
        assert (reward.xp, reward.gems, reward.tier) == (33, 0, RewardTier.FAILURE)
