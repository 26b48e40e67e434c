"""
Unit tests for the scoring policy.

Tests score(), partial credit and the final score of an evaluation.
"""

import pytest

from config import Settings
from exercise_engine.atoms.base import Evaluation, UnitStatus
from exercise_engine.core.scoring import (
    DEFAULT_SCORING,
    ScoringConfig,
    apply_partial_credit,
    final_score,
    max_possible_score,
    score,
)


def _evaluation(correct: int, total: int, partial_credit: bool = True) -> Evaluation:
    units = [(str(i), UnitStatus.CORRECT if i < correct else UnitStatus.WRONG) for i in range(total)]
    return Evaluation.from_units(units, partial_credit)


class TestScorePolicy:
    """Test the score() policy function."""

    def test_correct_first_try_no_hints(self):
        """A clean first-try success earns full marks."""
        assert score(True, 1, 0) == 100

    @pytest.mark.parametrize("hints,expected", [(1, 98), (3, 94), (10, 80), (50, 0), (60, 0)])
    def test_hint_penalty_on_first_try(self, hints, expected):
        """Each hint costs two points, never below zero."""
        assert score(True, 1, hints) == expected

    @pytest.mark.parametrize("attempts", [2, 3, 7])
    def test_correct_after_retry(self, attempts):
        """Any success after a retry earns the flat retry score."""
        assert score(True, attempts, 0) == 50
        assert score(True, attempts, 4) == 50

    def test_incorrect_scores_zero(self):
        assert score(False, 1, 0) == 0
        assert score(False, 3, 2) == 0

    def test_odd_inputs_clamp(self):
        """Zero attempts count as the first try; negative hints as none."""
        assert score(True, 0, 0) == 100
        assert score(True, 1, -3) == 100

    def test_response_time_is_ignored(self):
        assert score(True, 1, 1, 0.5) == score(True, 1, 1, 900.0)

    def test_deterministic(self):
        results = {score(True, 1, 2, 12.0) for _ in range(50)}
        assert results == {96}

    def test_custom_config(self):
        config = ScoringConfig(correct_first_try=90, hint_penalty=5, retry_partial=40)
        assert score(True, 1, 2, config=config) == 80
        assert score(True, 2, 0, config=config) == 40

    def test_config_from_settings(self):
        settings = Settings(hint_penalty=5, max_attempts=4)
        config = ScoringConfig.from_settings(settings)

        assert config.hint_penalty == 5
        assert config.max_attempts == 4
        assert config.correct_first_try == DEFAULT_SCORING.correct_first_try


class TestPartialCredit:
    """Test apply_partial_credit()."""

    def test_three_of_four(self):
        assert apply_partial_credit(100, 3, 4) == 75

    def test_round_half_up(self):
        """12.5 rounds up to 13, not to the even 12."""
        assert apply_partial_credit(50, 1, 4) == 13

    def test_rounds_down_below_half(self):
        assert apply_partial_credit(50, 4, 6) == 33

    def test_zero_units_is_zero(self):
        """0/0 is not correct and never NaN."""
        assert apply_partial_credit(100, 0, 0) == 0

    def test_no_correct_units(self):
        assert apply_partial_credit(100, 0, 4) == 0

    def test_correct_count_capped_at_total(self):
        assert apply_partial_credit(100, 5, 4) == 100


class TestFinalScore:
    """Test final_score() on evaluations."""

    def test_fully_correct_uses_policy(self):
        assert final_score(_evaluation(2, 2), 1, 0) == 100
        assert final_score(_evaluation(2, 2), 2, 1) == 50

    def test_partial_scales_retry_score(self):
        """4/6 after three attempts: 50 x 4/6 rounds to 33."""
        assert final_score(_evaluation(4, 6), 3, 0) == 33

    def test_partial_on_first_attempt_with_hints(self):
        assert final_score(_evaluation(3, 4), 1, 2) == 72

    def test_no_partial_credit_for_sequence_types(self):
        assert final_score(_evaluation(3, 4, partial_credit=False), 3, 0) == 0

    def test_empty_evaluation_scores_zero(self):
        assert final_score(Evaluation.empty(), 1, 0) == 0


class TestMaxPossibleScore:
    """Test the score preview."""

    def test_before_first_attempt(self):
        assert max_possible_score(0, 0) == 100

    def test_after_hints(self):
        assert max_possible_score(0, 2) == 96

    def test_after_a_failed_attempt(self):
        assert max_possible_score(1, 1) == 50
