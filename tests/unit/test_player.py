"""
Unit tests for ExercisePlayer.

Covers callback delivery, ordering and failure isolation.
"""

import pytest

from exercise_engine.session import ExercisePlayer, LockReason


class TestCallbacks:
    """Test host callback delivery."""

    def test_on_complete_called_once(self, sample_cloze, clock):
        calls = []
        player = ExercisePlayer(
            "cloze",
            sample_cloze,
            on_complete=lambda score, telemetry: calls.append((score, telemetry)),
            clock=clock,
        )

        player.update_answer(["cat", "mat"])
        player.submit()
        player.submit()

        assert len(calls) == 1
        score, telemetry = calls[0]
        assert score == 100
        assert telemetry.is_correct is True

    def test_hint_callbacks_precede_completion(self, sample_cloze, clock):
        events = []
        player = ExercisePlayer(
            "cloze",
            sample_cloze,
            hints=["h1", "h2"],
            on_complete=lambda score, telemetry: events.append(("complete", telemetry.hints_used)),
            on_hint_used=lambda: events.append(("hint", None)),
            clock=clock,
        )

        player.update_answer(["dog", "mat"])
        player.submit()
        player.request_hint()
        player.request_hint()
        player.update_answer(["cat", "mat"])
        player.submit()

        assert events == [("hint", None), ("complete", 1)]
        assert player.score == 50
        assert player.revealed_hints == ("h1",)

    def test_elapsed_time_uses_injected_clock(self, sample_cloze, clock):
        calls = []
        player = ExercisePlayer(
            "cloze", sample_cloze, on_complete=lambda s, t: calls.append(t), clock=clock
        )

        clock.advance(12.4)
        player.update_answer(["cat", "mat"])
        player.submit()

        assert calls[0].time_seconds == 12
        assert calls[0].to_dict()["timeSeconds"] == 12


class TestDeliveryFailures:
    """Test that failing callbacks never affect the exercise."""

    def test_failing_on_complete_is_recorded(self, sample_cloze, clock):
        def broken(score, telemetry):
            raise ConnectionError("upload failed")

        player = ExercisePlayer("cloze", sample_cloze, on_complete=broken, clock=clock)
        player.update_answer(["cat", "mat"])
        player.submit()

        assert player.is_locked is True
        assert player.state.lock_reason is LockReason.SUCCESS
        assert player.score == 100
        assert len(player.delivery_failures) == 1
        assert player.delivery_failures[0].callback == "on_complete"
        assert "upload failed" in player.delivery_failures[0].error

    def test_failing_hint_callback_still_reveals(self, sample_cloze, clock):
        def broken():
            raise RuntimeError("analytics down")

        player = ExercisePlayer("cloze", sample_cloze, hints=["h1"], on_hint_used=broken, clock=clock)
        player.submit()
        player.request_hint()

        assert player.revealed_hints == ("h1",)
        assert [f.callback for f in player.delivery_failures] == ["on_hint_used"]


class TestPlayerFlow:
    """Test views and restart helpers."""

    def test_max_possible_score(self, sample_cloze, clock):
        player = ExercisePlayer("cloze", sample_cloze, hints=["h1"], clock=clock)
        assert player.max_possible_score == 100

        player.submit()
        assert player.max_possible_score == 50

    def test_try_again_clears_completion(self, sample_cloze, clock):
        calls = []
        player = ExercisePlayer("cloze", sample_cloze, on_complete=lambda s, t: calls.append(t), clock=clock)
        player.update_answer(["cat", "mat"])
        player.submit()

        player.try_again()
        assert player.completion is None
        assert player.is_locked is False

        player.update_answer(["cat", "mat"])
        player.submit()

        assert len(calls) == 2
        assert calls[1].resets == 1
        assert calls[1].session_attempts == 2

    def test_try_again_while_open_keeps_feedback(self, sample_cloze, clock):
        player = ExercisePlayer("cloze", sample_cloze, clock=clock)
        player.update_answer(["dog", "mat"])
        player.submit()
        shown = player.feedback

        player.try_again()

        assert player.feedback is shown
        assert player.state.attempts_used == 1

    def test_unrequested_hints_are_not_reported(self, sample_cloze, clock):
        calls, hints = [], []
        player = ExercisePlayer(
            "cloze",
            sample_cloze,
            hints=["h1", "h2"],
            on_complete=lambda s, t: calls.append(t),
            on_hint_used=lambda: hints.append(1),
            clock=clock,
        )
        player.update_answer(["dog", "mat"])
        player.submit()
        player.update_answer(["cat", "mat"])
        player.submit()

        assert hints == []
        assert calls[0].hints_used == 0
        assert calls[0].hints_available == 2

    @pytest.mark.parametrize("exercise_type", ["cloze", "ordering", "rating_scale"])
    def test_malformed_content_never_raises(self, exercise_type, clock):
        player = ExercisePlayer(exercise_type, {"garbage": True}, clock=clock)
        player.submit()

        assert player.state.last_evaluation.total_count == (1 if exercise_type == "rating_scale" else 0)
