"""
Unit tests for the attempt/hint state machine.

Transitions are pure, so every test works on AttemptState values directly.
"""

import pytest

from exercise_engine.atoms import ExerciseType
from exercise_engine.errors import UnknownExerciseTypeError
from exercise_engine.session import machine
from exercise_engine.session.effects import (
    CompleteExercise,
    FeedbackKind,
    RevealHint,
    ShowFeedback,
)
from exercise_engine.session.state import LockReason, Phase

HINTS = ["Think of pets", "It rhymes with hat"]


@pytest.fixture
def state(sample_cloze):
    return machine.start("cloze", sample_cloze, hints=HINTS, exercise_id="q1", started_at=10.0)


def _answer(state, answer):
    return machine.update_answer(state, answer).state


class TestStart:
    """Test state creation."""

    def test_initial_counters(self, state):
        assert state.phase is Phase.IDLE
        assert state.attempts_used == 0
        assert state.hints_revealed == 0
        assert state.locked is False
        assert state.answer == [None, None]
        assert state.exercise_type is ExerciseType.CLOZE

    def test_unknown_type_raises(self):
        with pytest.raises(UnknownExerciseTypeError):
            machine.start("hologram", {})

    def test_restore_saved_answer(self, sample_cloze):
        restored = machine.start("cloze", sample_cloze, saved_answer=["cat", None])

        assert restored.phase is Phase.INTERACTING
        assert restored.answer == ["cat", None]

    def test_parsed_content_is_reused(self, state):
        again = machine.start("cloze", state.content)
        assert again.content is state.content


class TestUpdateAnswer:
    """Test working-answer updates."""

    def test_partial_answer_is_interacting(self, state):
        assert _answer(state, ["cat"]).phase is Phase.INTERACTING

    def test_complete_answer_is_ready_to_check(self, state):
        assert _answer(state, ["cat", "dog"]).phase is Phase.READY_TO_CHECK

    def test_caller_list_is_copied(self, state):
        answer = ["cat", None]
        updated = _answer(state, answer)
        answer[1] = "mat"

        assert updated.answer == ["cat", None]


class TestSubmit:
    """Test submit() outcomes."""

    def test_correct_first_try_locks_with_success(self, state):
        transition = machine.submit(_answer(state, ["cat", "mat"]), now=12.0)
        locked = transition.state

        assert locked.locked is True
        assert locked.lock_reason is LockReason.SUCCESS
        assert locked.score == 100
        feedback, complete = transition.effects
        assert isinstance(feedback, ShowFeedback) and feedback.kind is FeedbackKind.CORRECT
        assert isinstance(complete, CompleteExercise) and complete.score == 100
        assert complete.telemetry.attempts == 1
        assert complete.telemetry.time_seconds == 2

    def test_wrong_answer_allows_retry_and_unlocks_hint(self, state):
        transition = machine.submit(_answer(state, ["dog", "mat"]))
        retry = transition.state

        assert retry.phase is Phase.RETRY_ALLOWED
        assert retry.attempts_used == 1
        assert retry.answer == [None, "mat"]
        assert retry.hints_revealed == 0
        assert retry.can_request_hint is True
        assert transition.of_type(RevealHint) == []
        assert transition.of_type(ShowFeedback)[0].kind is FeedbackKind.WRONG

    def test_partial_feedback(self, state):
        transition = machine.submit(_answer(state, ["cat", None]))
        assert transition.of_type(ShowFeedback)[0].kind is FeedbackKind.PARTIAL

    def test_empty_submit_counts_as_attempt(self, state):
        transition = machine.submit(state)

        assert transition.state.attempts_used == 1
        assert transition.of_type(ShowFeedback)[0].kind is FeedbackKind.INCOMPLETE

    def test_max_attempts_locks(self, state):
        current = state
        for _ in range(3):
            current = machine.submit(_answer(current, ["dog", "hat"])).state
            current = machine.request_hint(current).state

        assert current.locked is True
        assert current.lock_reason is LockReason.MAX_ATTEMPTS
        assert current.score == 0
        assert current.hints_revealed == 2

    def test_max_attempts_keeps_partial_credit(self, state):
        current = state
        for _ in range(3):
            current = machine.submit(_answer(current, ["cat", "hat"])).state

        assert current.lock_reason is LockReason.MAX_ATTEMPTS
        assert current.score == 25  # 50 x 1/2

    def test_submit_while_locked_is_noop(self, state):
        locked = machine.submit(_answer(state, ["cat", "mat"])).state
        again = machine.submit(locked)

        assert again.state is locked
        assert again.effects == ()

    def test_update_while_locked_is_noop(self, state):
        locked = machine.submit(_answer(state, ["cat", "mat"])).state
        assert machine.update_answer(locked, ["dog", "dog"]).state is locked

    def test_transitions_do_not_mutate_input(self, state):
        answered = _answer(state, ["dog", "mat"])
        machine.submit(answered)

        assert answered.attempts_used == 0
        assert answered.answer == ["dog", "mat"]


class TestRequestHint:
    """Test learner-requested hints."""

    def test_locked_before_first_attempt(self, state):
        transition = machine.request_hint(state)

        assert transition.state is state
        assert transition.effects == ()

    def test_reveals_next_hint_after_failed_attempt(self, state):
        retry = machine.submit(_answer(state, ["dog", "mat"])).state
        transition = machine.request_hint(retry)

        assert transition.state.hints_revealed == 1
        assert transition.state.session_hints == 1
        assert transition.state.revealed_hints == (HINTS[0],)
        assert transition.of_type(RevealHint) == [RevealHint(index=0, text=HINTS[0])]

    def test_one_hint_per_failed_attempt(self, state):
        retry = machine.submit(_answer(state, ["dog", "mat"])).state
        first = machine.request_hint(retry).state
        second = machine.request_hint(first)

        assert second.state is first
        assert second.effects == ()

    def test_capped_at_available(self, sample_cloze):
        current = machine.start("cloze", sample_cloze, hints=["only hint"])
        current = machine.submit(current).state
        current = machine.request_hint(current).state
        current = machine.submit(current).state

        transition = machine.request_hint(current)

        assert transition.state.hints_revealed == 1
        assert transition.of_type(RevealHint) == []

    def test_unused_hints_are_not_counted(self, state):
        current = machine.submit(_answer(state, ["dog", "mat"])).state
        locked = machine.submit(_answer(current, ["cat", "mat"])).state

        assert locked.lock_reason is LockReason.SUCCESS
        assert locked.hints_revealed == 0

    def test_ignored_when_locked(self, state):
        current = state
        for _ in range(3):
            current = machine.submit(_answer(current, ["dog", "hat"])).state

        assert machine.request_hint(current).state is current

    def test_ignored_in_exam_mode(self, sample_cloze):
        state = machine.start("cloze", sample_cloze, hints=HINTS, is_exam_mode=True)
        assert machine.request_hint(state).effects == ()


class TestExamMode:
    """Test exam-mode locking."""

    def test_locks_on_first_submit_without_hints(self, sample_cloze):
        state = machine.start("cloze", sample_cloze, hints=HINTS, is_exam_mode=True)
        transition = machine.submit(_answer(state, ["dog", "mat"]))

        assert transition.state.lock_reason is LockReason.EXAM
        assert transition.of_type(RevealHint) == []
        assert transition.state.hints_available == 0
        assert transition.of_type(CompleteExercise)[0].score == 50  # 100 x 1/2


class TestTryAgain:
    """Test restarting a locked question."""

    def test_full_reset_keeps_session_totals(self, state):
        current = state
        for _ in range(3):
            current = machine.submit(_answer(current, ["dog", "hat"])).state
            current = machine.request_hint(current).state

        fresh = machine.try_again(current, now=50.0).state

        assert fresh.locked is False
        assert fresh.phase is Phase.IDLE
        assert fresh.attempts_used == 0
        assert fresh.hints_revealed == 0
        assert fresh.answer == [None, None]
        assert fresh.resets == 1
        assert fresh.session_attempts == 3
        assert fresh.session_hints == 2
        assert fresh.started_at == 50.0

    def test_ignored_while_open(self, state):
        assert machine.try_again(state).state is state


class TestResetBoard:
    """Test pre-completion board resets."""

    def test_reset_keeps_attempts(self):
        content = {"pairs": [{"front": "dog", "back": "perro"}, {"front": "cat", "back": "gato"}]}
        state = machine.start("memory_game", content)
        state = machine.submit(_answer(state, [["0a", "1b"]])).state

        reset = machine.reset_board(state).state

        assert reset.resets == 1
        assert reset.attempts_used == 1
        assert reset.answer == []
