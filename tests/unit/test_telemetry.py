"""
Unit tests for telemetry records and the JSONL sink.
"""

import json
from datetime import UTC, datetime

import pytest

from exercise_engine.delivery.json_telemetry import JSONTelemetryLogger, read_completions
from exercise_engine.delivery.telemetry import TelemetryData, TelemetryRecorder
from exercise_engine.errors import ProfileStoreError
from exercise_engine.session import ExercisePlayer, machine


@pytest.fixture
def telemetry():
    return TelemetryData(
        exercise_id="q1",
        exercise_type="cloze",
        time_seconds=8,
        attempts=2,
        hints_used=1,
        last_answer=["cat", "mat"],
        is_correct=True,
        score=50,
        correct_count=2,
        total_count=2,
        hints_available=2,
        topic="animals",
        error_tags=("spelling",),
    )


class TestTelemetryData:
    """Test the telemetry record shape."""

    def test_to_dict_uses_camel_case(self, telemetry):
        data = telemetry.to_dict()

        assert data["timeSeconds"] == 8
        assert data["hintsUsed"] == 1
        assert data["lastAnswer"] == ["cat", "mat"]
        assert data["isExamMode"] is False
        assert data["errorTags"] == ["spelling"]

    def test_from_dict_accepts_wire_shape(self, telemetry):
        assert TelemetryData.from_dict(telemetry.to_dict()) == telemetry

    def test_from_dict_defaults(self):
        data = TelemetryData.from_dict({"exerciseType": "ordering", "isCorrect": False})

        assert data.attempts == 1
        assert data.score == 0
        assert data.error_tags == ()


class TestTelemetryRecorder:
    """Test TelemetryRecorder.record()."""

    def test_answer_snapshot_is_deep_copy(self, sample_cloze):
        state = machine.start("cloze", sample_cloze)
        state = machine.update_answer(state, ["cat", "mat"]).state
        locked = machine.submit(state).state

        record = TelemetryRecorder().record(locked, locked.last_evaluation, 100, 3.0)
        locked.answer[0] = "dog"

        assert record.last_answer == ["cat", "mat"]

    def test_negative_elapsed_clamps(self, sample_cloze):
        state = machine.start("cloze", sample_cloze)
        locked = machine.submit(machine.update_answer(state, ["cat", "mat"]).state).state
        stamp = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)

        record = TelemetryRecorder().record(locked, locked.last_evaluation, 100, -4.0, stamp)

        assert record.time_seconds == 0
        assert record.completed_at == "2026-03-01T12:00:00+00:00"

    @pytest.mark.parametrize(
        "elapsed, expected",
        [(12.4, 12), (12.5, 13), (0.49, 0), (float("nan"), 0), (float("inf"), 0)],
    )
    def test_elapsed_rounds_to_whole_seconds(self, sample_cloze, elapsed, expected):
        state = machine.start("cloze", sample_cloze)
        locked = machine.submit(machine.update_answer(state, ["cat", "mat"]).state).state

        record = TelemetryRecorder().record(locked, locked.last_evaluation, 100, elapsed)

        assert record.time_seconds == expected
        assert isinstance(record.to_dict()["timeSeconds"], int)

    def test_from_dict_rounds_fractional_seconds(self):
        data = TelemetryData.from_dict({"exerciseType": "cloze", "timeSeconds": 7.5})
        assert data.time_seconds == 8


class TestJSONTelemetryLogger:
    """Test the JSONL sink."""

    @pytest.fixture
    def sink(self, tmp_path):
        return JSONTelemetryLogger(log_dir=tmp_path, user_id="alice")

    def test_session_roundtrip(self, sink, telemetry):
        sink.start_session(lesson_id="lesson-1")
        path = sink.get_session_file_path()
        sink.log_completion(50, telemetry)
        session = sink.end_session()

        assert session.summary.total_questions == 1
        assert session.summary.total_hints_used == 1
        assert session.lesson_id == "lesson-1"
        assert list(read_completions(path)) == [telemetry]

    def test_log_without_session_is_ignored(self, sink, telemetry):
        sink.log_completion(50, telemetry)
        assert sink.get_session_file_path() is None
        assert sink.end_session() is None

    def test_rotation(self, sink, telemetry):
        sink.start_session()
        sink.rotation_size_bytes = 10
        sink.log_completion(50, telemetry)

        rotated = list(sink.sessions_dir.glob("*.*.jsonl"))
        assert len(rotated) == 1

    def test_write_failure_is_a_delivery_failure(self, sink, sample_cloze, tmp_path):
        sink.start_session()
        sink.session_file = tmp_path  # a directory cannot be opened for append

        player = ExercisePlayer("cloze", sample_cloze, on_complete=sink.log_completion)
        player.update_answer(["cat", "mat"])
        player.submit()

        assert player.score == 100
        assert len(player.delivery_failures) == 1

    def test_plain_telemetry_stream(self, tmp_path, telemetry):
        path = tmp_path / "stream.jsonl"
        path.write_text(
            "\n".join(json.dumps(telemetry.to_dict()) for _ in range(2)) + "\n\n",
            encoding="utf-8",
        )
        assert len(list(read_completions(path))) == 2

    def test_corrupt_line_raises(self, tmp_path):
        path = tmp_path / "bad.jsonl"
        path.write_text("{not json}\n", encoding="utf-8")

        with pytest.raises(ProfileStoreError):
            list(read_completions(path))
