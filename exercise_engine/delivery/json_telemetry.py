"""
JSONL telemetry sink.

Append-only event files, one event per line, for offline analysis and for
replaying a learner's history into a profile.

File Structure:
    ~/.exercise_engine/telemetry/
        sessions/
            2026-03-01_session_abc123.jsonl

Event Types:
    - session_start: user and lesson ids
    - completion: one TelemetryData record plus the awarded score
    - hint: a hint was revealed
    - session_end: the SessionData summary
"""

from __future__ import annotations

import json
import uuid
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Iterator

from loguru import logger

from exercise_engine.delivery.telemetry import TelemetryData
from exercise_engine.errors import ProfileStoreError
from exercise_engine.learning.aggregator import SessionRecorder
from exercise_engine.learning.profile import SessionData


class JSONTelemetryLogger:
    """
    JSONL writer for one learner.

    `log_completion` and `log_hint` have the ExercisePlayer callback
    signatures. Write failures are logged and re-raised so the player can
    record them as delivery failures.
    """

    def __init__(
        self,
        log_dir: Path | None = None,
        rotation_size_mb: int = 10,
        user_id: str = "",
    ):
        """
        Initialize the telemetry logger.

        Args:
            log_dir: Directory for telemetry files (default: ~/.exercise_engine/telemetry)
            rotation_size_mb: Max file size before rotation (default: 10MB)
            user_id: Learner the events belong to
        """
        self.log_dir = log_dir or (Path.home() / ".exercise_engine" / "telemetry")
        self.sessions_dir = self.log_dir / "sessions"
        self.rotation_size_bytes = rotation_size_mb * 1024 * 1024
        self.user_id = user_id

        self.session_id: str | None = None
        self.session_file: Path | None = None
        self.recorder: SessionRecorder | None = None

        self.sessions_dir.mkdir(parents=True, exist_ok=True)

    def start_session(self, lesson_id: str = "") -> str:
        """
        Start a new telemetry session.

        Returns:
            Session ID
        """
        self.session_id = str(uuid.uuid4())[:12]
        self.recorder = SessionRecorder(user_id=self.user_id, lesson_id=lesson_id)

        date_str = self.recorder.started_at.strftime("%Y-%m-%d")
        self.session_file = self.sessions_dir / f"{date_str}_session_{self.session_id}.jsonl"

        self._write_event("session_start", {"userId": self.user_id, "lessonId": lesson_id})
        logger.debug(f"Telemetry session started: {self.session_id}")
        return self.session_id

    def log_completion(self, score: int, telemetry: TelemetryData) -> None:
        """Record a completed question."""
        if not self.session_id:
            logger.warning("log_completion called without active session")
            return
        if self.recorder:
            self.recorder.record(score, telemetry)
        self._write_event("completion", {"score": score, "telemetry": telemetry.to_dict()})

    def log_hint(self) -> None:
        if not self.session_id:
            return
        self._write_event("hint", {})

    def end_session(self) -> SessionData | None:
        """
        End the session and write its summary.

        Returns:
            SessionData for the finished session
        """
        if not self.session_id or not self.recorder:
            logger.warning("end_session called without active session")
            return None

        session = self.recorder.finish()
        self._write_event("session_end", session.to_dict())

        logger.debug(
            f"Telemetry session ended: {self.session_id} "
            f"({session.summary.total_questions} questions, {session.summary.correct_answers} correct)"
        )

        self.session_id = None
        self.session_file = None
        self.recorder = None
        return session

    def _write_event(self, event_type: str, payload: dict[str, Any]) -> None:
        """Append an event to the session file."""
        if not self.session_file:
            return

        event = {
            "ts": datetime.now(UTC).isoformat(),
            "session": self.session_id,
            "type": event_type,
            **payload,
        }

        try:
            with open(self.session_file, "a", encoding="utf-8") as f:
                f.write(json.dumps(event, default=str) + "\n")
        except OSError as e:
            logger.error(f"Failed to write telemetry event: {e}")
            raise

        self._rotate_if_needed()

    def _rotate_if_needed(self) -> None:
        """Rotate file if it exceeds size limit."""
        if not self.session_file or not self.session_file.exists():
            return

        if self.session_file.stat().st_size > self.rotation_size_bytes:
            timestamp = datetime.now(UTC).strftime("%H%M%S")
            rotated = self.session_file.with_suffix(f".{timestamp}.jsonl")
            self.session_file.rename(rotated)

            self.session_file.touch()
            logger.debug(f"Rotated telemetry file: {rotated.name}")

    def get_session_file_path(self) -> Path | None:
        """Get the current session file path."""
        return self.session_file


def read_events(path: Path) -> Iterator[dict[str, Any]]:
    """
    Iterate the events of a JSONL file.

    Blank lines are skipped.

    Raises:
        ProfileStoreError: A line is not valid JSON
    """
    with open(path, "r", encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            if not line.strip():
                continue
            try:
                yield json.loads(line)
            except json.JSONDecodeError as e:
                raise ProfileStoreError(f"{path.name}:{line_no}: invalid JSON ({e.msg})") from e


def read_completions(path: Path) -> Iterator[TelemetryData]:
    """
    Telemetry records of a JSONL file, in order.

    Accepts files written by JSONTelemetryLogger (completion events) and plain
    streams with one camelCase TelemetryData object per line.
    """
    for event in read_events(path):
        event_type = event.get("type")
        if event_type == "completion" and isinstance(event.get("telemetry"), dict):
            yield TelemetryData.from_dict(event["telemetry"])
        elif event_type is None and ("exerciseType" in event or "exercise_type" in event):
            yield TelemetryData.from_dict(event)
