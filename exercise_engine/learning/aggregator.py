"""
Student Profile Aggregator.

Folds telemetry into a StudentProfile one sample at a time. Every statistic is
an incremental (rolling) value that depends only on the previous aggregate
and the new sample, so replaying the same stream always yields the same
profile:

    mean' = mean + (x - mean) / n

Design:
- fold(): one question's telemetry -> new profile (input untouched)
- fold_session(): a whole SessionData, plus completed-lesson bookkeeping
- SessionRecorder: collects a lesson's telemetry into SessionData
"""

from __future__ import annotations

from datetime import UTC, datetime

from loguru import logger

from exercise_engine.delivery.telemetry import TelemetryData
from exercise_engine.learning.profile import (
    SessionData,
    SessionInteraction,
    SessionSummary,
    StudentProfile,
)

# Media bucket per exercise type; stored sessions may also carry raw media types
MEDIA_BUCKETS: dict[str, str] = {
    "cloze": "text",
    "text_selection": "text",
    "highlight": "text",
    "table_completion": "text",
    "rating_scale": "text",
    "text": "text",
    "pdf": "text",
    "open-question": "text",
    "video": "video",
    "podcast": "video",
    "memory_game": "gamified",
    "ordering": "gamified",
    "categorization": "gamified",
    "matching": "gamified",
    "sentence_builder": "gamified",
    "image_labeling": "gamified",
    "interactive-chat": "gamified",
}


def _running_mean(mean: float, sample: float, count: int) -> float:
    """Mean after adding the count-th sample."""
    if count <= 1:
        return sample
    return mean + (sample - mean) / count


def _clamp01(value: float) -> float:
    return min(1.0, max(0.0, value))


def hint_ratio(telemetry: TelemetryData) -> float:
    """Share of available hints the learner used; 0 when none were available."""
    if telemetry.hints_available <= 0:
        return 0.0
    return _clamp01(telemetry.hints_used / telemetry.hints_available)


class StudentProfileAggregator:
    """Incremental profile updates."""

    def fold(
        self,
        profile: StudentProfile,
        telemetry: TelemetryData,
        was_correct: bool | None = None,
        now: datetime | None = None,
    ) -> StudentProfile:
        """
        Fold one question's telemetry into a new profile.

        Args:
            profile: Current aggregate (left unchanged)
            telemetry: Telemetry of the completed question
            was_correct: Correctness override (default: telemetry.is_correct)
            now: Last-active timestamp (default: telemetry.completed_at, then now)

        Returns:
            The updated profile
        """
        correct = telemetry.is_correct if was_correct is None else was_correct
        updated = profile.model_copy(deep=True)
        perf = updated.performance
        behavior = updated.behavioral
        engagement = updated.engagement

        # Performance
        perf.total_questions_attempted += 1
        n = perf.total_questions_attempted
        perf.average_response_time_sec = _running_mean(
            perf.average_response_time_sec, max(0.0, float(telemetry.time_seconds)), n
        )
        if correct:
            perf.total_correct_answers += 1
        else:
            key = telemetry.topic or telemetry.exercise_type or "unknown"
            perf.error_rate_by_topic[key] = perf.error_rate_by_topic.get(key, 0) + 1
        perf.global_accuracy_rate = perf.total_correct_answers / n

        # Behavioral
        behavior.hint_dependency_score = _clamp01(
            _running_mean(behavior.hint_dependency_score, hint_ratio(telemetry), n)
        )

        # A failure opportunity is a question whose first attempt did not succeed
        if not (correct and telemetry.attempts <= 1):
            behavior.retry_opportunities += 1
            retried = 1.0 if telemetry.attempts > 1 else 0.0
            behavior.retry_persistence = _clamp01(
                _running_mean(behavior.retry_persistence, retried, behavior.retry_opportunities)
            )

        bucket = MEDIA_BUCKETS.get(telemetry.exercise_type)
        if bucket:
            samples = behavior.media_samples.get(bucket, 0) + 1
            behavior.media_samples[bucket] = samples
            current = getattr(behavior.media_preference, bucket)
            setattr(
                behavior.media_preference,
                bucket,
                _running_mean(current, 1.0 if correct else 0.0, samples),
            )

        # Engagement
        engagement.total_learning_time_sec += max(0.0, float(telemetry.time_seconds))
        engagement.completed_exercises_count += 1
        stamp = now.isoformat() if now else (telemetry.completed_at or datetime.now(UTC).isoformat())
        engagement.last_active_at = stamp
        updated.last_updated = stamp

        return updated

    def fold_session(
        self,
        profile: StudentProfile,
        session: SessionData,
        now: datetime | None = None,
    ) -> StudentProfile:
        """
        Fold every interaction of a session, then count the lesson.

        Learning time uses the session's wall duration when it is known, since
        it also covers time spent between questions.
        """
        updated = profile
        question_time = 0.0
        for interaction in session.interactions:
            telemetry = interaction.to_telemetry()
            question_time += max(0.0, float(telemetry.time_seconds))
            updated = self.fold(updated, telemetry, now=now)

        if updated is profile:
            updated = profile.model_copy(deep=True)

        engagement = updated.engagement
        if session.duration_sec > question_time:
            engagement.total_learning_time_sec += session.duration_sec - question_time
        engagement.completed_lessons_count += 1
        if session.user_id and not updated.user_id:
            updated.user_id = session.user_id
        if now:
            engagement.last_active_at = now.isoformat()
            updated.last_updated = now.isoformat()

        logger.info(
            f"Folded session {session.lesson_id or '?'} into profile {updated.user_id or '?'}: "
            f"{len(session.interactions)} questions, "
            f"accuracy {updated.performance.global_accuracy_rate:.0%}"
        )
        return updated


class SessionRecorder:
    """
    Collects the telemetry of one lesson.

    Its `record` method has the on_complete signature, so it can be handed to
    ExercisePlayer directly.
    """

    def __init__(self, user_id: str = "", lesson_id: str = "", started_at: datetime | None = None):
        self.user_id = user_id
        self.lesson_id = lesson_id
        self.started_at = started_at or datetime.now(UTC)
        self.interactions: list[SessionInteraction] = []

    def record(self, score: int, telemetry: TelemetryData) -> None:
        self.interactions.append(SessionInteraction.from_telemetry(telemetry))

    def summary(self) -> SessionSummary:
        total = len(self.interactions)
        avg_time = sum(i.time_seconds for i in self.interactions) / total if total else 0.0
        return SessionSummary(
            total_questions=total,
            correct_answers=sum(1 for i in self.interactions if i.is_correct),
            total_hints_used=sum(i.hints_used for i in self.interactions),
            avg_response_time_sec=round(avg_time, 3),
        )

    def finish(self, ended_at: datetime | None = None) -> SessionData:
        """Close the session and build its document."""
        ended = ended_at or datetime.now(UTC)
        return SessionData(
            user_id=self.user_id,
            lesson_id=self.lesson_id,
            start_time=self.started_at.isoformat(),
            end_time=ended.isoformat(),
            duration_sec=max(0.0, (ended - self.started_at).total_seconds()),
            interactions=list(self.interactions),
            summary=self.summary(),
        )
