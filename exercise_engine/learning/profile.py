"""
Student profile and session documents.

Persisted shapes use camelCase keys on the wire (`model_dump(by_alias=True)`)
and snake_case attributes in Python.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from exercise_engine.delivery.telemetry import TelemetryData


class _Document(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# Profile
# =============================================================================


class Performance(_Document):
    average_response_time_sec: float = Field(default=0.0, ge=0)
    global_accuracy_rate: float = Field(default=0.0, ge=0, le=1)
    error_rate_by_topic: dict[str, int] = Field(default_factory=dict)
    total_questions_attempted: int = Field(default=0, ge=0)
    total_correct_answers: int = Field(default=0, ge=0)


class MediaPreference(_Document):
    text: float = 0.0
    video: float = 0.0
    gamified: float = 0.0


class Behavioral(_Document):
    hint_dependency_score: float = Field(default=0.0, ge=0, le=1)
    retry_persistence: float = Field(default=0.0, ge=0, le=1)
    retry_opportunities: int = Field(default=0, ge=0)
    media_preference: MediaPreference = Field(default_factory=MediaPreference)
    media_samples: dict[str, int] = Field(default_factory=dict)


class Engagement(_Document):
    total_learning_time_sec: float = Field(default=0.0, ge=0)
    completed_exercises_count: int = Field(default=0, ge=0)
    completed_lessons_count: int = Field(default=0, ge=0)
    last_active_at: str | None = None


class StudentProfile(_Document):
    """Persistent mastery profile of one learner."""

    user_id: str = ""
    performance: Performance = Field(default_factory=Performance)
    behavioral: Behavioral = Field(default_factory=Behavioral)
    engagement: Engagement = Field(default_factory=Engagement)
    last_updated: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StudentProfile:
        """Create from dictionary."""
        return cls.model_validate(data)


# =============================================================================
# Session
# =============================================================================


class SessionInteraction(_Document):
    """One completed question inside a session; mirrors TelemetryData."""

    exercise_id: str = ""
    exercise_type: str = ""
    topic: str | None = None
    is_correct: bool = False
    score: int = 0
    attempts: int = 1
    time_seconds: int = 0
    hints_used: int = 0
    hints_available: int = 0
    correct_count: int = 0
    total_count: int = 0
    resets: int = 0
    is_exam_mode: bool = False
    completed_at: str = ""
    last_answer: Any = None
    variant: str | None = None
    scaffolding_offered: bool = False
    scaffolding_accepted: bool = False
    error_tags: list[str] = Field(default_factory=list)

    @classmethod
    def from_telemetry(cls, telemetry: TelemetryData) -> SessionInteraction:
        return cls.model_validate(telemetry.to_dict())

    def to_telemetry(self) -> TelemetryData:
        return TelemetryData.from_dict(self.model_dump())


class SessionSummary(_Document):
    total_questions: int = 0
    correct_answers: int = 0
    total_hints_used: int = 0
    avg_response_time_sec: float = 0.0


class SessionData(_Document):
    """A lesson's worth of interactions."""

    user_id: str = ""
    lesson_id: str = ""
    start_time: str = ""
    end_time: str = ""
    duration_sec: float = 0.0
    interactions: list[SessionInteraction] = Field(default_factory=list)
    summary: SessionSummary = Field(default_factory=SessionSummary)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SessionData:
        """Create from dictionary."""
        return cls.model_validate(data)
