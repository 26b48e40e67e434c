"""Student profile aggregation and session recording."""

from exercise_engine.learning.aggregator import (
    MEDIA_BUCKETS,
    SessionRecorder,
    StudentProfileAggregator,
    hint_ratio,
)
from exercise_engine.learning.profile import (
    Behavioral,
    Engagement,
    MediaPreference,
    Performance,
    SessionData,
    SessionInteraction,
    SessionSummary,
    StudentProfile,
)
from exercise_engine.learning.profile_store import ProfileStore

__all__ = [
    "MEDIA_BUCKETS",
    "Behavioral",
    "Engagement",
    "MediaPreference",
    "Performance",
    "ProfileStore",
    "SessionData",
    "SessionInteraction",
    "SessionRecorder",
    "SessionSummary",
    "StudentProfile",
    "StudentProfileAggregator",
    "hint_ratio",
]
