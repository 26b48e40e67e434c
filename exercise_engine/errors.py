"""
Exception types for the exercise engine.

The core does not raise during play: malformed content degrades to an empty
answer key and a locked exercise ignores further submits. These exceptions
cover programming errors and the reference storage collaborators.
"""


class ExerciseEngineError(Exception):
    """Base class for all exercise engine errors."""


class UnknownExerciseTypeError(ExerciseEngineError, ValueError):
    """Raised when an exercise is created for a type with no registered evaluator."""

    def __init__(self, exercise_type: object):
        self.exercise_type = exercise_type
        super().__init__(f"No evaluator registered for exercise type: {exercise_type!r}")


class ProfileStoreError(ExerciseEngineError):
    """Raised when a stored profile or telemetry document cannot be read."""
