"""
Exercise engine: answer evaluation, attempt/hint state machine and adaptive scoring.

Packages:
- atoms: one evaluator per exercise type
- core: scoring policy, question weighting, rewards
- session: attempt state machine and ExercisePlayer
- delivery: telemetry records and the JSONL sink
- learning: student profile aggregation and storage
"""

__version__ = "1.0.0"
