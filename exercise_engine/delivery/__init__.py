"""Telemetry records and the JSONL sink."""
