"""
Profile persistence for the CLI.

Profiles are stored as JSON files in ~/.exercise_engine/profiles/, one per
learner: {user_id}.json
"""

from __future__ import annotations

import json
import re
from pathlib import Path

from pydantic import ValidationError

from exercise_engine.errors import ProfileStoreError
from exercise_engine.learning.profile import StudentProfile

# Default profile directory
PROFILE_DIR = Path.home() / ".exercise_engine" / "profiles"

_SAFE_ID = re.compile(r"[^A-Za-z0-9_.-]")


class ProfileStore:
    """Reads and writes StudentProfile documents."""

    def __init__(self, profile_dir: Path | None = None):
        self.profile_dir = profile_dir or PROFILE_DIR
        self.profile_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, user_id: str) -> Path:
        safe = _SAFE_ID.sub("_", user_id) or "anonymous"
        return self.profile_dir / f"{safe}.json"

    def save(self, profile: StudentProfile) -> Path:
        """Save a profile to disk."""
        filepath = self.path_for(profile.user_id)
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(profile.to_dict(), f, indent=2)
        return filepath

    def load(self, user_id: str) -> StudentProfile | None:
        """
        Load a learner's profile.

        Returns None when no profile exists yet.

        Raises:
            ProfileStoreError: The stored document is corrupt
        """
        filepath = self.path_for(user_id)
        if not filepath.exists():
            return None

        try:
            with open(filepath, "r", encoding="utf-8") as f:
                data = json.load(f)
            return StudentProfile.from_dict(data)
        except (json.JSONDecodeError, ValidationError) as e:
            raise ProfileStoreError(f"Corrupt profile document {filepath.name}: {e}") from e

    def load_or_create(self, user_id: str) -> StudentProfile:
        """Load a profile, or start an empty one for a new learner."""
        return self.load(user_id) or StudentProfile(user_id=user_id)

    def delete(self, user_id: str) -> bool:
        """Delete a profile file."""
        filepath = self.path_for(user_id)
        if filepath.exists():
            filepath.unlink()
            return True
        return False

    def list_profiles(self) -> list[str]:
        """User ids with a stored profile."""
        return sorted(p.stem for p in self.profile_dir.glob("*.json"))
