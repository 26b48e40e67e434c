"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import pytest
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (full exercise flows)")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Mark based on test file location
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


class FakeClock:
    """Monotonic clock advanced by hand."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    """Provide a controllable monotonic clock."""
    return FakeClock()


@pytest.fixture
def sample_cloze():
    """Provide a two-blank cloze exercise."""
    return {
        "sentence": "The _____ sat on the _____",
        "hidden_words": ["cat", "mat"],
        "distractors": ["dog", "hat"],
    }


@pytest.fixture
def sample_categorization():
    """Provide a six-item categorization exercise."""
    return {
        "question": "Sort the foods",
        "categories": ["Fruit", "Vegetable"],
        "items": [
            {"id": "apple", "text": "Apple", "category": "Fruit"},
            {"id": "pear", "text": "Pear", "category": "Fruit"},
            {"id": "plum", "text": "Plum", "category": "Fruit"},
            {"id": "leek", "text": "Leek", "category": "Vegetable"},
            {"id": "kale", "text": "Kale", "category": "Vegetable"},
            {"id": "okra", "text": "Okra", "category": "Vegetable"},
        ],
    }


@pytest.fixture
def sample_ordering():
    """Provide a four-step ordering exercise."""
    return {"instruction": "Order the steps", "correct_order": ["plan", "build", "test", "ship"]}
