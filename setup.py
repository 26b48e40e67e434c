"""
Setup script for exercise-engine.

Exercise Engine is the answer-evaluation and scoring core of an interactive
lesson player. It serves three roles:

1. Evaluation - Per-unit correctness for eleven exercise types
2. Attempt Policy - Bounded retries, progressive hints, partial credit
3. Learner Profile - Incremental mastery statistics from telemetry

The 'exercise-engine' command exposes evaluation, scoring and profile replay.
"""

from setuptools import find_packages, setup

setup(
    name="exercise-engine",
    version="1.0.0",
    description="Answer evaluation, attempt/hint state machine and adaptive scoring for interactive exercises",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    packages=find_packages(include=["exercise_engine", "exercise_engine.*"]),
    py_modules=["config"],
    python_requires=">=3.11",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "exercise-engine=exercise_engine.cli.main:app",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "Intended Audience :: Education",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
        "Topic :: Education :: Computer Aided Instruction (CAI)",
    ],
    keywords="learning education exercises scoring evaluation",
)
