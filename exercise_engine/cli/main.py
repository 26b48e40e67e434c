"""
Typer CLI for the exercise engine.

Commands:
    exercise-engine evaluate    - Evaluate an answer file against exercise content
    exercise-engine score       - Score a correctness/attempts/hints combination
    exercise-engine replay      - Fold a telemetry JSONL stream into a learner profile
    exercise-engine profile     - Show a stored learner profile

Usage:
    exercise-engine --help
    exercise-engine evaluate content.json answer.json --type cloze --attempts 2
    exercise-engine score --correct --attempts 1 --hints 2
    exercise-engine replay telemetry.jsonl --user alice --save
    exercise-engine profile alice --json
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Optional

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from config import get_settings
from exercise_engine.atoms import ExerciseType, coerce_type, require_evaluator
from exercise_engine.atoms.base import Evaluation, UnitStatus
from exercise_engine.core.scoring import ScoringConfig, final_score, score as policy_score
from exercise_engine.core.weighting import question_weight, reward_for, weighted_final_score
from exercise_engine.delivery.json_telemetry import read_completions
from exercise_engine.errors import ExerciseEngineError, UnknownExerciseTypeError
from exercise_engine.learning.aggregator import StudentProfileAggregator
from exercise_engine.learning.profile import StudentProfile
from exercise_engine.learning.profile_store import ProfileStore

app = typer.Typer(
    help="Exercise engine CLI: answer evaluation, scoring and learner profiles",
    no_args_is_help=True,
)

console = Console()

_STATUS_STYLE = {
    UnitStatus.CORRECT: "[green]correct[/green]",
    UnitStatus.WRONG: "[red]wrong[/red]",
    UnitStatus.EMPTY: "[dim]empty[/dim]",
}


def _configure_logging(level: str) -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    """Exercise engine command line tools."""
    _configure_logging("DEBUG" if verbose else get_settings().log_level)


def _load_json(path: Path) -> Any:
    if not path.exists():
        console.print(f"[red]Error: File not found: {path}[/red]")
        raise typer.Exit(1)
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        console.print(f"[red]Error: {path.name} is not valid JSON: {e.msg}[/red]")
        raise typer.Exit(1)


def _scoring() -> ScoringConfig:
    return ScoringConfig.from_settings(get_settings())


# ========================================
# evaluate
# ========================================


@app.command()
def evaluate(
    content_file: Path = typer.Argument(..., help="Exercise content JSON"),
    answer_file: Path = typer.Argument(..., help="Working answer JSON"),
    exercise_type: Optional[str] = typer.Option(
        None, "--type", "-t", help="Exercise type (default: 'type' field of the content file)"
    ),
    attempts: int = typer.Option(1, "--attempts", "-a", help="Attempt number of this submit"),
    hints: int = typer.Option(0, "--hints", help="Hints revealed so far"),
    bloom_level: Optional[str] = typer.Option(None, "--bloom", help="Bloom level for weighted points"),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
):
    """Evaluate a working answer and show per-unit results and the score."""
    raw_content = _load_json(content_file)
    raw_answer = _load_json(answer_file)

    type_name = exercise_type
    if isinstance(raw_content, dict) and "content" in raw_content and "type" in raw_content:
        type_name = type_name or raw_content["type"]
        raw_content = raw_content["content"]
    if not type_name:
        console.print("[red]Error: No exercise type given (use --type)[/red]")
        raise typer.Exit(1)

    try:
        evaluator = require_evaluator(type_name)
    except UnknownExerciseTypeError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    resolved = coerce_type(type_name)
    content = evaluator.parse(raw_content)
    evaluation = evaluator.evaluate(content, evaluator.normalize_answer(content, raw_answer))
    awarded = final_score(evaluation, attempts, hints, config=_scoring())
    weight = question_weight(resolved.value, bloom_level)

    if as_json:
        result = {
            "type": resolved.value,
            "evaluation": evaluation.to_dict(),
            "score": awarded,
            "weight": weight,
            "points": weighted_final_score(weight, awarded),
        }
        typer.echo(json.dumps(result, indent=2))
        return

    _print_evaluation(resolved, evaluation)
    console.print(
        f"\n  Score: [bold]{awarded}[/bold]  "
        f"({evaluation.correct_count}/{evaluation.total_count} units, "
        f"attempt {attempts}, {hints} hints)"
    )
    console.print(f"  Points: {weighted_final_score(weight, awarded)} / {weight}")


def _print_evaluation(exercise_type: ExerciseType, evaluation: Evaluation) -> None:
    table = Table(title=f"{exercise_type.value} evaluation")
    table.add_column("Unit", style="cyan")
    table.add_column("Status")
    for key, status in evaluation.units:
        table.add_row(key, _STATUS_STYLE[status])
    console.print(table)


# ========================================
# score
# ========================================


@app.command()
def score(
    correct: bool = typer.Option(True, "--correct/--incorrect", help="Whether the answer was fully correct"),
    attempts: int = typer.Option(1, "--attempts", "-a", help="Attempts used"),
    hints: int = typer.Option(0, "--hints", help="Hints revealed"),
    correct_count: Optional[int] = typer.Option(None, "--correct-count", help="Correct units (partial credit)"),
    total_count: Optional[int] = typer.Option(None, "--total-count", help="Total units (partial credit)"),
):
    """Apply the scoring policy to a combination of counters."""
    config = _scoring()
    if correct_count is not None and total_count is not None:
        evaluation = Evaluation(
            correct_count=correct_count,
            total_count=total_count,
            is_fully_correct=total_count > 0 and correct_count == total_count,
        )
        awarded = final_score(evaluation, attempts, hints, config=config)
        is_correct = evaluation.is_fully_correct
    else:
        awarded = policy_score(correct, attempts, hints, config=config)
        is_correct = correct

    reward = reward_for(awarded, is_correct, config)
    console.print(f"Score: [bold]{awarded}[/bold]")
    console.print(f"XP: {reward.xp}  Gems: {reward.gems}  Tier: {reward.tier.value}")


# ========================================
# replay / profile
# ========================================


def _store(profile_dir: Optional[Path]) -> ProfileStore:
    return ProfileStore(profile_dir or get_settings().profile_dir)


@app.command()
def replay(
    telemetry_file: Path = typer.Argument(..., help="Telemetry JSONL file"),
    user: str = typer.Option(..., "--user", "-u", help="Learner id"),
    save: bool = typer.Option(False, "--save", help="Persist the updated profile"),
    fresh: bool = typer.Option(False, "--fresh", help="Start from an empty profile"),
    profile_dir: Optional[Path] = typer.Option(None, "--profile-dir", help="Profile directory"),
):
    """Fold every completion in a telemetry file into a learner profile."""
    if not telemetry_file.exists():
        console.print(f"[red]Error: File not found: {telemetry_file}[/red]")
        raise typer.Exit(1)

    store = _store(profile_dir)
    aggregator = StudentProfileAggregator()
    try:
        profile = StudentProfile(user_id=user) if fresh else store.load_or_create(user)
        folded = 0
        for telemetry in read_completions(telemetry_file):
            profile = aggregator.fold(profile, telemetry)
            folded += 1
    except ExerciseEngineError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"Folded [bold]{folded}[/bold] completions for {user}")
    _print_profile(profile)

    if save:
        path = store.save(profile)
        console.print(f"\n[green]Saved profile to {path}[/green]")


@app.command()
def profile(
    user: str = typer.Argument(..., help="Learner id"),
    profile_dir: Optional[Path] = typer.Option(None, "--profile-dir", help="Profile directory"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw profile document"),
):
    """Show a stored learner profile."""
    try:
        stored = _store(profile_dir).load(user)
    except ExerciseEngineError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if stored is None:
        console.print(f"[yellow]No profile stored for {user}[/yellow]")
        raise typer.Exit(1)

    if as_json:
        typer.echo(json.dumps(stored.to_dict(), indent=2))
        return
    _print_profile(stored)


def _print_profile(profile: StudentProfile) -> None:
    perf = profile.performance
    behavior = profile.behavioral
    engagement = profile.engagement

    table = Table(title=f"Profile: {profile.user_id or '?'}")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right", style="green")
    table.add_row("Questions attempted", str(perf.total_questions_attempted))
    table.add_row("Correct answers", str(perf.total_correct_answers))
    table.add_row("Accuracy", f"{perf.global_accuracy_rate:.1%}")
    table.add_row("Avg response time", f"{perf.average_response_time_sec:.1f}s")
    table.add_row("Hint dependency", f"{behavior.hint_dependency_score:.2f}")
    table.add_row("Retry persistence", f"{behavior.retry_persistence:.2f}")
    table.add_row("Learning time", f"{engagement.total_learning_time_sec:.0f}s")
    table.add_row("Completed exercises", str(engagement.completed_exercises_count))
    table.add_row("Completed lessons", str(engagement.completed_lessons_count))
    console.print(table)

    if perf.error_rate_by_topic:
        errors = Table(title="Errors by topic")
        errors.add_column("Topic", style="cyan")
        errors.add_column("Errors", justify="right", style="red")
        for topic, count in sorted(perf.error_rate_by_topic.items(), key=lambda kv: -kv[1]):
            errors.add_row(topic, str(count))
        console.print(errors)


if __name__ == "__main__":
    app()
