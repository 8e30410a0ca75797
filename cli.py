import typer
from rich.console import Console
from rich.table import Table
from typing import Optional, List
from datetime import datetime
import json

from personalization.config import settings, configure_logging
from personalization.engine import PersonalizationEngine
from personalization.store import get_store
from personalization.question_bank import QuestionBankParser
from personalization.schemas import MemoryRecord

app = typer.Typer(help="Quiz Personalization CLI - spaced repetition and session planning")
console = Console()


def get_engine() -> PersonalizationEngine:
    """Build an engine on the configured store backend"""
    return PersonalizationEngine(get_store(settings.store_backend))


@app.callback()
def main(log_level: Optional[str] = typer.Option(None, help="Log level (default from settings)")):
    configure_logging(log_level)


def _records_table(records: List[MemoryRecord], now: datetime) -> Table:
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Question", style="cyan")
    table.add_column("Category", style="green")
    table.add_column("Strength", style="yellow", justify="right")
    table.add_column("Streak", justify="right")
    table.add_column("Next Review", style="blue")
    table.add_column("Days Overdue", style="red", justify="right")

    for record in records:
        days_overdue = max(0.0, (now - record.next_review_date).total_seconds() / 86400)
        table.add_row(
            record.question_id,
            record.category,
            f"{record.memory_strength:.2f}",
            str(record.correct_streak),
            record.next_review_date.strftime("%Y-%m-%d %H:%M"),
            f"{days_overdue:.1f}" if days_overdue > 0 else "-"
        )
    return table


@app.command()
def init():
    """Initialize storage for the configured backend"""
    if settings.store_backend == "database":
        from personalization.database import init_db
        init_db()
        console.print("[green]✓[/green] Database initialized successfully!")
    else:
        console.print(f"[green]✓[/green] Using '{settings.store_backend}' store, nothing to initialize")


@app.command()
def record_attempt(
    user_id: str = typer.Option(..., prompt="User ID"),
    question_id: str = typer.Option(..., prompt="Question ID"),
    category: str = typer.Option(..., prompt="Category"),
    correct: bool = typer.Option(..., prompt="Answered correctly?"),
    response_time: float = typer.Option(0, help="Response time in milliseconds"),
    difficulty: float = typer.Option(3, help="Perceived difficulty (1-5)")
):
    """Record a quiz attempt and update the question's memory strength"""
    engine = get_engine()
    record = engine.update_memory(user_id, question_id, category, correct, response_time, difficulty)

    console.print(f"[green]✓[/green] Attempt recorded!")
    console.print(f"  Question: [{record.category}] {record.question_id}")
    console.print(f"  Memory strength: {record.memory_strength:.2f}")
    console.print(f"  Easiness: {record.easiness:.2f}")
    console.print(f"  Next review: {record.next_review_date.strftime('%Y-%m-%d')} (in {record.interval} days)")
    console.print(f"  Attempts: {record.total_attempts} ({record.incorrect_count} incorrect)")


@app.command()
def review(user_id: str, limit: int = typer.Option(10, help="Maximum questions to list")):
    """List questions due for review, weakest first"""
    engine = get_engine()
    records = engine.questions_for_review(user_id, limit)

    if not records:
        console.print(f"[yellow]No questions due for review for user {user_id}[/yellow]")
        return

    console.print(f"\n[bold]Questions Due for Review - {user_id}[/bold]\n")
    console.print(_records_table(records, engine.clock()))


@app.command()
def schedule(user_id: str):
    """Show upcoming reviews for today, this week and next week"""
    engine = get_engine()
    upcoming = engine.review_schedule(user_id)
    now = engine.clock()

    for title, records in [
        ("Today", upcoming.today),
        ("This Week", upcoming.this_week),
        ("Next Week", upcoming.next_week),
    ]:
        console.print(f"\n[bold]{title}[/bold] ({len(records)} questions)")
        if records:
            console.print(_records_table(records, now))


@app.command()
def select(
    user_id: str = typer.Option(..., prompt="User ID"),
    questions_file: str = typer.Option(..., prompt="Question bank file (.csv, .xlsx or .json)"),
    session_length: int = typer.Option(10, help="Number of questions in the session"),
    as_json: bool = typer.Option(False, "--json", help="Print the selection as JSON")
):
    """Recommend questions for the next quiz session"""
    try:
        available = QuestionBankParser.auto_parse(questions_file)
    except (OSError, ValueError) as e:
        console.print(f"[red]✗[/red] Could not load question bank: {e}")
        raise typer.Exit(1)

    engine = get_engine()
    selection = engine.select_questions(user_id, available, session_length)

    if as_json:
        print(json.dumps(selection.model_dump(mode="json"), indent=2, default=str))
        return

    console.print(f"\n[bold]Recommended Session - {user_id}[/bold]")
    console.print(f"  Loaded {len(available)} questions")
    console.print(f"  Review candidates: {len(selection.review_questions)}")
    console.print(f"  New questions: {len(selection.new_questions)}")
    console.print(f"  Recommended difficulty: {selection.recommended_difficulty}")
    console.print(f"  Learning efficiency: {selection.learning_efficiency:.2f}\n")

    new_ids = {q["id"] for q in selection.new_questions}
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("#", justify="right")
    table.add_column("Question", style="cyan")
    table.add_column("Category", style="green")
    table.add_column("Type", style="yellow")
    for i, question in enumerate(selection.questions, 1):
        table.add_row(
            str(i),
            question["id"],
            question.get("category") or "",
            "[NEW]" if question["id"] in new_ids else "[REV]"
        )
    console.print(table)


@app.command()
def stats(user_id: str):
    """View performance statistics and learning efficiency"""
    engine = get_engine()
    performance = engine.performance_stats(user_id)
    efficiency = engine.learning_efficiency(user_id, performance)

    console.print(f"\n[bold]Performance - {user_id}[/bold]\n")
    console.print(f"[cyan]Statistics:[/cyan]")
    console.print(f"  Questions tracked: {performance.total_questions}")
    console.print(f"  Average accuracy: {performance.average_accuracy:.0%}")
    console.print(f"  Average response time: {performance.average_response_time:.0f} ms")
    console.print(f"  Learning efficiency: {efficiency:.2f}")

    if performance.category_stats:
        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Category", style="cyan")
        table.add_column("Accuracy", style="green", justify="right")
        table.add_column("Attempts", style="blue", justify="right")
        for category, category_stats in sorted(performance.category_stats.items()):
            table.add_row(category, f"{category_stats.accuracy:.0%}", str(category_stats.attempts))
        console.print(table)


@app.command()
def record_session(
    user_id: str = typer.Option(..., prompt="User ID"),
    duration_minutes: float = typer.Option(..., prompt="Session duration (minutes)"),
    questions_answered: int = typer.Option(..., prompt="Questions answered"),
    accuracy: float = typer.Option(..., prompt="Accuracy (0-1)"),
    time_of_day: str = typer.Option("afternoon", help="morning, afternoon or evening")
):
    """Record a finished quiz session"""
    engine = get_engine()
    metrics = engine.record_session(
        user_id, duration_minutes * 60000, questions_answered, accuracy, time_of_day
    )

    console.print(f"[green]✓[/green] Session recorded!")
    console.print(f"  Learning velocity: {metrics.learning_velocity:.2f} questions/min")
    console.print(f"  Optimal session length: {metrics.optimal_session_length} questions")


@app.command()
def show_metrics(user_id: str):
    """View learning efficiency metrics"""
    metrics = get_engine().get_metrics(user_id)

    console.print(f"\n[bold]Learning Metrics - {user_id}[/bold]")
    console.print(f"  Optimal session length: {metrics.optimal_session_length}")
    console.print(f"  Learning velocity: {metrics.learning_velocity:.2f}")
    console.print(f"  Average focus span: {metrics.average_focus_span:.0f} minutes")
    console.print(f"  Retention rate: {metrics.retention_rate:.0%}")
    console.print(f"  Best time of day: {metrics.best_time_of_day}")


@app.command()
def show_config(user_id: str):
    """View quiz personalization settings"""
    config = get_engine().get_config(user_id)

    console.print(f"\n[bold]Quiz Config - {user_id}[/bold]")
    console.print(f"  Preferred difficulty: {config.preferred_difficulty}")
    console.print(f"  Focus mode: {config.focus_mode}")
    console.print(f"  Session length: {config.session_length}")
    console.print(f"  Categories: {', '.join(config.categories) if config.categories else 'all'}")
    console.print(f"  Spaced repetition: {'on' if config.enable_spaced_repetition else 'off'}")
    console.print(f"  Adaptive difficulty: {'on' if config.adaptive_difficulty else 'off'}")
    console.print(f"  Review priority: {config.review_priority}")


@app.command()
def set_config(
    user_id: str = typer.Option(..., prompt="User ID"),
    difficulty: Optional[str] = typer.Option(None, help="adaptive, easy, medium or hard"),
    focus: Optional[str] = typer.Option(None, help="review, new or mixed"),
    session_length: Optional[int] = typer.Option(None, help="Questions per session"),
    categories: Optional[str] = typer.Option(None, help="Allowed categories (comma-separated, empty for all)"),
    review_priority: Optional[str] = typer.Option(None, help="memory_strength, time_since_review or error_rate")
):
    """Update quiz personalization settings"""
    engine = get_engine()
    config = engine.get_config(user_id)

    updates = {}
    if difficulty is not None:
        updates["preferred_difficulty"] = difficulty
    if focus is not None:
        updates["focus_mode"] = focus
    if session_length is not None:
        updates["session_length"] = session_length
    if categories is not None:
        updates["categories"] = [c.strip() for c in categories.split(",") if c.strip()]
    if review_priority is not None:
        updates["review_priority"] = review_priority

    try:
        config = config.model_validate({**config.model_dump(), **updates})
    except ValueError as e:
        console.print(f"[red]✗[/red] Invalid setting: {e}")
        raise typer.Exit(1)

    if engine.save_config(config):
        console.print(f"[green]✓[/green] Config updated successfully!")
    else:
        console.print(f"[yellow]Config could not be saved, see log for details[/yellow]")


if __name__ == "__main__":
    app()
