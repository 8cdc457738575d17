import logging
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from typing import Optional
from datetime import datetime

from recall.config import settings
from recall.database import SessionLocal, init_db
from recall.crud import (
    create_learning_item, get_learning_item, list_learning_items,
    get_due_items, get_mastered_items, get_history,
    archive_learning_item, record_review, BackdatedReviewError
)
from recall.lifecycle import derive_state
from recall.retention import compute_retention_score, estimate_item_retention, summarize_retention
from recall.review_scheduler import compute_next_review_date, get_days_overdue
from recall.schemas import LearningItemCreate, LearningItemResponse
from recall.streak import PERFECT_RECALL_THRESHOLD, is_mastery_suggested

app = typer.Typer(help="Recall CLI - spaced-repetition review scheduling")
console = Console()


@app.callback()
def main():
    """Configure logging for every command"""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)]
    )


def _parse_when(value: Optional[str]) -> Optional[datetime]:
    """Parse a YYYY-MM-DD or ISO timestamp option"""
    if not value:
        return None
    for fmt in ["%Y-%m-%d", "%Y-%m-%d %H:%M"]:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        console.print(f"[red]✗[/red] Invalid date: {value} (use YYYY-MM-DD or an ISO timestamp)")
        raise typer.Exit(code=1)


def _check_score(recall_score: int) -> bool:
    if recall_score < 0 or recall_score > 100:
        console.print("[red]✗[/red] Recall score must be between 0 and 100")
        return False
    return True


def _format_date(value: Optional[datetime]) -> str:
    return value.strftime("%Y-%m-%d") if value else "-"


@app.command()
def init():
    """Initialize database tables"""
    init_db()
    console.print("[green]✓[/green] Database initialized successfully!")


@app.command()
def reset_db():
    """Delete all data and reinitialize database (WARNING: irreversible!)"""
    confirm = typer.confirm("⚠️  This will DELETE ALL DATA. Are you sure?")
    if not confirm:
        console.print("[yellow]Cancelled.[/yellow]")
        return

    from recall.database import engine, Base
    import recall.models  # noqa: F401
    console.print("[yellow]Dropping all tables...[/yellow]")
    Base.metadata.drop_all(bind=engine)
    console.print("[yellow]Recreating tables...[/yellow]")
    Base.metadata.create_all(bind=engine)
    console.print("[green]✓[/green] Database reset complete! All data deleted.")


@app.command()
def add_item(
    title: str = typer.Option(..., prompt="Title"),
    recall_score: int = typer.Option(..., prompt="Recall score (0-100)"),
    content: Optional[str] = typer.Option(None, help="Notes or content to memorize"),
    reviewed_at: Optional[str] = typer.Option(None, help="Study date (YYYY-MM-DD), default: now")
):
    """Add a learning item; its first save counts as its first review"""
    if not _check_score(recall_score):
        raise typer.Exit(code=1)

    db = SessionLocal()
    try:
        item = create_learning_item(db, LearningItemCreate(
            title=title,
            recall_score=recall_score,
            content=content,
            reviewed_at=_parse_when(reviewed_at)
        ))
        console.print(f"[green]✓[/green] Item created! ID: {item.id}")
        console.print(f"  Title: {item.title}")
        console.print(f"  First review scheduled: {_format_date(item.next_review_date)}")
    finally:
        db.close()


@app.command()
def review(
    item_id: int = typer.Option(..., prompt="Item ID"),
    recall_score: int = typer.Option(..., prompt="Recall score (0-100)"),
    reviewed_at: Optional[str] = typer.Option(None, help="Review date (YYYY-MM-DD), default: now")
):
    """Record a review and reschedule the item"""
    if not _check_score(recall_score):
        raise typer.Exit(code=1)

    when = _parse_when(reviewed_at)

    db = SessionLocal()
    try:
        try:
            outcome = record_review(db, item_id, recall_score, reviewed_at=when)
        except BackdatedReviewError as e:
            console.print(f"[red]✗[/red] {e}")
            raise typer.Exit(code=1)
        if not outcome:
            console.print(f"[red]✗[/red] Item ID {item_id} not found")
            raise typer.Exit(code=1)

        days = (outcome.next_review_date - outcome.last_reviewed_date).days
        console.print("[green]✓[/green] Review recorded!")
        console.print(f"  Recall: {outcome.recall_score}%")
        console.print(f"  Retention: {outcome.retention_score}%")
        console.print(f"  Perfect recall streak: {outcome.perfect_recall_count}")
        console.print(f"  Next review: {_format_date(outcome.next_review_date)} (in {days} days)")
        if outcome.mastery_suggested:
            console.print("[cyan]★[/cyan] Mastered! Consider archiving this item.")
    finally:
        db.close()


@app.command()
def view_item(item_id: int, as_json: bool = typer.Option(False, "--json", help="Print as JSON")):
    """View a learning item and its review history"""
    db = SessionLocal()
    try:
        item = get_learning_item(db, item_id)
        if not item:
            console.print(f"[red]✗[/red] Item ID {item_id} not found")
            raise typer.Exit(code=1)

        if as_json:
            console.print_json(LearningItemResponse.model_validate(item).model_dump_json())
            return

        history = get_history(db, item_id)
        console.print(f"\n[bold]{item.title}[/bold]")
        if item.content:
            console.print(f"  {item.content}")
        console.print(f"  State: {derive_state(item).value}")
        console.print(f"  Recall: {item.recall_score}%")
        console.print(f"  Retention: {estimate_item_retention(item.recall_score, item.perfect_recall_count, history)}%")
        console.print(f"  Perfect recall streak: {item.perfect_recall_count}")
        console.print(f"  Last reviewed: {_format_date(item.last_reviewed_date)}")
        console.print(f"  Next review: {_format_date(item.next_review_date)}")

        if history:
            table = Table(show_header=True, header_style="bold magenta")
            table.add_column("Date", style="cyan")
            table.add_column("Recall", style="green", justify="right")
            table.add_column("Retention", style="yellow", justify="right")

            for entry in history:
                table.add_row(
                    entry.date.strftime("%Y-%m-%d %H:%M"),
                    f"{entry.recall_score}%",
                    f"{entry.retention_score}%"
                )

            console.print(table)
    finally:
        db.close()


@app.command()
def due():
    """List items due for review"""
    db = SessionLocal()
    try:
        items = get_due_items(db)
        if not items:
            console.print("[green]Nothing due for review.[/green]")
            return

        now = datetime.now()
        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("ID", style="cyan", justify="right")
        table.add_column("Title", style="green")
        table.add_column("Due Date", style="yellow")
        table.add_column("Days Overdue", style="red")

        for item in items[:20]:
            days_overdue = get_days_overdue(item.next_review_date, now)
            table.add_row(
                str(item.id),
                item.title[:50],
                _format_date(item.next_review_date),
                str(days_overdue) if days_overdue > 0 else "Today"
            )

        console.print(table)
        if len(items) > 20:
            console.print(f"[dim]... and {len(items) - 20} more items[/dim]")
    finally:
        db.close()


@app.command()
def mastered():
    """List items eligible for archiving"""
    db = SessionLocal()
    try:
        items = get_mastered_items(db)
        if not items:
            console.print("[yellow]No mastered items yet.[/yellow]")
            return

        console.print("\n[bold]Mastered items (suggested for archiving):[/bold]")
        for item in items:
            console.print(f"  {item.id}. {item.title} - streak {item.perfect_recall_count}")
    finally:
        db.close()


@app.command()
def archive(item_id: int, yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation")):
    """Archive an item (deletes it and its history)"""
    if not yes and not typer.confirm(f"Archive item {item_id} and delete its history?"):
        console.print("[yellow]Cancelled.[/yellow]")
        return

    db = SessionLocal()
    try:
        if archive_learning_item(db, item_id):
            console.print(f"[green]✓[/green] Item {item_id} archived")
        else:
            console.print(f"[red]✗[/red] Item ID {item_id} not found")
            raise typer.Exit(code=1)
    finally:
        db.close()


@app.command()
def stats():
    """Show retention across all items"""
    db = SessionLocal()
    try:
        items = list_learning_items(db)
        summary = summarize_retention(
            estimate_item_retention(item.recall_score, item.perfect_recall_count, item.history)
            for item in items
        )

        console.print("\n[bold]Retention Summary[/bold]")
        console.print(f"  Items: {summary.item_count}")
        console.print(f"  Average retention: {summary.average_retention:.1f}%")
        low, medium, high = summary.distribution
        console.print(f"  [red]Low (≤40%)[/red]: {low}  [yellow]Medium (≤70%)[/yellow]: {medium}  [green]High[/green]: {high}")
    finally:
        db.close()


@app.command()
def preview(
    recall_score: int = typer.Option(..., prompt="Recall score (0-100)"),
    streak: int = typer.Option(0, help="Perfect recall streak before this review"),
    days_since: int = typer.Option(0, help="Days since the previous review"),
    reviews: int = typer.Option(0, help="Number of previous reviews")
):
    """Preview retention and next review date without saving anything"""
    if not _check_score(recall_score):
        raise typer.Exit(code=1)

    now = datetime.now()
    retention_score = compute_retention_score(recall_score, days_since, reviews, streak)
    new_streak = streak + 1 if recall_score >= PERFECT_RECALL_THRESHOLD else 0
    next_review = compute_next_review_date(recall_score, now, new_streak)

    console.print(f"  Retention: {retention_score}%")
    console.print(f"  Perfect recall streak after review: {new_streak}")
    console.print(f"  Next review: {_format_date(next_review)} (in {(next_review - now).days} days)")
    if is_mastery_suggested(new_streak):
        console.print("[cyan]★[/cyan] This review would make the item eligible for archiving.")


if __name__ == "__main__":
    app()
