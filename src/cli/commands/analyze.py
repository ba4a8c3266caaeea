"""Sentiment analysis CLI commands."""

import click
from rich.console import Console
from rich.table import Table

from cli.utils import fail, get_components, mood_label
from journal.errors import JournalError
from observability import log_run_summary

console = Console()


@click.command()
@click.argument("entry_id")
@click.option("--sentences/--no-sentences", default=True, help="Show per-sentence breakdown")
def analyze(entry_id: str, sentences: bool):
    """Run sentiment analysis on one entry and store the result."""
    c = get_components()
    try:
        # Ownership check before writing metadata
        c["store"].get_entry(entry_id, c["user_id"])
        result = c["pipeline"].analyze(entry_id)
    except JournalError as e:
        fail(str(e))

    console.print(
        f"Mood: {mood_label(str(result.mood))}  "
        f"Score: {result.score:+.3f}  Magnitude: {result.magnitude:g}"
    )
    if not sentences or not result.sentences:
        return

    table = Table(show_header=True, title="Sentences")
    table.add_column("Score", justify="right")
    table.add_column("Magnitude", justify="right")
    table.add_column("Sentence")
    for s in result.sentences:
        table.add_row(f"{s.score:+.2f}", f"{s.magnitude:g}", s.content.strip()[:80])
    console.print(table)


@click.command("analyze-all")
@click.option("--missing", is_flag=True, help="Only entries without sentiment")
@click.option("--all-users", is_flag=True, help="Backfill every user's entries")
def analyze_all(missing: bool, all_users: bool):
    """Backfill sentiment for stored entries."""
    c = get_components()
    user_id = None if all_users else c["user_id"]
    try:
        stats = c["pipeline"].analyze_all(user_id=user_id, only_missing=missing)
    except JournalError as e:
        fail(str(e))

    console.print(
        f"[green]Processed:[/] {stats['processed']}  "
        f"[red]Failed:[/] {stats['failed']}  "
        f"[dim]Skipped:[/] {stats['skipped']}"
    )
    log_run_summary()
