"""Journal entry CLI commands."""

import click
import structlog
from rich.console import Console
from rich.table import Table

from cli.utils import fail, get_components, mood_label
from journal.errors import JournalError

console = Console()
logger = structlog.get_logger()


@click.group()
def entries():
    """Manage journal entries."""
    pass


@entries.command("add")
@click.option("--title", required=True, help="Entry title")
@click.option("-c", "--category", "category_ids", multiple=True, help="Category id (repeatable)")
@click.argument("content", required=False)
def entries_add(title: str, category_ids: tuple[str, ...], content: str | None):
    """Add a journal entry and score it. Opens editor if no content provided."""
    c = get_components()

    if not content:
        content = click.edit("\n")
        if not content or not content.strip():
            console.print("[yellow]No content provided, cancelled.[/]")
            return

    try:
        entry = c["store"].create_entry(
            c["user_id"], title, content, category_ids=list(category_ids)
        )
    except JournalError as e:
        fail(str(e))
    console.print(f"[green]Created:[/] {entry.id}")

    # Short-lived process: score inline rather than through the background queue
    try:
        result = c["pipeline"].analyze(entry.id)
        console.print(f"Mood: {mood_label(str(result.mood))}  ({result.score:+.2f})")
    except JournalError as e:
        console.print(f"[yellow]Sentiment analysis skipped:[/] {e}")


@entries.command("list")
@click.option("-n", "--limit", default=10, help="Max entries to show")
@click.option("--category", "category_id", help="Filter by category id")
def entries_list(limit: int, category_id: str | None):
    """List recent journal entries."""
    c = get_components()
    try:
        rows = c["store"].list_entries(c["user_id"], category_id=category_id, limit=limit)
    except JournalError as e:
        fail(str(e))

    if not rows:
        console.print("[yellow]No entries found.[/]")
        return

    table = Table(show_header=True)
    table.add_column("Date", style="cyan")
    table.add_column("Id", style="dim")
    table.add_column("Title")
    table.add_column("Words", justify="right")
    table.add_column("Mood")

    for entry in rows:
        meta = entry.metadata
        table.add_row(
            entry.created_at.strftime("%Y-%m-%d %H:%M"),
            entry.id[:8],
            entry.title[:40],
            str(entry.word_count),
            mood_label(meta.mood if meta else None),
        )
    console.print(table)


@entries.command("show")
@click.argument("entry_id")
def entries_show(entry_id: str):
    """Show one entry with its metadata."""
    c = get_components()
    try:
        entry = c["store"].get_entry(entry_id, c["user_id"])
    except JournalError as e:
        fail(str(e))

    console.print(f"[bold]{entry.title}[/]  [dim]{entry.created_at:%Y-%m-%d %H:%M}[/]")
    console.print(entry.content)
    meta = entry.metadata
    if meta:
        score = f"{meta.sentiment_score:+.2f}" if meta.sentiment_score is not None else "-"
        console.print(
            f"\n[dim]{meta.word_count} words, {meta.reading_time} min read[/]  "
            f"Mood: {mood_label(meta.mood)}  Score: {score}"
        )


@entries.command("delete")
@click.argument("entry_id")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
def entries_delete(entry_id: str, yes: bool):
    """Delete a journal entry."""
    c = get_components()
    if not yes and not click.confirm(f"Delete entry {entry_id}?"):
        console.print("[yellow]Cancelled.[/]")
        return
    try:
        c["store"].delete_entry(entry_id, c["user_id"])
    except JournalError as e:
        fail(str(e))
    console.print(f"[green]Deleted:[/] {entry_id}")
