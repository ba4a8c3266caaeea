"""Analytics CLI commands."""

import click
from rich.console import Console
from rich.table import Table

from cli.utils import fail, get_components, mood_label
from journal.errors import JournalError
from shared_types import TimeRange

console = Console()

RANGE_CHOICE = click.Choice([str(r) for r in TimeRange])


@click.command()
@click.option("-r", "--range", "time_range", type=RANGE_CHOICE, help="Time window")
@click.option("--category", "category_id", help="Limit window stats to a category id")
def stats(time_range: str | None, category_id: str | None):
    """Show writing statistics."""
    c = get_components()
    time_range = time_range or str(c["config_model"].analytics.default_time_range)
    try:
        summary = c["aggregator"].summary(c["user_id"], time_range, category_id=category_id)
    except JournalError as e:
        fail(str(e))

    console.print(f"[bold]Writing stats[/] - {time_range} (since {summary.start:%Y-%m-%d})\n")
    console.print(f"Entries: {summary.total_entries}")
    console.print(f"Words: {summary.total_word_count}")
    console.print(f"Avg words/entry: {summary.average_words_per_entry:.1f}")
    console.print(f"Avg words/day: {summary.average_words_per_day:.1f}")
    console.print(f"Current streak: {summary.writing_streak} day(s)")
    if summary.longest_entry:
        longest = summary.longest_entry
        console.print(f"Longest entry: {longest['title']} ({longest['word_count']} words)")
    busiest = max(summary.time_of_day_periods, key=lambda p: p["entries"], default=None)
    if busiest and busiest["entries"]:
        console.print(f"Most entries written in the {busiest['period']}")

    if summary.sentiment is None:
        console.print("\n[dim]No analyzed entries in this window.[/]")
    else:
        console.print(f"\nAverage sentiment: {summary.sentiment.average:+.2f}")
        for mood_name, count in sorted(summary.sentiment.distribution.items()):
            console.print(f"  {mood_label(mood_name)}: {count}")

    if summary.monthly_activity:
        table = Table(show_header=True, title="Monthly activity")
        table.add_column("Month", style="cyan")
        table.add_column("Entries", justify="right")
        table.add_column("Words", justify="right")
        for month in summary.monthly_activity:
            table.add_row(month["month"], str(month["entries"]), str(month["word_count"]))
        console.print(table)


@click.command()
@click.option("-r", "--range", "time_range", type=RANGE_CHOICE, help="Time window")
def mood(time_range: str | None):
    """Show mood timeline and counts."""
    c = get_components()
    time_range = time_range or str(c["config_model"].analytics.default_time_range)
    try:
        insights = c["aggregator"].mood_insights(c["user_id"], time_range)
    except JournalError as e:
        fail(str(e))

    timeline = insights["timeline"]
    if not timeline:
        console.print("[yellow]No entries found. Add journal entries to track mood.[/]")
        return

    table = Table(show_header=True, title=f"Mood - {time_range}")
    table.add_column("Date", style="dim")
    table.add_column("Mood")
    table.add_column("Score", justify="right")
    table.add_column("Entry")
    for point in timeline:
        score = f"{point['sentiment']:+.2f}" if point["sentiment"] is not None else "-"
        table.add_row(point["date"][:10], mood_label(point["mood"]), score, point["title"][:35])
    console.print(table)

    statistics = insights["statistics"]
    avg = statistics["average_sentiment"]
    avg_str = f"{avg:+.2f}" if avg is not None else "-"
    console.print(
        f"\n[bold]Average:[/] {avg_str}  |  Analyzed: {statistics['analyzed_entries']}"
        f"/{len(timeline)}"
    )
