"""Ad-hoc text insights command."""

import click
from rich.console import Console

from cli.utils import fail, get_components
from journal.errors import JournalError
from journal.insights import analyze_text

console = Console()


@click.command()
@click.argument("content", required=False)
@click.option("-f", "--file", "path", type=click.Path(exists=True, dir_okay=False), help="Read text from file")
def text(content: str | None, path: str | None):
    """Analyze text without saving it: style, themes, summary, mood."""
    if path:
        with open(path, encoding="utf-8") as f:
            content = f.read()
    if not content:
        fail("Provide text or --file")

    c = get_components(with_enrichment=True)
    analysis = c["config_model"].analysis
    try:
        result = analyze_text(
            content,
            enrichment=c["enrichment"],
            theme_count=analysis.theme_count,
            summary_sentences=analysis.summary_sentences,
            scorer=c["scorer"],
        )
    except JournalError as e:
        fail(str(e))

    style = result["writing_style"]
    sentiment = result["sentiment"]
    console.print(f"[bold]Mood:[/] {sentiment['mood']} ({sentiment['score']:+.2f})")
    console.print(
        f"[bold]Readability:[/] {style['readability']}  "
        f"[bold]Complexity:[/] {style['complexity']}  "
        f"[bold]Avg sentence:[/] {style['average_sentence_length']} words"
    )
    console.print(f"[bold]Themes:[/] {', '.join(result['themes']) or '-'}")
    console.print(f"[bold]Summary:[/] {result['summary']}")
    patterns = result["patterns"]
    console.print(f"[bold]Emotion:[/] {patterns['emotion']}  [bold]Time of day:[/] {patterns['time_of_day']}")
    for hint in style["suggestions"]:
        console.print(f"  [yellow]•[/] {hint}")
    for fix in result["suggestions"]:
        console.print(f"  [cyan]✎[/] {fix['original']} -> {fix['replacement']}")
    if result["categories"]:
        console.print(f"[bold]Labels:[/] {', '.join(result['categories'])}")
