"""Category CLI commands."""

import click
from rich.console import Console
from rich.tree import Tree

from cli.utils import fail, get_components
from journal.errors import JournalError

console = Console()


@click.group()
def categories():
    """Manage categories."""
    pass


@categories.command("add")
@click.argument("name")
@click.option("--color", help="Hex color, e.g. #3B82F6")
@click.option("--description", help="Short description")
@click.option("--parent", "parent_id", help="Parent category id")
def categories_add(name: str, color: str | None, description: str | None, parent_id: str | None):
    """Create a category."""
    c = get_components()
    try:
        category = c["store"].create_category(
            c["user_id"], name, color=color, description=description, parent_id=parent_id
        )
    except JournalError as e:
        fail(str(e))
    console.print(f"[green]Created:[/] {category.name} ({category.id})")


@categories.command("list")
def categories_list():
    """Show categories as a tree with entry counts."""
    c = get_components()
    try:
        hierarchy = c["store"].category_hierarchy(c["user_id"])
    except JournalError as e:
        fail(str(e))

    if not hierarchy:
        console.print("[yellow]No categories yet.[/]")
        return

    tree = Tree("[bold]Categories[/]")

    def _add(node: Tree, items: list[dict]):
        for item in items:
            branch = node.add(
                f"[{item['color']}]●[/] {item['name']} [dim]({item['entry_count']}) {item['id'][:8]}[/]"
            )
            _add(branch, item["children"])

    _add(tree, hierarchy)
    console.print(tree)
