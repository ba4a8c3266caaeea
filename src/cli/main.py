"""reflect: journal sentiment and analytics CLI."""

import sys
from pathlib import Path

import click

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from cli.commands import analyze, analyze_all, categories, entries, mood, stats, text
from cli.config import load_config_model
from cli.logging_config import setup_logging
from cli.utils import fail


@click.group()
@click.version_option(version="0.1.0")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option("--json-logs", is_flag=True, help="Emit JSON log lines")
def cli(verbose: bool, json_logs: bool):
    """reflect - Journal sentiment and analytics."""
    try:
        config = load_config_model()
    except ValueError as e:
        fail(str(e))
    setup_logging(
        json_mode=json_logs or config.logging.json_mode,
        level="DEBUG" if verbose else config.logging.level,
        log_file=config.paths.log_file,
    )


for command in (entries, analyze, analyze_all, stats, mood, text, categories):
    cli.add_command(command)


if __name__ == "__main__":
    cli()
