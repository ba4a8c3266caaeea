"""CLI command modules."""

from .analyze import analyze, analyze_all
from .categories import categories
from .entries import entries
from .stats import mood, stats
from .text import text

__all__ = [
    "entries",
    "analyze",
    "analyze_all",
    "stats",
    "mood",
    "text",
    "categories",
]
