from .analytics import AnalyticsAggregator, AnalyticsSummary
from .errors import (
    DatabaseError,
    DuplicateError,
    JournalError,
    NotFoundError,
    ServiceUnavailableError,
    ValidationError,
)
from .pipeline import AnalysisQueue, SentimentPipeline
from .sentiment import SentimentScorer, analyze_sentiment
from .store import Category, Entry, EntryMetadata, JournalStore

__all__ = [
    "JournalStore",
    "Entry",
    "EntryMetadata",
    "Category",
    "SentimentScorer",
    "analyze_sentiment",
    "SentimentPipeline",
    "AnalysisQueue",
    "AnalyticsAggregator",
    "AnalyticsSummary",
    "JournalError",
    "NotFoundError",
    "ValidationError",
    "DuplicateError",
    "ServiceUnavailableError",
    "DatabaseError",
]
