"""Per-user analytics over journal entries and their metadata.

Window-scoped: totals, sentiment summary, monthly activity, longest entry.
Full history: writing streak, time-of-day histogram and its period rollup,
writing trend, category distribution. Both halves are recomputed on every request.
"""

import calendar
import math
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional

import structlog

from observability import metrics
from shared_types import Mood, TimeRange

from .store import Entry, JournalStore

logger = structlog.get_logger()

# (name, first hour, last hour); night wraps past midnight
TIME_OF_DAY_PERIODS = (
    ("morning", 5, 11),
    ("afternoon", 12, 16),
    ("evening", 17, 20),
    ("night", 21, 4),
)


def _midnight(dt: datetime) -> datetime:
    return dt.replace(hour=0, minute=0, second=0, microsecond=0)


def subtract_months(dt: datetime, months: int) -> datetime:
    """Same day-of-month ``months`` earlier, clamped to the month's last day."""
    month_index = dt.year * 12 + (dt.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return dt.replace(year=year, month=month, day=day)


def window_bounds(
    time_range: TimeRange | str,
    now: datetime,
    earliest: datetime | None = None,
) -> tuple[datetime, datetime]:
    """``[start, now]`` with ``start`` truncated to its day boundary.

    ``all`` starts at the earliest entry's day (or today when there is none).
    """
    time_range = TimeRange(time_range)
    if time_range == TimeRange.DAY:
        start = now
    elif time_range == TimeRange.WEEK:
        start = now - timedelta(days=7)
    elif time_range == TimeRange.MONTH:
        start = subtract_months(now, 1)
    elif time_range == TimeRange.YEAR:
        start = subtract_months(now, 12)
    else:
        start = earliest if earliest is not None and earliest < now else now
    return _midnight(start), now


def writing_streak(entries: list[Entry]) -> int:
    """Consecutive-day run ending at the most recent entry.

    Adjacent entries (newest first) are compared by calendar day and the
    streak grows only when they are exactly one day apart. Two entries on
    the same day are a 0-day gap and end the streak.
    """
    if not entries:
        return 0
    ordered = sorted(entries, key=lambda e: e.created_at, reverse=True)
    streak = 1
    for newer, older in zip(ordered, ordered[1:]):
        if (newer.created_at.date() - older.created_at.date()).days == 1:
            streak += 1
        else:
            break
    return streak


@dataclass
class SentimentSummary:
    average: float
    distribution: dict[str, int]
    analyzed_entries: int

    def to_dict(self) -> dict:
        return {
            "average": self.average,
            "distribution": dict(self.distribution),
            "analyzed_entries": self.analyzed_entries,
        }


@dataclass
class MoodStatistics:
    counts: dict[str, int]
    average_sentiment: Optional[float]
    analyzed_entries: int = 0

    def to_dict(self) -> dict:
        return {
            "counts": dict(self.counts),
            "average_sentiment": self.average_sentiment,
            "analyzed_entries": self.analyzed_entries,
        }


@dataclass
class AnalyticsSummary:
    time_range: str
    start: datetime
    end: datetime
    total_entries: int = 0
    total_word_count: int = 0
    average_words_per_entry: float = 0.0
    average_words_per_day: float = 0.0
    longest_entry: Optional[dict] = None
    sentiment: Optional[SentimentSummary] = None
    writing_streak: int = 0
    category_distribution: list[dict] = field(default_factory=list)
    monthly_activity: list[dict] = field(default_factory=list)
    time_of_day: list[dict] = field(default_factory=list)
    time_of_day_periods: list[dict] = field(default_factory=list)
    writing_trend: list[dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "time_range": self.time_range,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "total_entries": self.total_entries,
            "total_word_count": self.total_word_count,
            "average_words_per_entry": self.average_words_per_entry,
            "average_words_per_day": self.average_words_per_day,
            "longest_entry": self.longest_entry,
            "sentiment": self.sentiment.to_dict() if self.sentiment else None,
            "writing_streak": self.writing_streak,
            "category_distribution": self.category_distribution,
            "monthly_activity": self.monthly_activity,
            "time_of_day": self.time_of_day,
            "time_of_day_periods": self.time_of_day_periods,
            "writing_trend": self.writing_trend,
        }


def sentiment_summary(entries: list[Entry]) -> Optional[SentimentSummary]:
    """Average and mood counts over analyzed entries only; None if none are."""
    analyzed = [e.metadata for e in entries if e.metadata is not None and e.metadata.analyzed]
    if not analyzed:
        return None
    return SentimentSummary(
        average=sum(m.sentiment_score for m in analyzed) / len(analyzed),
        distribution=dict(Counter(m.mood for m in analyzed)),
        analyzed_entries=len(analyzed),
    )


def monthly_activity(entries: list[Entry]) -> list[dict]:
    buckets: dict[str, dict] = {}
    for entry in entries:
        key = entry.created_at.strftime("%Y-%m")
        bucket = buckets.setdefault(key, {"month": key, "entries": 0, "word_count": 0})
        bucket["entries"] += 1
        bucket["word_count"] += entry.word_count
    return [buckets[k] for k in sorted(buckets)]


def time_of_day_histogram(entries: list[Entry]) -> list[dict]:
    hours = [{"hour": h, "entries": 0, "word_count": 0} for h in range(24)]
    for entry in entries:
        bucket = hours[entry.created_at.hour]
        bucket["entries"] += 1
        bucket["word_count"] += entry.word_count
    return hours


def _in_period(hour: int, first: int, last: int) -> bool:
    if first <= last:
        return first <= hour <= last
    return hour >= first or hour <= last


def time_of_day_periods(histogram: list[dict]) -> list[dict]:
    """Roll the 24-hour histogram up into morning, afternoon, evening and night."""
    periods = []
    for name, first, last in TIME_OF_DAY_PERIODS:
        hours = [h for h in histogram if _in_period(h["hour"], first, last)]
        periods.append(
            {
                "period": name,
                "start_hour": first,
                "end_hour": last,
                "entries": sum(h["entries"] for h in hours),
                "word_count": sum(h["word_count"] for h in hours),
            }
        )
    return periods


class AnalyticsAggregator:
    """Turns a user's entry history into summary statistics."""

    def __init__(self, store: JournalStore, frequency_months: int = 6):
        self.store = store
        self.frequency_months = frequency_months

    def window(
        self,
        user_id: str,
        time_range: TimeRange | str,
        now: datetime | None = None,
    ) -> tuple[datetime, datetime]:
        now = now or datetime.now()
        earliest = None
        if TimeRange(time_range) == TimeRange.ALL:
            oldest = self.store.list_entries(user_id, newest_first=False, limit=1)
            earliest = oldest[0].created_at if oldest else None
        return window_bounds(time_range, now, earliest)

    def summary(
        self,
        user_id: str,
        time_range: TimeRange | str = TimeRange.MONTH,
        category_id: str | None = None,
        now: datetime | None = None,
    ) -> AnalyticsSummary:
        """Windowed summary plus the full-history facts layered onto it.

        ``category_id`` narrows only the windowed entry set.
        """
        time_range = TimeRange(time_range)
        with metrics.timer("analytics.summary"):
            start, end = self.window(user_id, time_range, now)
            entries = self.store.list_entries(
                user_id, start=start, end=end, category_id=category_id
            )
            history = self.store.list_entries(user_id)
            categories = self.store.list_categories(user_id)

            total_words = sum(e.word_count for e in entries)
            days = max(1, math.ceil((end - start) / timedelta(days=1)))
            # max() keeps the first of equal counts, i.e. the newest
            longest = max(entries, key=lambda e: e.word_count, default=None)
            hours = time_of_day_histogram(history)

            result = AnalyticsSummary(
                time_range=str(time_range),
                start=start,
                end=end,
                total_entries=len(entries),
                total_word_count=total_words,
                average_words_per_entry=total_words / len(entries) if entries else 0.0,
                average_words_per_day=total_words / days,
                longest_entry=(
                    {
                        "id": longest.id,
                        "title": longest.title,
                        "word_count": longest.word_count,
                        "created_at": longest.created_at.isoformat(),
                    }
                    if longest is not None
                    else None
                ),
                sentiment=sentiment_summary(entries),
                writing_streak=writing_streak(history),
                category_distribution=[
                    {"id": c.id, "name": c.name, "color": c.color, "count": c.entry_count}
                    for c in categories
                ],
                monthly_activity=monthly_activity(entries),
                time_of_day=hours,
                time_of_day_periods=time_of_day_periods(hours),
                writing_trend=[
                    {"date": e.created_at.date().isoformat(), "word_count": e.word_count}
                    for e in sorted(history, key=lambda e: e.created_at)
                ],
            )

        metrics.counter("analytics.summary")
        logger.info(
            "analytics.summary",
            user_id=user_id,
            time_range=str(time_range),
            entries=result.total_entries,
            streak=result.writing_streak,
        )
        return result

    def writing_streak(self, user_id: str) -> int:
        return writing_streak(self.store.list_entries(user_id))

    def mood_insights(
        self,
        user_id: str,
        time_range: TimeRange | str = TimeRange.MONTH,
        now: datetime | None = None,
    ) -> dict:
        """Oldest-first mood timeline for the window plus mood statistics.

        Unanalyzed entries appear in the timeline with null sentiment and mood
        but are left out of the counts and the average.
        """
        start, end = self.window(user_id, time_range, now)
        entries = self.store.list_entries(user_id, start=start, end=end, newest_first=False)

        timeline = []
        for entry in entries:
            meta = entry.metadata if entry.metadata is not None and entry.metadata.analyzed else None
            timeline.append(
                {
                    "id": entry.id,
                    "title": entry.title,
                    "date": entry.created_at.isoformat(),
                    "sentiment": meta.sentiment_score if meta else None,
                    "magnitude": meta.sentiment_magnitude if meta else None,
                    "mood": meta.mood if meta else None,
                }
            )

        counts = {str(m): 0 for m in Mood}
        summary = sentiment_summary(entries)
        if summary is not None:
            counts.update(summary.distribution)
        statistics = MoodStatistics(
            counts=counts,
            average_sentiment=summary.average if summary else None,
            analyzed_entries=summary.analyzed_entries if summary else 0,
        )
        return {"timeline": timeline, "statistics": statistics.to_dict()}

    def entry_frequency(
        self,
        user_id: str,
        months: int | None = None,
        now: datetime | None = None,
    ) -> list[dict]:
        """Entries per calendar day over the last ``months`` months, zero-filled."""
        now = now or datetime.now()
        months = self.frequency_months if months is None else months
        start = _midnight(subtract_months(now, months))
        entries = self.store.list_entries(user_id, start=start, end=now, newest_first=False)

        per_day = Counter(e.created_at.date() for e in entries)
        first, last = start.date(), now.date()
        return [
            {"date": day.isoformat(), "count": per_day.get(day, 0)}
            for day in (first + timedelta(days=i) for i in range((last - first).days + 1))
        ]

    def writing_trends(
        self,
        user_id: str,
        months: int | None = None,
        now: datetime | None = None,
    ) -> list[dict]:
        """Per-month totals from ``months`` months ago through this month.

        Every calendar month in the range is present, oldest first, with zeros
        where nothing was written.
        """
        now = now or datetime.now()
        months = self.frequency_months if months is None else months
        start = _midnight(subtract_months(now, months))
        entries = self.store.list_entries(user_id, start=start, end=now, newest_first=False)

        buckets = {}
        for offset in range(months, -1, -1):
            key = subtract_months(now, offset).strftime("%Y-%m")
            buckets[key] = {"month": key, "entry_count": 0, "total_words": 0}
        for entry in entries:
            bucket = buckets.get(entry.created_at.strftime("%Y-%m"))
            if bucket is None:
                continue
            bucket["entry_count"] += 1
            bucket["total_words"] += entry.word_count

        for bucket in buckets.values():
            count = bucket["entry_count"]
            bucket["avg_words_per_entry"] = round(bucket["total_words"] / count) if count else 0
        return list(buckets.values())
