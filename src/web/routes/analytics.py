"""Analytics routes: summary, writing trends, mood insights, entry frequency."""

import asyncio

from fastapi import APIRouter, Depends, Query

from journal import AnalyticsAggregator
from shared_types import TimeRange
from web.auth import get_current_user
from web.deps import get_aggregator, get_config

router = APIRouter(prefix="/api/analytics", tags=["analytics"])


@router.get("")
async def get_summary(
    time_range: TimeRange | None = None,
    category_id: str | None = None,
    months: int | None = Query(None, ge=1, le=24),
    user: dict = Depends(get_current_user),
    aggregator: AnalyticsAggregator = Depends(get_aggregator),
):
    """Windowed writing summary with all-time streak and patterns.

    ``months`` sizes the monthly writing trends series.
    """
    time_range = time_range or get_config().analytics.default_time_range
    summary = await asyncio.to_thread(
        aggregator.summary, user["id"], time_range, category_id
    )
    trends = await asyncio.to_thread(aggregator.writing_trends, user["id"], months)
    return {**summary.to_dict(), "writing_trends": trends}


@router.get("/mood")
async def get_mood(
    time_range: TimeRange | None = None,
    user: dict = Depends(get_current_user),
    aggregator: AnalyticsAggregator = Depends(get_aggregator),
):
    time_range = time_range or get_config().analytics.default_time_range
    return await asyncio.to_thread(aggregator.mood_insights, user["id"], time_range)


@router.get("/frequency")
async def get_frequency(
    months: int | None = Query(None, ge=1, le=24),
    user: dict = Depends(get_current_user),
    aggregator: AnalyticsAggregator = Depends(get_aggregator),
):
    """Entries per day, zero-filled."""
    return await asyncio.to_thread(aggregator.entry_frequency, user["id"], months)
