"""Journal entry routes: CRUD, sentiment and insights (per-user)."""

import asyncio
from datetime import datetime

import structlog
from fastapi import APIRouter, Depends, Query, Response, status

from journal import AnalysisQueue, JournalStore, SentimentPipeline
from journal.enrichment import LLMEnrichment
from journal.insights import analyze_text, suggest_categories
from journal.sentiment import SentimentScorer
from web.auth import get_current_user
from web.deps import get_config, get_enrichment, get_pipeline, get_queue, get_scorer, get_store
from web.models import EntryCreate, EntryOut, EntryUpdate, SentimentOut

logger = structlog.get_logger()

router = APIRouter(prefix="/api/entries", tags=["entries"])


@router.get("", response_model=list[EntryOut])
def list_entries(
    start: datetime | None = None,
    end: datetime | None = None,
    category_id: str | None = None,
    limit: int = Query(50, ge=1, le=500),
    user: dict = Depends(get_current_user),
    store: JournalStore = Depends(get_store),
):
    entries = store.list_entries(
        user["id"], start=start, end=end, category_id=category_id, limit=limit
    )
    return [e.to_dict() for e in entries]


@router.post("", response_model=EntryOut, status_code=status.HTTP_201_CREATED)
def create_entry(
    body: EntryCreate,
    user: dict = Depends(get_current_user),
    store: JournalStore = Depends(get_store),
    queue: AnalysisQueue = Depends(get_queue),
):
    entry = store.create_entry(user["id"], body.title, body.content, category_ids=body.category_ids)
    queue.submit(entry.id)
    return entry.to_dict()


@router.get("/{entry_id}", response_model=EntryOut)
def get_entry(
    entry_id: str,
    user: dict = Depends(get_current_user),
    store: JournalStore = Depends(get_store),
):
    return store.get_entry(entry_id, user["id"]).to_dict()


@router.put("/{entry_id}", response_model=EntryOut)
def update_entry(
    entry_id: str,
    body: EntryUpdate,
    user: dict = Depends(get_current_user),
    store: JournalStore = Depends(get_store),
    queue: AnalysisQueue = Depends(get_queue),
):
    entry = store.update_entry(
        entry_id,
        user["id"],
        title=body.title,
        content=body.content,
        category_ids=body.category_ids,
    )
    if body.content is not None:
        queue.submit(entry.id)
    return entry.to_dict()


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_entry(
    entry_id: str,
    user: dict = Depends(get_current_user),
    store: JournalStore = Depends(get_store),
):
    store.delete_entry(entry_id, user["id"])
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{entry_id}/sentiment", response_model=SentimentOut)
async def run_sentiment(
    entry_id: str,
    user: dict = Depends(get_current_user),
    store: JournalStore = Depends(get_store),
    pipeline: SentimentPipeline = Depends(get_pipeline),
):
    """Analyze now and store the result; returns the per-sentence breakdown too."""
    await asyncio.to_thread(store.get_entry, entry_id, user["id"])
    result = await asyncio.to_thread(pipeline.analyze, entry_id)
    return result.to_dict()


@router.get("/{entry_id}/sentiment", response_model=SentimentOut)
def get_sentiment(
    entry_id: str,
    user: dict = Depends(get_current_user),
    store: JournalStore = Depends(get_store),
    scorer: SentimentScorer = Depends(get_scorer),
):
    """Stored entry sentiment plus a freshly computed sentence breakdown.

    Entry-level fields are null until the entry has been analyzed.
    """
    entry = store.get_entry(entry_id, user["id"])
    meta = entry.metadata
    return {
        "score": meta.sentiment_score if meta else None,
        "magnitude": meta.sentiment_magnitude if meta else None,
        "mood": meta.mood if meta else None,
        "sentences": [
            {"content": s.content, "score": s.score, "magnitude": s.magnitude}
            for s in scorer.analyze_sentences(entry.content)
        ],
    }


@router.get("/{entry_id}/insights")
def get_insights(
    entry_id: str,
    user: dict = Depends(get_current_user),
    store: JournalStore = Depends(get_store),
    scorer: SentimentScorer = Depends(get_scorer),
    enrichment: LLMEnrichment | None = Depends(get_enrichment),
):
    """Style, themes, summary and patterns for a stored entry."""
    entry = store.get_entry(entry_id, user["id"])
    analysis = get_config().analysis
    result = analyze_text(
        entry.content,
        enrichment=enrichment,
        theme_count=analysis.theme_count,
        summary_sentences=analysis.summary_sentences,
        scorer=scorer,
    )
    result["suggested_categories"] = suggest_categories(
        entry.content, store.list_categories(user["id"]), analysis.theme_count
    )
    return result
