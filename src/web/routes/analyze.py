"""Ad-hoc text analysis route (nothing is stored)."""

from fastapi import APIRouter, Depends

from journal.enrichment import LLMEnrichment
from journal.insights import analyze_text
from journal.sentiment import SentimentScorer
from web.auth import get_current_user
from web.deps import get_config, get_enrichment, get_scorer
from web.models import TextAnalysisRequest

router = APIRouter(prefix="/api/analyze", tags=["analyze"])


@router.post("/text")
def analyze(
    body: TextAnalysisRequest,
    user: dict = Depends(get_current_user),
    scorer: SentimentScorer = Depends(get_scorer),
    enrichment: LLMEnrichment | None = Depends(get_enrichment),
):
    """Writing style, themes, summary, mood and optional LLM suggestions."""
    analysis = get_config().analysis
    return analyze_text(
        body.content,
        enrichment=enrichment,
        theme_count=analysis.theme_count,
        summary_sentences=analysis.summary_sentences,
        scorer=scorer,
    )
