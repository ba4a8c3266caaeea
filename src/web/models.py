"""Pydantic request/response schemas for the web API.

Content rules (non-empty title/content, lengths) are enforced by the store
so they surface as 400s with the journal error format.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

# --- Entries ---


class EntryCreate(BaseModel):
    title: str = Field(..., max_length=1000)
    content: str = Field(..., max_length=100_000)
    category_ids: list[str] = []


class EntryUpdate(BaseModel):
    title: Optional[str] = Field(None, max_length=1000)
    content: Optional[str] = Field(None, max_length=100_000)
    category_ids: Optional[list[str]] = None


class EntryMetadataOut(BaseModel):
    word_count: int
    reading_time: int
    sentiment_score: Optional[float] = None
    sentiment_magnitude: Optional[float] = None
    mood: Optional[str] = None


class EntryOut(BaseModel):
    id: str
    title: str
    content: str
    created_at: datetime
    updated_at: datetime
    category_ids: list[str] = []
    metadata: Optional[EntryMetadataOut] = None


# --- Sentiment ---


class SentenceOut(BaseModel):
    content: str
    score: float
    magnitude: float


class SentimentOut(BaseModel):
    score: Optional[float] = None
    magnitude: Optional[float] = None
    mood: Optional[str] = None
    sentences: list[SentenceOut] = []


# --- Categories ---


class CategoryCreate(BaseModel):
    name: str = Field(..., max_length=1000)
    color: Optional[str] = None
    description: Optional[str] = Field(None, max_length=1000)
    parent_id: Optional[str] = None


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=1000)
    color: Optional[str] = None
    description: Optional[str] = Field(None, max_length=1000)
    parent_id: Optional[str] = None


class CategoryOut(BaseModel):
    id: str
    name: str
    color: str
    description: Optional[str] = None
    parent_id: Optional[str] = None
    entry_count: int = 0


# --- Text analysis ---


class TextAnalysisRequest(BaseModel):
    content: str = Field(..., max_length=100_000)
