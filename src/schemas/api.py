"""Pydantic schemas for API requests/responses."""

from typing import Literal, Optional
from pydantic import BaseModel, Field, field_validator
from datetime import datetime


class CheckRequest(BaseModel):
    """Request body for picking the correct sentence."""
    sentences: list[str] = Field(..., min_length=1, description="Candidate sentences, in order")

    @field_validator("sentences")
    @classmethod
    def sentences_not_blank(cls, v: list[str]) -> list[str]:
        if not any(s.strip() for s in v):
            raise ValueError("At least one non-blank sentence is required")
        return v


class CheckResponse(BaseModel):
    """Which candidate was picked and where the answer came from."""
    correct_sentence: str
    correct_index: int
    sentence_scores: list[float]
    source: Literal["cache", "oracle", "fallback"]


class LearnRequest(BaseModel):
    """Seeding operation: teach the cache a known-correct phrasing."""
    original: str = Field(..., min_length=1)
    corrected: str = Field(..., min_length=1)
    alternatives: list[str] = Field(default_factory=list)
    confidence: float = Field(1.0, ge=0.0, le=1.0)


class CacheEntryRequest(BaseModel):
    """Manually add a known-correct sentence."""
    sentence: str = Field(..., min_length=1)
    use_count: int = Field(1, ge=1)
    alternatives: list[str] = Field(default_factory=list)

    @field_validator("sentence")
    @classmethod
    def sentence_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Sentence must not be empty")
        return v.strip()


class CacheEntryResponse(BaseModel):
    """One learned record."""
    id: Optional[int] = None
    original_text: str
    corrected_text: str
    confidence: float
    use_count: int
    alternative_sentences: list[str] = []
    created_at: datetime


class CacheStatsResponse(BaseModel):
    total_records: int
    entries: list[CacheEntryResponse]


class InspectResponse(BaseModel):
    exists: bool
    entry: Optional[CacheEntryResponse] = None
    similarity: Optional[float] = None


class SeedResponse(BaseModel):
    success: bool
    pattern_example: str
    generated_count: int
    sentences: list[str]
