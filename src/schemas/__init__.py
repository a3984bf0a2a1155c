"""Pydantic schemas for structured data validation.

This package contains:
- api.py: Request/response schemas for the REST API

The seeding output schema (SeedBatch) lives next to the seeder in
src/learning/seed.py.
"""

from src.schemas.api import (
    CheckRequest,
    CheckResponse,
    LearnRequest,
    CacheEntryRequest,
    CacheEntryResponse,
    CacheStatsResponse,
    InspectResponse,
    SeedResponse,
)

__all__ = [
    "CheckRequest",
    "CheckResponse",
    "LearnRequest",
    "CacheEntryRequest",
    "CacheEntryResponse",
    "CacheStatsResponse",
    "InspectResponse",
    "SeedResponse",
]
