"""Admin endpoints for inspecting and seeding the learned cache."""

from fastapi import APIRouter, HTTPException, Query, Request, Response

from src.learning.repository import StoreUnavailable
from src.learning.seed import InvalidPatternIndex
from src.llm.invoker import LLMInvocationError
from src.schemas import (
    CacheEntryRequest,
    CacheEntryResponse,
    CacheStatsResponse,
    InspectResponse,
    SeedResponse,
)
from src.utils.logging import log, get_logger

MODULE = "admin"
logger = get_logger()

router = APIRouter()


def _unavailable(e: StoreUnavailable) -> HTTPException:
    log.error(logger, MODULE, "store_failed", "Store unavailable for admin request",
              error=str(e))
    return HTTPException(status_code=503, detail="Learned correction store unavailable")


@router.get("/cache", response_model=CacheStatsResponse)
async def cache_stats(request: Request):
    """All learned records, most used first."""
    try:
        return await request.app.state.store.stats()
    except StoreUnavailable as e:
        raise _unavailable(e)


@router.get("/cache/inspect", response_model=InspectResponse)
async def inspect_cache(request: Request, sentence: str = Query(..., min_length=1)):
    """Show which record a sentence would hit, if any."""
    try:
        return await request.app.state.store.inspect(sentence)
    except StoreUnavailable as e:
        raise _unavailable(e)


@router.post("/cache", response_model=CacheEntryResponse, status_code=201)
async def add_cache_entry(body: CacheEntryRequest, request: Request):
    """Add (or replace) a known-correct sentence."""
    try:
        record = await request.app.state.store.add_entry(
            body.sentence, use_count=body.use_count, alternatives=body.alternatives)
    except StoreUnavailable as e:
        raise _unavailable(e)
    return record.to_dict()


@router.delete("/cache/{record_id}", status_code=204)
async def remove_cache_entry(record_id: int, request: Request):
    """Delete a learned record."""
    try:
        removed = await request.app.state.store.remove_entry(record_id)
    except StoreUnavailable as e:
        raise _unavailable(e)
    if not removed:
        raise HTTPException(status_code=404, detail="Cache entry not found")
    return Response(status_code=204)


@router.post("/seed-patterns/{pattern_index}", response_model=SeedResponse)
async def seed_pattern_batch(pattern_index: int, request: Request):
    """Generate a batch of example sentences for a pattern (1-5) and learn them."""
    try:
        return await request.app.state.seeder.generate_batch_examples(pattern_index)
    except InvalidPatternIndex as e:
        raise HTTPException(status_code=400, detail=str(e))
    except LLMInvocationError as e:
        log.error(logger, MODULE, "seed_failed", "Seed generation failed",
                  error=str(e), pattern_index=pattern_index, attempts=e.attempts)
        raise HTTPException(status_code=502, detail="Example generation failed")
