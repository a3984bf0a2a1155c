"""Sentence check and learning endpoints."""

from fastapi import APIRouter, HTTPException, Request

from src.engine.decision import InvalidInput
from src.schemas import CheckRequest, CheckResponse, LearnRequest
from src.utils.logging import log, get_logger

MODULE = "grammar"
logger = get_logger()

router = APIRouter()


@router.post("/check", response_model=CheckResponse)
async def check_grammar(body: CheckRequest, request: Request):
    """Pick the correct sentence out of the candidates.

    Always answers: from the learned cache, from the oracle, or with a
    best guess when the oracle is down.
    """
    engine = request.app.state.engine
    try:
        decision = await engine.decide(body.sentences)
    except InvalidInput as e:
        log.warning(logger, MODULE, "invalid_input", "Rejected check request",
                    error=str(e))
        raise HTTPException(status_code=400, detail=str(e))

    return CheckResponse(
        correct_sentence=decision.correct_sentence,
        correct_index=decision.correct_index,
        sentence_scores=decision.sentence_scores,
        source=decision.source,
    )


@router.post("/learn", status_code=202)
async def learn_correction(body: LearnRequest, request: Request):
    """Teach the cache a known-correct phrasing (best-effort)."""
    store = request.app.state.store
    await store.upsert_observation(
        body.original, body.corrected, body.alternatives, body.confidence)
    return {"status": "accepted"}
