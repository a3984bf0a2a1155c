"""LLM-backed grammar oracle.

The oracle is the expensive, rate-limited, sometimes slow or failing
classifier the decision engine tries to avoid calling. Anything with an
``async classify(candidates)`` method can play the role; this module
provides the one backed by a chat model.

The oracle does NOT validate the index it returns. A non-numeric or
out-of-range answer is passed through so the engine can substitute its
default. Only a failed call or an empty response is an OracleError.
"""

from typing import Optional, Protocol, Sequence, Union

from langchain_core.language_models import BaseChatModel

from src.llm.client import get_llm
from src.llm.invoker import invoke_llm_raw
from src.llm.parser import extract_index
from src.prompts.grammar import CLASSIFY_SYSTEM, CLASSIFY_USER, format_candidates
from src.utils.logging import log, get_logger

MODULE = "oracle"
logger = get_logger()

# HTTP-level timeout. Longer than the engine's race so a call the engine
# stopped waiting for still finishes (or fails) and frees its connection.
ORACLE_HTTP_TIMEOUT = 10.0


class OracleError(Exception):
    """The oracle call failed or returned an unusable payload."""


class Oracle(Protocol):
    async def classify(self, candidates: Sequence[str]) -> Union[int, str]:
        ...


class LLMOracle:
    """Ask a chat model which candidate sentence is correct."""

    def __init__(self, llm: Optional[BaseChatModel] = None, timeout: float = ORACLE_HTTP_TIMEOUT):
        self._llm = llm if llm is not None else get_llm(timeout=timeout)

    async def classify(self, candidates: Sequence[str]) -> Union[int, str]:
        """Return the model's pick (usually an int, raw text if it isn't one).

        Raises:
            OracleError: If the model call fails or the response is empty.
        """
        try:
            raw, latency_ms = await invoke_llm_raw(
                self._llm,
                CLASSIFY_SYSTEM,
                CLASSIFY_USER.format(numbered_candidates=format_candidates(list(candidates))),
                activity_name="classify",
            )
        except Exception as e:
            log.warning(logger, MODULE, "classify_failed", "Oracle call failed",
                        error=str(e), error_type=type(e).__name__)
            raise OracleError(f"Oracle call failed: {e}") from e

        if not raw:
            log.warning(logger, MODULE, "classify_failed", "Oracle returned an empty response")
            raise OracleError("Oracle returned an empty response")

        answer = extract_index(raw)
        log.info(logger, MODULE, "classify_done", "Oracle answered",
                 answer=answer, candidates=len(candidates), latency_ms=latency_ms)
        return answer
