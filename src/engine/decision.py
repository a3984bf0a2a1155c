"""Decision engine: pick the correct sentence from a candidate list.

One request walks this state machine:

  1. CACHE     fuzzy_find(candidates[0]). On a hit, the first candidate
               within CONFIRMATION_THRESHOLD of the record's corrected text
               is the answer. The oracle is never called.
  2. ORACLE    oracle.classify(candidates) raced against the timeout.
  3. SUCCESS   Validate the index (bad index → 0), answer, and learn the
               choice in the background without waiting for it.
  4. FALLBACK  Oracle failed or timed out → store.best_guess(candidates).

decide() never raises for oracle or store trouble, the worst case is the
first candidate. The only error a caller can get is InvalidInput.

Two thresholds are in play:
  0.8 (store)  "we've seen a sentence set like this before"
  0.9 (here)   "and THIS candidate is the phrasing we know is correct"

Scores are binary: 100 for the chosen index, 0 for everything else.
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Literal, Optional, Sequence

from src.learning.similarity import similarity
from src.learning.store import LearnedCorrectionStore
from src.llm.oracle import Oracle, OracleError
from src.utils.logging import log, get_logger

MODULE = "engine"
logger = get_logger()

CONFIRMATION_THRESHOLD = 0.9
ORACLE_TIMEOUT_SECONDS = 8.0
CHOSEN_SCORE = 100.0

Source = Literal["cache", "oracle", "fallback"]

__all__ = [
    "Decision",
    "DecisionEngine",
    "InvalidInput",
    "OracleError",
    "OracleTimeout",
    "validate_index",
]


class InvalidInput(ValueError):
    """The caller passed something decide() can't work with."""


class OracleTimeout(Exception):
    """The oracle didn't answer before the deadline."""


@dataclass
class Decision:
    correct_sentence: str
    correct_index: int
    sentence_scores: list[float]
    source: Source

    @classmethod
    def pick(cls, candidates: Sequence[str], index: int, source: Source) -> "Decision":
        return cls(
            correct_sentence=candidates[index],
            correct_index=index,
            sentence_scores=[CHOSEN_SCORE if i == index else 0.0 for i in range(len(candidates))],
            source=source,
        )


def validate_index(raw: Any, count: int) -> Optional[int]:
    """Return ``raw`` as a usable index into ``count`` candidates, or None.

    Accepts ints, integer-valued floats, and strings holding an integer.
    """
    if isinstance(raw, bool):
        return None
    if isinstance(raw, float):
        if not raw.is_integer():
            return None
        raw = int(raw)
    elif isinstance(raw, str):
        try:
            raw = int(raw.strip())
        except ValueError:
            return None
    if not isinstance(raw, int):
        return None
    return raw if 0 <= raw < count else None


def _discard_late_result(task: asyncio.Task) -> None:
    """Consume an oracle result nobody is waiting for anymore."""
    if task.cancelled():
        return
    exc = task.exception()
    log.debug(logger, MODULE, "oracle_late_result", "Discarded late oracle result",
              error=str(exc) if exc else None,
              result=None if exc else task.result())


class DecisionEngine:
    """Cache-first, oracle-second, best-guess-last sentence picker."""

    def __init__(
        self,
        store: LearnedCorrectionStore,
        oracle: Oracle,
        timeout: float = ORACLE_TIMEOUT_SECONDS,
    ):
        self._store = store
        self._oracle = oracle
        self._timeout = timeout
        # Strong references so pending tasks aren't garbage collected
        self._background: set[asyncio.Task] = set()
        self._oracle_calls: set[asyncio.Task] = set()

    @property
    def pending_learning(self) -> int:
        return len(self._background)

    async def decide(self, candidates: Sequence[str]) -> Decision:
        """Pick the most likely correct sentence.

        Raises:
            InvalidInput: If ``candidates`` is empty or not a list of strings.
        """
        candidates = self._check_input(candidates)
        _t0 = time.monotonic()
        log.debug(logger, MODULE, "decide_start", "Deciding between candidates",
                  candidates=len(candidates))

        # 1. CACHE
        record = await self._store.fuzzy_find(candidates[0])
        if record is not None:
            for index, candidate in enumerate(candidates):
                if similarity(candidate, record.corrected_text) >= CONFIRMATION_THRESHOLD:
                    return self._done(Decision.pick(candidates, index, "cache"), _t0,
                                      record_id=record.id)
            log.debug(logger, MODULE, "cache_unconfirmed",
                      "Record matched but no candidate confirmed it",
                      record_id=record.id)

        # 2. ORACLE
        try:
            answer = await self._race_oracle(candidates)
        except Exception as e:
            # 4. FALLBACK: timeout and failure are handled the same way
            log.warning(logger, MODULE, "oracle_fallback",
                        "Oracle unavailable, using best guess",
                        error=str(e), error_type=type(e).__name__)
            guess = await self._store.best_guess(candidates)
            return self._done(Decision.pick(candidates, guess.index, "fallback"), _t0)

        # 3. SUCCESS
        index = validate_index(answer, len(candidates))
        if index is None:
            log.warning(logger, MODULE, "invalid_index",
                        "Oracle returned an unusable index, defaulting to 0",
                        answer=str(answer)[:40], candidates=len(candidates))
            index = 0

        self._learn_in_background(candidates, index)
        return self._done(Decision.pick(candidates, index, "oracle"), _t0)

    async def drain(self) -> None:
        """Wait for outstanding background learning (shutdown, tests)."""
        if self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    # ------------------------------------------------------------------

    @staticmethod
    def _check_input(candidates: Sequence[str]) -> list[str]:
        if isinstance(candidates, str) or not candidates:
            raise InvalidInput("At least one candidate sentence is required")
        candidates = list(candidates)
        if not all(isinstance(c, str) for c in candidates):
            raise InvalidInput("Candidate sentences must be strings")
        return candidates

    async def _race_oracle(self, candidates: list[str]) -> Any:
        """Run the oracle against the deadline; first to finish wins.

        The oracle call is never cancelled. If the deadline wins, the call
        keeps running and its result is drained and dropped when it lands.
        """
        task = asyncio.ensure_future(self._oracle.classify(list(candidates)))
        self._oracle_calls.add(task)
        task.add_done_callback(self._oracle_calls.discard)
        try:
            done, _ = await asyncio.wait({task}, timeout=self._timeout)
        finally:
            if not task.done():
                task.add_done_callback(_discard_late_result)

        if task not in done:
            log.warning(logger, MODULE, "oracle_timeout", "Oracle did not answer in time",
                        timeout_s=self._timeout)
            raise OracleTimeout(f"Oracle did not answer within {self._timeout}s")
        return task.result()

    def _learn_in_background(self, candidates: list[str], index: int) -> None:
        chosen = candidates[index]
        alternatives = [c for i, c in enumerate(candidates) if i != index]
        task = asyncio.create_task(
            self._store.upsert_observation(chosen, chosen, alternatives))
        self._background.add(task)
        task.add_done_callback(self._on_learn_done)

    def _on_learn_done(self, task: asyncio.Task) -> None:
        self._background.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            log.error(logger, MODULE, "learn_failed", "Background learning failed",
                      error=str(exc), error_type=type(exc).__name__)

    @staticmethod
    def _done(decision: Decision, started: float, **fields) -> Decision:
        log.info(logger, MODULE, "decide_done", "Decision made",
                 source=decision.source, index=decision.correct_index,
                 latency_ms=int((time.monotonic() - started) * 1000), **fields)
        return decision
