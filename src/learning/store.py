"""Learned-correction store.

Holds every learned record in memory (mirrored from the repository) and
answers the two read questions the decision path asks:

  fuzzy_find(text)        → "have we seen something like this before?"
  best_guess(candidates)  → "the oracle is down, which candidate looks most
                             like something we already know is correct?"

Lookup is a linear scan in insertion order and the FIRST record at or above
SIMILARITY_THRESHOLD wins, not the best one. Learned data is small (one row
per distinct sentence set) and first-match keeps results stable as the
store grows.

Records are loaded lazily from the repository on first use. The load runs
as a single shared task. Reads wait for it for at most ``load_wait``
seconds and otherwise behave as an empty store, so a slow or dead database
never holds up the decision path. After a failed load, reads don't start
another one for ``retry_after`` seconds. Admin operations and learning
await the load and see its errors. Writes go to the repository first and
are mirrored into memory only once they succeed, so memory never holds a
record the database doesn't.

Concurrency: all read-modify-write sequences (learn, add_entry,
remove_entry) run under ``write_lock``. Reads don't take the lock. Updates
swap a whole record object into its list slot, so a reader sees either the
old record or the new one, never a mix.
"""

import asyncio
import dataclasses
import os
import time
from typing import NamedTuple, Optional, Sequence

from src.learning.learner import CorrectionLearner
from src.learning.records import LearnedRecord
from src.learning.repository import CorrectionRepository
from src.learning.similarity import similarity
from src.utils.logging import log, get_logger

MODULE = "store"
logger = get_logger()

# "We've seen something like this" threshold for lookups
SIMILARITY_THRESHOLD = 0.8

# 0 = load everything
STORE_LOAD_LIMIT = int(os.getenv("STORE_LOAD_LIMIT", "0"))

# How long a read waits for a load it started itself
LOAD_WAIT_SECONDS = 0.2

# Reads don't restart a failed load before this
LOAD_RETRY_SECONDS = 30.0


class BestGuess(NamedTuple):
    sentence: str
    index: int


class LearnedCorrectionStore:
    """Fuzzy-matched collection of learned records."""

    def __init__(
        self,
        repository: CorrectionRepository,
        load_limit: int = STORE_LOAD_LIMIT,
        load_wait: float = LOAD_WAIT_SECONDS,
        retry_after: float = LOAD_RETRY_SECONDS,
    ):
        self._repository = repository
        self._load_limit = load_limit or None
        self._load_wait = load_wait
        self._retry_after = retry_after
        self._records: list[LearnedRecord] = []
        self._loaded = False
        self._load_task: Optional[asyncio.Task] = None
        self._failed_at: Optional[float] = None
        self.write_lock = asyncio.Lock()
        self.learner = CorrectionLearner(self)

    def __len__(self) -> int:
        return len(self._records)

    @property
    def records(self) -> list[LearnedRecord]:
        """Snapshot of the records in scan order."""
        return list(self._records)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load(self) -> None:
        """Load records from the repository (no-op once loaded).

        Joins the load already in flight, if any.

        Raises:
            StoreUnavailable: If the repository can't be read.
        """
        if self._loaded:
            return
        await asyncio.shield(self._start_load())

    async def ensure_loaded(self) -> None:
        if not self._loaded:
            await self.load()

    def _start_load(self) -> asyncio.Task:
        if self._load_task is None or self._load_task.done():
            self._load_task = asyncio.create_task(self._read_records())
            self._load_task.add_done_callback(self._on_load_done)
        return self._load_task

    async def _read_records(self) -> None:
        records = await self._repository.read_all(limit=self._load_limit)
        if self._loaded:
            return
        self._records = records
        self._loaded = True
        self._failed_at = None
        log.info(logger, MODULE, "load_done", "Learned records loaded",
                 records=len(records), limit=self._load_limit)

    def _on_load_done(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            self._failed_at = time.monotonic()
            log.warning(logger, MODULE, "load_failed", "Could not load learned records",
                        error=str(error), error_type=type(error).__name__)

    async def _ready_for_reads(self) -> bool:
        """True once records are in memory.

        Starts a load when none is running (outside the retry backoff) and
        waits for it at most ``load_wait`` seconds. A load started by
        someone else is not waited for.
        """
        if self._loaded:
            return True
        if self._load_task is not None and not self._load_task.done():
            return False
        if self._failed_at is not None and time.monotonic() - self._failed_at < self._retry_after:
            return False
        await asyncio.wait({self._start_load()}, timeout=self._load_wait)
        return self._loaded

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def first_match(self, text: str) -> Optional[LearnedRecord]:
        """Scan loaded records in order; first one at/above threshold wins."""
        for record in list(self._records):
            if similarity(text, record.original_text) >= SIMILARITY_THRESHOLD:
                return record
        return None

    async def fuzzy_find(self, text: str) -> Optional[LearnedRecord]:
        """Find the first record similar enough to ``text``.

        An unloaded or unavailable store is reported as a miss.
        """
        if not await self._ready_for_reads():
            log.warning(logger, MODULE, "lookup_skipped",
                        "Store not loaded, treating lookup as a miss")
            return None
        return self.first_match(text)

    async def best_guess(self, candidates: Sequence[str]) -> BestGuess:
        """Pick the candidate closest to any known-correct sentence.

        Each candidate scores the maximum similarity against every stored
        ``corrected_text``; the highest scorer wins (earliest on ties).
        Falls back to candidate 0 when the store is empty, unavailable,
        or nothing is similar at all.
        """
        if not await self._ready_for_reads():
            log.warning(logger, MODULE, "best_guess_fallback",
                        "Store not loaded, defaulting to first candidate")
            return BestGuess(candidates[0], 0)

        records = list(self._records)
        best_index, best_score = 0, 0.0
        for index, candidate in enumerate(candidates):
            score = max((similarity(candidate, r.corrected_text) for r in records), default=0.0)
            if score > best_score:
                best_index, best_score = index, score

        log.debug(logger, MODULE, "best_guess_done", "Best guess selected",
                  index=best_index, score=round(best_score, 3), records=len(records))
        return BestGuess(candidates[best_index], best_index)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def upsert_observation(
        self,
        original: str,
        corrected: str,
        alternatives: Optional[Sequence[str]] = None,
        confidence: float = 1.0,
    ) -> None:
        """Merge one observation into the store (see CorrectionLearner)."""
        await self.learner.learn(original, corrected, alternatives, confidence)

    async def commit(self, record: LearnedRecord) -> LearnedRecord:
        """Persist ``record`` and mirror it into memory.

        Caller must hold ``write_lock``. New records (id None) are appended;
        existing ones replace their slot.

        Raises:
            StoreUnavailable: If the repository write fails. Memory is left
                untouched in that case.
        """
        saved = await self._repository.save(record)
        if record.id is None:
            self._records.append(saved)
            return saved
        for position, current in enumerate(self._records):
            if current.id == saved.id:
                self._records[position] = saved
                break
        else:
            self._records.append(saved)
        return saved

    # ------------------------------------------------------------------
    # Admin
    # ------------------------------------------------------------------

    async def stats(self) -> dict:
        """Record count and entries ordered by use_count (highest first)."""
        await self.ensure_loaded()
        entries = sorted(self._records, key=lambda r: r.use_count, reverse=True)
        return {
            "total_records": len(entries),
            "entries": [r.to_dict() for r in entries],
        }

    async def inspect(self, text: str) -> dict:
        """Show which record (if any) ``text`` would hit."""
        await self.ensure_loaded()
        record = self.first_match(text)
        return {
            "exists": record is not None,
            "entry": record.to_dict() if record else None,
            "similarity": similarity(text, record.original_text) if record else None,
        }

    async def add_entry(
        self,
        sentence: str,
        use_count: int = 1,
        alternatives: Optional[Sequence[str]] = None,
        confidence: float = 1.0,
    ) -> LearnedRecord:
        """Manually seed a known-correct sentence.

        A record that already fuzzy-matches the sentence is overwritten in
        place, keeping its id and its position in scan order.
        """
        fields = dict(
            original_text=sentence,
            corrected_text=sentence,
            confidence=confidence,
            use_count=max(use_count, 1),
            alternative_sentences=list(alternatives or []),
        )
        async with self.write_lock:
            await self.ensure_loaded()
            existing = self.first_match(sentence)
            if existing is not None:
                saved = await self.commit(dataclasses.replace(existing, **fields))
            else:
                saved = await self.commit(LearnedRecord(**fields))
        log.info(logger, MODULE, "entry_added", "Cache entry added",
                 record_id=saved.id, replaced=existing is not None)
        return saved

    async def remove_entry(self, record_id: int) -> bool:
        """Delete a record. Returns False if it didn't exist."""
        async with self.write_lock:
            await self.ensure_loaded()
            removed = await self._delete(record_id)
        log.info(logger, MODULE, "entry_removed", "Cache entry removal",
                 record_id=record_id, removed=removed)
        return removed

    async def _delete(self, record_id: int) -> bool:
        removed = await self._repository.delete(record_id)
        self._records = [r for r in self._records if r.id != record_id]
        return removed
