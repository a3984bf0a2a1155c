"""Merge policy for new observations.

An observation is (original, corrected, alternatives, confidence). It
either reinforces the first record that fuzzy-matches ``original`` or
creates a new one:

  match found   → use_count += 1, always
                  corrected/confidence/alternatives replaced together, but
                  only when the new confidence is strictly higher
  no match      → new record, use_count = 1

So a record's confidence never goes down, and it always ends up equal to
the highest confidence ever submitted for that record.

Learning is best-effort. It runs in the background of a request or from a
seeding batch, and a failed write must not break either, so learn() logs
and returns instead of raising.
"""

import dataclasses
import math
from typing import TYPE_CHECKING, Optional, Sequence

from src.learning.records import LearnedRecord
from src.learning.repository import StoreUnavailable
from src.utils.logging import log, get_logger

if TYPE_CHECKING:
    from src.learning.store import LearnedCorrectionStore

MODULE = "learning"
logger = get_logger()


class CorrectionLearner:
    def __init__(self, store: "LearnedCorrectionStore"):
        self._store = store

    async def learn(
        self,
        original: str,
        corrected: str,
        alternatives: Optional[Sequence[str]] = None,
        confidence: float = 1.0,
    ) -> None:
        """Merge one observation into the store. Never raises."""
        confidence = float(confidence)
        if math.isnan(confidence):
            confidence = 0.0
        confidence = min(max(confidence, 0.0), 1.0)
        alternatives = list(alternatives or [])

        try:
            async with self._store.write_lock:
                await self._store.ensure_loaded()
                existing = self._store.first_match(original)

                if existing is None:
                    saved = await self._store.commit(LearnedRecord(
                        original_text=original,
                        corrected_text=corrected,
                        confidence=confidence,
                        use_count=1,
                        alternative_sentences=alternatives,
                    ))
                    log.info(logger, MODULE, "learn_created", "New correction learned",
                             record_id=saved.id, corrected=corrected[:80],
                             confidence=confidence)
                    return

                updated = dataclasses.replace(existing, use_count=existing.use_count + 1)
                overwritten = confidence > existing.confidence
                if overwritten:
                    updated = dataclasses.replace(
                        updated,
                        corrected_text=corrected,
                        confidence=confidence,
                        alternative_sentences=alternatives,
                    )
                await self._store.commit(updated)

            log.info(logger, MODULE, "learn_merged", "Observation merged into existing record",
                     record_id=existing.id, use_count=updated.use_count,
                     overwritten=overwritten, confidence=updated.confidence)

        except StoreUnavailable as e:
            log.warning(logger, MODULE, "learn_failed",
                        "Store unavailable, observation dropped",
                        error=str(e), original=original[:80])
        except Exception as e:
            log.error(logger, MODULE, "learn_failed",
                      "Unexpected error while learning, observation dropped",
                      error=str(e), error_type=type(e).__name__,
                      original=original[:80])
