"""Cache seeding from generated example sentences.

Before real traffic builds the cache up, an admin can ask a stronger model
for a batch of correct sentences following one of the SEED_PATTERNS and
learn each of them as a known-correct phrasing. Run it a few times per
pattern to build up a few hundred records.

Seeding goes through the same learn() merge policy as oracle answers, with
the default confidence of 1.0.
"""

import asyncio
from typing import Awaitable, Callable

from pydantic import BaseModel, Field, field_validator

from src.learning.store import LearnedCorrectionStore
from src.llm.invoker import invoke_llm
from src.llm.parser import parse_sentences
from src.prompts.grammar import SEED_BATCH_SIZE, SEED_PATTERNS, SEED_SYSTEM, SEED_USER
from src.utils.logging import log, get_logger

MODULE = "seed"
logger = get_logger()

# Pause between learn() calls so a big batch doesn't hog the write lock
LEARN_DELAY_SECONDS = 0.1


class InvalidPatternIndex(ValueError):
    """Pattern index outside 1..len(SEED_PATTERNS)."""


class SeedBatch(BaseModel):
    """Sentences parsed from one generation call."""
    sentences: list[str] = Field(..., min_length=1)

    @field_validator("sentences")
    @classmethod
    def dedupe(cls, v: list[str]) -> list[str]:
        return list(dict.fromkeys(s.strip() for s in v if s.strip()))


def _parse_batch(raw: str) -> dict:
    return {"sentences": parse_sentences(raw)}


class GrammarSeeder:
    """Generate example sentences for a pattern and learn them."""

    def __init__(
        self,
        store: LearnedCorrectionStore,
        generate: Callable[..., Awaitable[SeedBatch]] = invoke_llm,
        learn_delay: float = LEARN_DELAY_SECONDS,
    ):
        self._store = store
        self._generate = generate
        self._learn_delay = learn_delay

    async def generate_batch_examples(self, pattern_index: int) -> dict:
        """Generate and learn one batch for the 1-based ``pattern_index``.

        Raises:
            InvalidPatternIndex: If the index doesn't name a pattern.
            LLMInvocationError: If generation fails after retries.
        """
        if not 1 <= pattern_index <= len(SEED_PATTERNS):
            raise InvalidPatternIndex(
                f"Pattern index must be between 1 and {len(SEED_PATTERNS)}, got {pattern_index}")

        pattern = SEED_PATTERNS[pattern_index - 1]
        log.info(logger, MODULE, "seed_start", "Generating seed examples",
                 pattern=pattern["example"], batch_size=SEED_BATCH_SIZE)

        batch = await self._generate(
            SEED_SYSTEM,
            SEED_USER.format(count=SEED_BATCH_SIZE, **pattern),
            SeedBatch,
            parser=_parse_batch,
            activity_name="seed",
        )

        for sentence in batch.sentences:
            await self._store.upsert_observation(sentence, sentence)
            if self._learn_delay:
                await asyncio.sleep(self._learn_delay)

        log.info(logger, MODULE, "seed_done", "Seed examples learned",
                 pattern=pattern["example"], generated=len(batch.sentences),
                 records=len(self._store))
        return {
            "success": True,
            "pattern_example": pattern["example"],
            "generated_count": len(batch.sentences),
            "sentences": batch.sentences,
        }
