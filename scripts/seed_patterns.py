"""Seed the learned cache with generated example sentences.

Runs one generation batch per pattern (or just the ones given):
    python -m scripts.seed_patterns          # all patterns
    python -m scripts.seed_patterns 2 5      # patterns 2 and 5
"""

import asyncio
import sys

import structlog

from src.db.session import engine, async_session
from src.learning.repository import SqlCorrectionRepository
from src.learning.seed import GrammarSeeder, InvalidPatternIndex
from src.learning.store import LearnedCorrectionStore
from src.llm.invoker import LLMInvocationError
from src.prompts.grammar import SEED_PATTERNS

logger = structlog.get_logger()


async def seed(pattern_indexes: list[int]) -> None:
    store = LearnedCorrectionStore(SqlCorrectionRepository(async_session))
    await store.load()
    seeder = GrammarSeeder(store)

    for index in pattern_indexes:
        try:
            result = await seeder.generate_batch_examples(index)
        except (InvalidPatternIndex, LLMInvocationError) as e:
            logger.error("seed.failed", pattern_index=index, error=str(e))
            continue
        logger.info("seed.batch", pattern=result["pattern_example"],
                    generated=result["generated_count"])

    await engine.dispose()
    logger.info("seed.done", records=len(store))


if __name__ == "__main__":
    indexes = [int(arg) for arg in sys.argv[1:]] or list(range(1, len(SEED_PATTERNS) + 1))
    asyncio.run(seed(indexes))
