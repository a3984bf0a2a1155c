"""Fakes for the learned-cache tests.

Nothing here touches the network or a database.
"""

import asyncio
from types import SimpleNamespace

from src.learning.records import LearnedRecord
from src.learning.repository import InMemoryCorrectionRepository, StoreUnavailable


class YieldingRepository(InMemoryCorrectionRepository):
    """In-memory repository that yields to the event loop on every write,
    so concurrent writers actually interleave."""

    async def save(self, record):
        await asyncio.sleep(0)
        return await super().save(record)


class BlockingRepository(InMemoryCorrectionRepository):
    """Writes wait until ``release`` is set."""

    def __init__(self, records=None):
        super().__init__(records)
        self.release = asyncio.Event()

    async def save(self, record):
        await self.release.wait()
        return await super().save(record)


class BrokenRepository:
    """Every operation fails like a dead database."""

    async def read_all(self, limit=None):
        raise StoreUnavailable("connection refused")

    async def save(self, record):
        raise StoreUnavailable("connection refused")

    async def delete(self, record_id):
        raise StoreUnavailable("connection refused")


class StubOracle:
    """Answers with a fixed value after an optional delay."""

    def __init__(self, answer=0, delay: float = 0.0):
        self.answer = answer
        self.delay = delay
        self.calls = []

    async def classify(self, candidates):
        self.calls.append(list(candidates))
        if self.delay:
            await asyncio.sleep(self.delay)
        return self.answer


class HangingOracle:
    """Never answers."""

    def __init__(self):
        self.calls = 0

    async def classify(self, candidates):
        self.calls += 1
        await asyncio.Event().wait()


class FailingOracle:
    def __init__(self, error: Exception = RuntimeError("HTTP 429 Too Many Requests")):
        self.error = error
        self.calls = 0

    async def classify(self, candidates):
        self.calls += 1
        raise self.error


class FakeChatModel:
    """Stands in for ChatOpenAI: replays canned responses in order."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.messages = []

    async def ainvoke(self, messages):
        self.messages.append(messages)
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        return SimpleNamespace(content=response)


def make_record(original: str, corrected: str, confidence: float = 1.0, **kwargs) -> LearnedRecord:
    return LearnedRecord(original_text=original, corrected_text=corrected,
                         confidence=confidence, **kwargs)


class SlowBrokenRepository(BrokenRepository):
    """Reads hang for ``delay`` seconds before failing, like a database
    behind a dropped connection."""

    def __init__(self, delay: float = 1.0):
        self.delay = delay
        self.reads = 0

    async def read_all(self, limit=None):
        self.reads += 1
        await asyncio.sleep(self.delay)
        raise StoreUnavailable("connection timed out")


class ReadOnlyRepository(InMemoryCorrectionRepository):
    """Reads work, every write fails."""

    async def save(self, record):
        raise StoreUnavailable("read-only transaction")
