"""Persistence for learned records.

The store only needs three things from persistence:

  read_all()       → every record, in insertion (id) order
  save(record)     → create (id is None) or update (id set); returns the
                     record with its id filled in
  delete(id)       → explicit administrative removal

Two implementations:

  InMemoryCorrectionRepository → process-local list (tests, local runs)
  SqlCorrectionRepository      → Postgres via SQLAlchemy async sessions

Every persistence failure surfaces as StoreUnavailable so callers have one
thing to catch.
"""

import dataclasses
from typing import Optional, Protocol

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.db.models import LearnedCorrection
from src.learning.records import LearnedRecord


class StoreUnavailable(Exception):
    """Raised when the persistence layer cannot be read or written."""


class CorrectionRepository(Protocol):
    async def read_all(self, limit: Optional[int] = None) -> list[LearnedRecord]:
        ...

    async def save(self, record: LearnedRecord) -> LearnedRecord:
        ...

    async def delete(self, record_id: int) -> bool:
        ...


class InMemoryCorrectionRepository:
    """Repository backed by a plain dict keyed by an incrementing id."""

    def __init__(self, records: Optional[list[LearnedRecord]] = None):
        self._rows: dict[int, LearnedRecord] = {}
        self._next_id = 1
        for record in records or []:
            self._insert(record)

    def _insert(self, record: LearnedRecord) -> LearnedRecord:
        stored = dataclasses.replace(record, id=self._next_id,
                                     alternative_sentences=list(record.alternative_sentences))
        self._rows[stored.id] = stored
        self._next_id += 1
        return dataclasses.replace(stored)

    async def read_all(self, limit: Optional[int] = None) -> list[LearnedRecord]:
        rows = [dataclasses.replace(r) for _, r in sorted(self._rows.items())]
        return rows[:limit] if limit else rows

    async def save(self, record: LearnedRecord) -> LearnedRecord:
        if record.id is None:
            return self._insert(record)
        if record.id not in self._rows:
            raise StoreUnavailable(f"Record {record.id} does not exist")
        self._rows[record.id] = dataclasses.replace(
            record, alternative_sentences=list(record.alternative_sentences))
        return dataclasses.replace(record)

    async def delete(self, record_id: int) -> bool:
        return self._rows.pop(record_id, None) is not None


def _to_record(row: LearnedCorrection) -> LearnedRecord:
    return LearnedRecord(
        id=row.id,
        original_text=row.original_text,
        corrected_text=row.corrected_text,
        confidence=row.confidence,
        use_count=row.use_count,
        alternative_sentences=list(row.alternative_sentences or []),
        created_at=row.created_at,
    )


class SqlCorrectionRepository:
    """Repository backed by the learned_corrections table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def read_all(self, limit: Optional[int] = None) -> list[LearnedRecord]:
        query = select(LearnedCorrection).order_by(LearnedCorrection.id.asc())
        if limit:
            query = query.limit(limit)
        try:
            async with self._session_factory() as session:
                result = await session.execute(query)
                return [_to_record(row) for row in result.scalars().all()]
        except (SQLAlchemyError, OSError) as e:
            raise StoreUnavailable(f"Failed to read learned corrections: {e}") from e

    async def save(self, record: LearnedRecord) -> LearnedRecord:
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    if record.id is None:
                        row = LearnedCorrection(created_at=record.created_at)
                        session.add(row)
                    else:
                        row = await session.get(LearnedCorrection, record.id)
                        if row is None:
                            raise StoreUnavailable(f"Record {record.id} does not exist")
                    row.original_text = record.original_text
                    row.corrected_text = record.corrected_text
                    row.confidence = record.confidence
                    row.use_count = record.use_count
                    row.alternative_sentences = list(record.alternative_sentences)
                    await session.flush()
                    return dataclasses.replace(record, id=row.id)
        except (SQLAlchemyError, OSError) as e:
            raise StoreUnavailable(f"Failed to save learned correction: {e}") from e

    async def delete(self, record_id: int) -> bool:
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    row = await session.get(LearnedCorrection, record_id)
                    if row is None:
                        return False
                    await session.delete(row)
                    return True
        except (SQLAlchemyError, OSError) as e:
            raise StoreUnavailable(f"Failed to delete learned correction: {e}") from e
