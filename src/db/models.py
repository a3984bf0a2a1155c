"""SQLAlchemy models for learned corrections."""

from datetime import datetime, timezone

from sqlalchemy import Column, Integer, Float, DateTime, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class LearnedCorrection(Base):
    """A learned "this phrasing is the correct one" record.

    Rows are scanned in id order by the store, so id doubles as the
    insertion order that fuzzy lookup relies on.
    """
    __tablename__ = "learned_corrections"

    id = Column(Integer, primary_key=True, autoincrement=True)
    original_text = Column(Text, nullable=False)
    corrected_text = Column(Text, nullable=False)
    confidence = Column(Float, nullable=False, default=1.0)
    use_count = Column(Integer, nullable=False, default=1)
    alternative_sentences = Column(JSONB, nullable=True)  # list[str]
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
