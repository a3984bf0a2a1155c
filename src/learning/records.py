"""Learned correction record."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional


@dataclass
class LearnedRecord:
    """One learned "which phrasing is right" observation.

    Records have no natural key. ``id`` is assigned by the repository on
    the first write and is ``None`` until then.
    """
    original_text: str
    corrected_text: str
    confidence: float = 1.0
    use_count: int = 1
    alternative_sentences: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    id: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "original_text": self.original_text,
            "corrected_text": self.corrected_text,
            "confidence": self.confidence,
            "use_count": self.use_count,
            "alternative_sentences": list(self.alternative_sentences),
            "created_at": self.created_at,
        }
