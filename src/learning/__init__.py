"""Learned-correction cache.

  from src.learning import LearnedCorrectionStore, InMemoryCorrectionRepository

  store = LearnedCorrectionStore(InMemoryCorrectionRepository())
  await store.upsert_observation("안녕하세요", "안녕하세요")
  record = await store.fuzzy_find("안녕 하세요")

Architecture:
  similarity.py → normalized edit-distance similarity
  records.py    → LearnedRecord
  repository.py → persistence (in-memory, SQLAlchemy)
  store.py      → fuzzy lookup, best guess, admin operations
  learner.py    → merge policy for new observations
  seed.py       → cache seeding from generated examples
"""

from src.learning.similarity import similarity, edit_distance
from src.learning.records import LearnedRecord
from src.learning.repository import (
    CorrectionRepository,
    InMemoryCorrectionRepository,
    SqlCorrectionRepository,
    StoreUnavailable,
)
from src.learning.store import (
    BestGuess,
    LearnedCorrectionStore,
    SIMILARITY_THRESHOLD,
)
from src.learning.learner import CorrectionLearner

__all__ = [
    "similarity",
    "edit_distance",
    "LearnedRecord",
    "CorrectionRepository",
    "InMemoryCorrectionRepository",
    "SqlCorrectionRepository",
    "StoreUnavailable",
    "BestGuess",
    "LearnedCorrectionStore",
    "SIMILARITY_THRESHOLD",
    "CorrectionLearner",
]
