"""Shared fixtures."""

import pytest

from src.learning.repository import InMemoryCorrectionRepository
from src.learning.store import LearnedCorrectionStore


@pytest.fixture
def repository():
    return InMemoryCorrectionRepository()


@pytest.fixture
def store(repository):
    return LearnedCorrectionStore(repository)
