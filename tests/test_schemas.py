"""Tests for Pydantic schemas."""

import pytest
from src.schemas import CacheEntryRequest, CheckRequest, LearnRequest


def test_check_request_valid():
    req = CheckRequest(sentences=["안녕하세요", "안뇽하세요"])
    assert req.sentences == ["안녕하세요", "안뇽하세요"]


def test_check_request_empty_list():
    with pytest.raises(Exception):
        CheckRequest(sentences=[])


def test_check_request_all_blank():
    with pytest.raises(Exception):
        CheckRequest(sentences=["", "   "])


def test_learn_request_defaults():
    req = LearnRequest(original="안녕 하세요", corrected="안녕하세요")
    assert req.confidence == 1.0
    assert req.alternatives == []


def test_learn_request_confidence_range():
    with pytest.raises(Exception):
        LearnRequest(original="a", corrected="b", confidence=1.5)


def test_cache_entry_request_strips():
    req = CacheEntryRequest(sentence="  크고 화려한 정원 ")
    assert req.sentence == "크고 화려한 정원"
    assert req.use_count == 1
