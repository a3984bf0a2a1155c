"""Tests for normalized edit-distance similarity."""

import unicodedata

import pytest

from src.learning.similarity import edit_distance, similarity

PAIRS = [
    ("안녕하세요", "안녕 하세요"),
    ("kitten", "sitting"),
    ("", "abc"),
    ("Hello", "hello"),
    ("원작이 개작되다", "원작이 개작하다"),
]


@pytest.mark.parametrize("text", ["", "a", "안녕하세요", "한국에 언제 왔어요?"])
def test_identity(text):
    assert similarity(text, text) == 1.0


def test_both_empty_is_perfect_match():
    assert similarity("", "") == 1.0


@pytest.mark.parametrize("a,b", PAIRS)
def test_symmetry(a, b):
    assert similarity(a, b) == similarity(b, a)


def test_one_insertion_over_six():
    assert similarity("안녕하세요", "안녕 하세요") == pytest.approx(5 / 6)


def test_nothing_in_common():
    assert similarity("abc", "xyz") == 0.0
    assert similarity("", "abc") == 0.0


def test_case_sensitive():
    assert similarity("A", "a") == 0.0


def test_decomposed_hangul_matches_precomposed():
    decomposed = unicodedata.normalize("NFD", "안녕하세요")
    assert len(decomposed) > len("안녕하세요")
    assert similarity(decomposed, "안녕하세요") == 1.0
    assert edit_distance(decomposed, "안녕하세요") == 0


def test_edit_distance_classic():
    assert edit_distance("kitten", "sitting") == 3
    assert edit_distance("", "abc") == 3


@pytest.mark.parametrize("a,b", PAIRS)
def test_range(a, b):
    assert 0.0 <= similarity(a, b) <= 1.0
