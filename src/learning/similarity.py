"""Normalized edit-distance similarity between sentences.

Similarity is measured on Unicode code points after NFC normalization, so a
precomposed Hangul syllable counts as one unit and a decomposed (jamo)
spelling of the same text compares equal to the precomposed one.

  similarity("안녕하세요", "안녕 하세요")  → 0.833  (one insertion over 6)
  similarity("", "")                    → 1.0    (trivial perfect match)

Comparison is case-sensitive. Both functions are pure and safe to call from
any task or thread.
"""

import unicodedata

import Levenshtein


def _normalize(text: str) -> str:
    return unicodedata.normalize("NFC", text)


def edit_distance(a: str, b: str) -> int:
    """Levenshtein distance (insert/delete/substitute each cost 1)."""
    return Levenshtein.distance(_normalize(a), _normalize(b))


def similarity(a: str, b: str) -> float:
    """Return ``(max_len - distance) / max_len`` in [0, 1].

    Two empty strings are a perfect match (1.0) by convention.
    """
    a = _normalize(a)
    b = _normalize(b)
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return (longest - Levenshtein.distance(a, b)) / longest
