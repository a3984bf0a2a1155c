"""Prompts for the grammar oracle and for seed-sentence generation.

The templates have {placeholders} filled in at runtime.


## CLASSIFY (the oracle)

The caller has a handful of candidate sentences that differ by a particle,
an ending, or spacing, e.g.

  0: 안녕하세요
  1: 안뇽하세요

and wants to know which one is correct. The model answers with the number
of the correct line and nothing else. We number from 0 so the answer is
directly an index into the candidate list, and cap the response at a few
tokens so a chatty model can't slow the request down.

What the model gets wrong (out-of-range numbers, words instead of digits)
is handled by the caller, not here.


## SEED (example generation)

To warm the cache before real traffic arrives, we ask a stronger model
for batches of correct sentences following a given pattern and learn each
one as a known-correct phrasing. One sentence per line, no numbering (we
strip numbering anyway).
"""

CLASSIFY_SYSTEM = """You are an expert in Korean spelling and grammar.

You will be given a numbered list of candidate sentences. Exactly one of
them is correct. Judge each candidate on:
  - word order (subject + object + predicate; no inversion)
  - correct use of particles (조사) and endings (어미)
  - spelling and spacing (띄어쓰기)

Answer with the NUMBER of the correct sentence only. No words, no
punctuation, no explanation."""

CLASSIFY_USER = """Candidates:
{numbered_candidates}

Number of the correct sentence:"""


SEED_SYSTEM = (
    "You are an expert at writing natural Korean sentences. "
    "Generate natural, grammatically correct Korean sentences that follow the given pattern."
)

SEED_USER = """Generate {count} correct Korean {kind} following this pattern:
'{example}': {description}.
Write each sentence on a new line."""


# Pattern catalogue for seeding. Selected by 1-based index from the admin API.
SEED_PATTERNS = [
    {
        "example": "여러 가지 다양한 꽃",
        "kind": "noun phrases",
        "description": "a noun phrase with modifiers",
    },
    {
        "example": "마루가 쿵쿵하다",
        "kind": "sentences",
        "description": "a sentence containing an onomatopoeic or mimetic word",
    },
    {
        "example": "원작이 개작되다",
        "kind": "sentences",
        "description": "noun + particle + verb in the passive voice",
    },
    {
        "example": "같이 대화하기 싫을 정도야",
        "kind": "sentences",
        "description": "a sentence ending that expresses a feeling or evaluation",
    },
    {
        "example": "한국에 언제 왔어요?",
        "kind": "questions",
        "description": "a question using a place or time interrogative",
    },
]

SEED_BATCH_SIZE = 40


def format_candidates(candidates: list[str]) -> str:
    """Render candidates as "0: ...", "1: ..." lines."""
    return "\n".join(f"{i}: {sentence}" for i, sentence in enumerate(candidates))
