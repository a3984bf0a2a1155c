"""Tests for cache seeding from generated examples."""

import pytest

from src.learning.seed import GrammarSeeder, InvalidPatternIndex, SeedBatch
from src.llm.invoker import LLMInvocationError
from src.prompts.grammar import SEED_PATTERNS

GENERATED = """1. 크고 화려한 정원
2. 작고 귀여운 강아지
3. 작고 귀여운 강아지
- 넓고 푸른 바다"""


class FakeGenerate:
    """Plays the part of invoke_llm: parses canned output with the given parser."""

    def __init__(self, raw: str = GENERATED):
        self.raw = raw
        self.prompts = []

    async def __call__(self, system_prompt, user_prompt, schema, *, parser, activity_name):
        self.prompts.append(user_prompt)
        return schema.model_validate(parser(self.raw))


@pytest.mark.asyncio
async def test_seed_batch_learns_each_sentence(store):
    generate = FakeGenerate()
    seeder = GrammarSeeder(store, generate=generate, learn_delay=0)

    result = await seeder.generate_batch_examples(1)

    assert result == {
        "success": True,
        "pattern_example": SEED_PATTERNS[0]["example"],
        "generated_count": 3,
        "sentences": ["크고 화려한 정원", "작고 귀여운 강아지", "넓고 푸른 바다"],
    }
    assert SEED_PATTERNS[0]["example"] in generate.prompts[0]
    assert len(store) == 3
    assert all(r.original_text == r.corrected_text for r in store.records)
    assert all(r.confidence == 1.0 for r in store.records)


@pytest.mark.asyncio
async def test_reseeding_reinforces_existing_records(store):
    seeder = GrammarSeeder(store, generate=FakeGenerate(), learn_delay=0)

    await seeder.generate_batch_examples(2)
    await seeder.generate_batch_examples(2)

    assert len(store) == 3
    assert {r.use_count for r in store.records} == {2}


@pytest.mark.asyncio
@pytest.mark.parametrize("index", [0, len(SEED_PATTERNS) + 1, -3])
async def test_invalid_pattern_index(store, index):
    seeder = GrammarSeeder(store, generate=FakeGenerate(), learn_delay=0)
    with pytest.raises(InvalidPatternIndex):
        await seeder.generate_batch_examples(index)


@pytest.mark.asyncio
async def test_generation_failure_propagates(store):
    async def failing(*args, **kwargs):
        raise LLMInvocationError("no luck", attempts=3)

    seeder = GrammarSeeder(store, generate=failing, learn_delay=0)
    with pytest.raises(LLMInvocationError):
        await seeder.generate_batch_examples(3)
    assert len(store) == 0


def test_seed_batch_rejects_empty():
    with pytest.raises(Exception):
        SeedBatch(sentences=[])
