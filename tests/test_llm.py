"""Tests for LLM output parsing, invocation and the LLM oracle."""

import pytest
from pydantic import BaseModel, Field

from src.llm.invoker import LLMInvocationError, invoke_llm
from src.llm.oracle import LLMOracle, OracleError
from src.llm.parser import extract_index, parse_sentences, strip_think_tags

from tests.fakes import FakeChatModel


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("raw,expected", [
    ("1", 1),
    (" 0\n", 0),
    ("Sentence 2.", 2),
    ("<think>candidate 0 has a typo</think>1", 1),
    ("The correct one is 3", 3),
    ("none of them", "none of them"),
    ("", ""),
])
def test_extract_index(raw, expected):
    assert extract_index(raw) == expected


def test_strip_think_tags():
    after, thinking = strip_think_tags("<think>hmm</think> 2")
    assert after == "2"
    assert thinking == "hmm"
    assert strip_think_tags("2") == ("2", None)


def test_parse_sentences_strips_list_markers():
    content = "\n".join([
        "Here are the sentences:",
        "1. 크고 화려한 정원",
        "2) 작고 귀여운 강아지",
        "- 여러 가지 다양한 꽃",
        "• 넓고 푸른 바다",
        "",
        "  ",
        "가",
    ])
    assert parse_sentences(content) == [
        "Here are the sentences:",
        "크고 화려한 정원",
        "작고 귀여운 강아지",
        "여러 가지 다양한 꽃",
        "넓고 푸른 바다",
    ]


# ---------------------------------------------------------------------------
# Invoker
# ---------------------------------------------------------------------------

class Lines(BaseModel):
    lines: list[str] = Field(..., min_length=1)


def _parse_lines(raw: str) -> dict:
    return {"lines": parse_sentences(raw)}


@pytest.mark.asyncio
async def test_invoke_llm_retries_until_valid():
    model = FakeChatModel("", "크고 화려한 정원\n작고 귀여운 강아지")
    temperatures = []

    def factory(temperature):
        temperatures.append(temperature)
        return model

    result = await invoke_llm("system", "user", Lines, parser=_parse_lines,
                              llm_factory=factory, retry_delay=0)

    assert result.lines == ["크고 화려한 정원", "작고 귀여운 강아지"]
    assert temperatures == [0.7, 0.9]


@pytest.mark.asyncio
async def test_invoke_llm_gives_up_after_retries():
    model = FakeChatModel(RuntimeError("connection reset"))

    with pytest.raises(LLMInvocationError) as exc_info:
        await invoke_llm("system", "user", Lines, parser=_parse_lines,
                         llm_factory=lambda temperature: model,
                         max_retries=2, retry_delay=0)

    assert exc_info.value.attempts == 3
    assert len(model.messages) == 3


# ---------------------------------------------------------------------------
# Oracle
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_oracle_numbers_candidates_from_zero():
    model = FakeChatModel("1")
    oracle = LLMOracle(llm=model)

    answer = await oracle.classify(["안뇽하세요", "안녕하세요"])

    assert answer == 1
    [messages] = model.messages
    assert "0: 안뇽하세요" in messages[1].content
    assert "1: 안녕하세요" in messages[1].content


@pytest.mark.asyncio
async def test_oracle_passes_non_numeric_answer_through():
    oracle = LLMOracle(llm=FakeChatModel("I cannot decide"))
    assert await oracle.classify(["a", "b"]) == "I cannot decide"


@pytest.mark.asyncio
async def test_oracle_call_failure_is_oracle_error():
    oracle = LLMOracle(llm=FakeChatModel(TimeoutError("read timeout")))
    with pytest.raises(OracleError):
        await oracle.classify(["a", "b"])


@pytest.mark.asyncio
async def test_oracle_empty_response_is_oracle_error():
    oracle = LLMOracle(llm=FakeChatModel("   "))
    with pytest.raises(OracleError):
        await oracle.classify(["a", "b"])
