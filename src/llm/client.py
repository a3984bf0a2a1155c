"""LLM client configuration.

Two roles hit the same OpenAI-compatible /v1/chat/completions endpoint:

  get_llm()          → Classification oracle (tiny output, deterministic)
  get_seed_llm()     → Example-sentence generation for seeding (longer
                       output, some creativity)

LLM_URL can point at api.openai.com or any OpenAI-compatible server
(llama.cpp, vLLM).
"""

import os
from typing import Optional

from langchain_openai import ChatOpenAI

from src.utils.logging import log, get_logger

MODULE = "llm"
logger = get_logger()

LLM_URL = os.getenv("LLM_URL", "https://api.openai.com")
LLM_API_KEY = os.getenv("LLM_API_KEY", os.getenv("OPENAI_API_KEY", "not-needed"))
MODEL = os.getenv("LLM_MODEL", "gpt-3.5-turbo")
SEED_MODEL = os.getenv("SEED_MODEL", "gpt-4")


def get_llm(
    temperature: float = 0.0,
    max_tokens: int = 8,
    timeout: Optional[float] = None,
) -> ChatOpenAI:
    """Get the classification LLM client.

    Args:
        temperature: 0.0 = deterministic. The oracle should give the same
            answer for the same candidates.
        max_tokens: The oracle only answers with a number.
        timeout: HTTP timeout in seconds (None = client default).
    """
    client = ChatOpenAI(
        base_url=f"{LLM_URL}/v1",
        api_key=LLM_API_KEY,
        model=MODEL,
        temperature=temperature,
        max_tokens=max_tokens,
        timeout=timeout,
        max_retries=0,
    )
    log.debug(logger, MODULE, "llm_init", "Oracle LLM client created",
              base_url=LLM_URL, model=MODEL, temperature=temperature)
    return client


def get_seed_llm(temperature: float = 0.7) -> ChatOpenAI:
    """Get the LLM client used to generate seed example sentences."""
    client = ChatOpenAI(
        base_url=f"{LLM_URL}/v1",
        api_key=LLM_API_KEY,
        model=SEED_MODEL,
        temperature=temperature,
        max_tokens=1000,
    )
    log.debug(logger, MODULE, "seed_llm_init", "Seed LLM client created",
              base_url=LLM_URL, model=SEED_MODEL, temperature=temperature)
    return client
