"""LLM package.

  from src.llm import LLMOracle, invoke_llm, get_llm

  oracle = LLMOracle()
  index = await oracle.classify(["안녕하세요", "안뇽하세요"])

Architecture:
  client.py   → LLM client configuration (ChatOpenAI instances)
  parser.py   → index / sentence extraction from raw LLM output
  invoker.py  → single-shot and validate-and-retry invocation
  oracle.py   → the grammar oracle the decision engine races
"""

# Client access
from src.llm.client import get_llm, get_seed_llm

# Invocation
from src.llm.invoker import (
    invoke_llm,
    invoke_llm_raw,
    LLMInvocationError,
)

# Parsing utilities
from src.llm.parser import (
    extract_index,
    parse_sentences,
    strip_think_tags,
)

# Oracle
from src.llm.oracle import LLMOracle, Oracle, OracleError

__all__ = [
    # Client
    "get_llm",
    "get_seed_llm",
    # Invoker
    "invoke_llm",
    "invoke_llm_raw",
    "LLMInvocationError",
    # Parser
    "extract_index",
    "parse_sentences",
    "strip_think_tags",
    # Oracle
    "LLMOracle",
    "Oracle",
    "OracleError",
]
