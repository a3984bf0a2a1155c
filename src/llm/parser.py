"""Extraction of usable answers from raw LLM output.

LLMs rarely answer with exactly what was asked. The oracle prompt asks for
a bare number but gets things like "1", "Sentence 1.", "<think>...</think>2"
or "The correct one is 0". The seeding prompt asks for one sentence per
line but gets numbered lists, bullets, and preambles.
"""

import re
from typing import Optional, Union

from src.utils.logging import log, get_logger

MODULE = "llm.parser"
logger = get_logger()

_INTEGER = re.compile(r"-?\d+")

# List markers the seeding model likes to emit: "1.", "1)", "-", "•", "*"
_LIST_MARKER = re.compile(r"^(\d+[.)]|[-•*])\s*")


def strip_think_tags(raw: str) -> tuple[str, Optional[str]]:
    """Strip <think>...</think> tags from reasoning model output.

    Returns:
        Tuple of (content_after_think, thinking_content)
        - If <think> tags found: returns content after </think>, and the thinking
        - If no tags: returns original raw, None
    """
    think_match = re.search(r"<think>(.*?)</think>", raw, re.DOTALL)
    if think_match:
        thinking = think_match.group(1)
        after = raw[think_match.end():].strip()
        return after, thinking
    return raw, None


def extract_index(raw: str) -> Union[int, str]:
    """Pull the first integer out of an oracle answer.

    If there is no integer at all, the cleaned text is returned unchanged
    and the caller decides what a non-numeric answer means.

      "1"                     → 1
      "Sentence 2."           → 2
      "<think>hm</think> 0"   → 0
      "none of them"          → "none of them"
    """
    text, thinking = strip_think_tags(raw.strip())
    if thinking:
        log.debug(logger, MODULE, "stripped_think", "Stripped <think> tags from response")

    match = _INTEGER.search(text)
    if match:
        return int(match.group(0))

    log.debug(logger, MODULE, "no_index", "No integer in oracle output",
              raw=text[:80])
    return text


def parse_sentences(content: str) -> list[str]:
    """Split generated text into one sentence per line.

    Numbered and bulleted lines have their marker removed; blank lines and
    anything a single character long are dropped.
    """
    content, _ = strip_think_tags(content)
    sentences = []
    for line in content.split("\n"):
        line = _LIST_MARKER.sub("", line.strip()).strip()
        if len(line) > 1:
            sentences.append(line)
    return sentences
