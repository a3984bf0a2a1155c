"""LLM invocation with parsing, validation, and retry.

Two entry points:

  invoke_llm_raw()  → one call, raw text back. Used by the oracle, which
                      has its own deadline and must not retry.
  invoke_llm()      → INVOKE → PARSE → VALIDATE (Pydantic) → RETRY.
                      Used for seeding, where a slow but correct answer
                      beats a fast empty one.
"""

import asyncio
import time
from typing import Any, Callable, Optional, Type, TypeVar

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import SystemMessage, HumanMessage
from pydantic import BaseModel, ValidationError

from src.llm.client import get_seed_llm
from src.utils.logging import log, get_logger

MODULE = "llm.invoker"
logger = get_logger()

T = TypeVar("T", bound=BaseModel)


class LLMInvocationError(Exception):
    """Raised when LLM invocation fails after all retries."""

    def __init__(
        self,
        message: str,
        raw_output: Optional[str] = None,
        validation_error: Optional[str] = None,
        attempts: int = 0,
    ):
        super().__init__(message)
        self.raw_output = raw_output
        self.validation_error = validation_error
        self.attempts = attempts


async def invoke_llm_raw(
    llm: BaseChatModel,
    system_prompt: str,
    user_prompt: str,
    *,
    activity_name: str = "invoke",
) -> tuple[str, int]:
    """Invoke LLM once and return raw output without parsing/validation.

    Returns:
        Tuple of (raw_output, latency_ms)
    """
    _t0 = time.monotonic()

    response = await llm.ainvoke([
        SystemMessage(content=system_prompt),
        HumanMessage(content=user_prompt),
    ])

    latency_ms = int((time.monotonic() - _t0) * 1000)
    content = response.content if isinstance(response.content, str) else ""
    raw = content.strip()

    log.debug(logger, MODULE, "llm_raw_response",
              f"Raw LLM call complete for {activity_name}",
              latency_ms=latency_ms, raw_length=len(raw))

    return raw, latency_ms


async def invoke_llm(
    system_prompt: str,
    user_prompt: str,
    schema: Type[T],
    *,
    parser: Callable[[str], Any],
    llm_factory: Callable[..., BaseChatModel] = get_seed_llm,
    max_retries: int = 2,
    temperature: float = 0.7,
    temperature_on_retry: float = 0.9,
    retry_delay: float = 1.0,
    activity_name: str = "invoke",
) -> T:
    """Invoke LLM and return validated, typed output.

    Args:
        system_prompt: System message content
        user_prompt: User message content
        schema: Pydantic model class the parsed output must satisfy
        parser: Turns raw text into the data handed to ``schema``
        llm_factory: Builds the client for a given temperature
        max_retries: Number of retry attempts (default: 2)
        temperature: Initial temperature
        temperature_on_retry: Temperature for retry attempts
        retry_delay: Pause between attempts after an invocation error
        activity_name: Name for logging context

    Returns:
        Validated instance of the schema type

    Raises:
        LLMInvocationError: If all attempts fail
    """
    last_raw: Optional[str] = None
    last_validation_error: Optional[str] = None

    for attempt in range(max_retries + 1):
        current_temp = temperature if attempt == 0 else temperature_on_retry

        try:
            # Step 1: INVOKE
            llm = llm_factory(temperature=current_temp)
            raw, latency_ms = await invoke_llm_raw(
                llm, system_prompt, user_prompt, activity_name=activity_name)
            last_raw = raw

            # Step 2: PARSE + VALIDATE
            try:
                validated = schema.model_validate(parser(raw))
            except ValidationError as e:
                last_validation_error = str(e)
                log.warning(logger, MODULE, "validation_failed",
                            f"Schema validation failed for {activity_name}",
                            attempt=attempt + 1, error=str(e),
                            schema=schema.__name__)
                continue

            log.info(logger, MODULE, "invoke_done",
                     f"LLM invocation successful for {activity_name}",
                     attempts=attempt + 1, latency_ms=latency_ms,
                     schema=schema.__name__)
            return validated

        except Exception as e:
            log.error(logger, MODULE, "invoke_failed",
                      f"LLM invocation error for {activity_name}",
                      attempt=attempt + 1, error=str(e),
                      error_type=type(e).__name__)
            if attempt < max_retries:
                await asyncio.sleep(retry_delay)

    raise LLMInvocationError(
        f"LLM invocation failed for {activity_name} after {max_retries + 1} attempts",
        raw_output=last_raw,
        validation_error=last_validation_error,
        attempts=max_retries + 1,
    )
