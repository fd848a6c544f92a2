"""
LLM Client via LiteLLM.

LiteLLM provides a unified interface to many LLM providers using the format
"provider/model-name". Key features used here:
- Operation-based model selection via the LLMOperation enum
- JSON mode for structured exercise output
- Retries with exponential backoff on transient provider errors
- Native async support

See: https://docs.litellm.ai/

Usage:
    from grammar_drills.enums import LLMOperation
    from grammar_drills.services.llm import build_messages, get_llm_client

    client = get_llm_client()

    content, usage = await client.complete(
        operation=LLMOperation.EXERCISE_GENERATION,
        messages=build_messages(prompt),
        json_mode=True,
    )
    logger.info(f"Generation usage: {usage}")
"""

import json
import logging
import os
import time
from typing import Any, Optional, Union

import litellm
from litellm import acompletion
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from grammar_drills.config import settings
from grammar_drills.enums import LLMOperation
from grammar_drills.middleware.error_handling import LLMError
from grammar_drills.services.llm.usage import LLMUsage, extract_usage_from_response

logger = logging.getLogger(__name__)

# Configure LiteLLM
litellm.drop_params = True  # Drop unsupported params instead of erroring
if settings.DEBUG:
    os.environ["LITELLM_LOG"] = "DEBUG"

# Errors worth another attempt. Auth and bad-request errors are not.
TRANSIENT_ERRORS = (
    json.JSONDecodeError,
    litellm.APIConnectionError,
    litellm.RateLimitError,
    litellm.Timeout,
    litellm.ServiceUnavailableError,
    litellm.InternalServerError,
)


def build_messages(
    prompt: str,
    system_prompt: Optional[str] = None,
) -> list[dict[str, str]]:
    """
    Build messages list from prompt and optional system prompt.

    Args:
        prompt: User prompt text
        system_prompt: Optional system prompt

    Returns:
        List of message dicts for LLM API
    """
    messages = []
    if system_prompt:
        messages.append({"role": "system", "content": system_prompt})
    messages.append({"role": "user", "content": prompt})
    return messages


class LLMClient:
    """
    LLM client with operation-based model selection.

    Each LLMOperation may have its own model configured in settings;
    operations without an override use TEXT_MODEL.
    """

    def __init__(self):
        """Initialize the LLM client and validate API keys."""
        self._validate_api_keys()

    def _validate_api_keys(self):
        """Warn when no provider key is configured."""
        available_keys = []

        if os.getenv("OPENAI_API_KEY") or settings.OPENAI_API_KEY:
            available_keys.append("OpenAI")
        if os.getenv("ANTHROPIC_API_KEY") or settings.ANTHROPIC_API_KEY:
            available_keys.append("Anthropic")
        if os.getenv("GEMINI_API_KEY") or settings.GEMINI_API_KEY:
            available_keys.append("Google/Gemini")

        if not available_keys and not settings.OPENAI_API_BASE:
            logger.warning(
                "No LLM API keys configured. Set at least one of: "
                "OPENAI_API_KEY, ANTHROPIC_API_KEY, GEMINI_API_KEY "
                "(or OPENAI_API_BASE for a self-hosted endpoint)"
            )
        else:
            logger.info(f"LLM client initialized with providers: {available_keys}")

    def get_model_for_operation(self, operation: Union[LLMOperation, str]) -> str:
        """
        Get the configured model for a specific operation.

        Args:
            operation: LLMOperation enum value

        Returns:
            Model identifier in LiteLLM format (provider/model-name)
        """
        if isinstance(operation, str):
            try:
                operation = LLMOperation(operation)
            except ValueError:
                logger.warning(
                    f"Unknown operation type: {operation}, using default model"
                )
                return settings.TEXT_MODEL

        overrides = {
            LLMOperation.EXERCISE_GENERATION: settings.EXERCISE_GENERATION_MODEL,
            LLMOperation.PROMPT_REFINEMENT: settings.PROMPT_REFINEMENT_MODEL,
        }
        return overrides.get(operation) or settings.TEXT_MODEL

    @retry(
        retry=retry_if_exception_type(TRANSIENT_ERRORS),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=30),
        reraise=True,
    )
    async def complete(
        self,
        operation: Union[LLMOperation, str],
        messages: list[dict],
        temperature: float = 0.3,
        max_tokens: int = 4096,
        json_mode: bool = False,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> tuple[Union[str, Any], LLMUsage]:
        """
        Generate a completion using the appropriate model for the operation.

        Args:
            operation: LLMOperation specifying the operation type
            messages: Chat messages in OpenAI format
                [{"role": "user", "content": "..."}, ...]
            temperature: Sampling temperature
            max_tokens: Maximum tokens in response
            json_mode: Request structured JSON output and parse the response.
                JSONDecodeError triggers a retry.
            model: Optional model override (bypasses operation-based selection)
            timeout: Per-attempt provider timeout in seconds

        Returns:
            Tuple of (response text or parsed JSON if json_mode, LLMUsage)

        Raises:
            LLMError: If the provider returns no choices or empty content
            json.JSONDecodeError: If json_mode=True and the response is not
                valid JSON after all retries
            Exception: Provider errors from LiteLLM
        """
        model = model or self.get_model_for_operation(operation)

        kwargs = {
            "model": model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }

        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        if timeout:
            kwargs["timeout"] = timeout
        if settings.OPENAI_API_BASE and model.startswith("openai/"):
            kwargs["api_base"] = settings.OPENAI_API_BASE

        start_time = time.perf_counter()

        try:
            response = await acompletion(**kwargs)
        except Exception as e:
            logger.error(f"LLM completion failed: {e} (model={model})")
            raise

        latency_ms = int((time.perf_counter() - start_time) * 1000)
        usage = extract_usage_from_response(
            response=response,
            model=model,
            latency_ms=latency_ms,
            operation=getattr(operation, "value", operation),
        )

        if not response.choices:
            raise LLMError(f"No choices in response from {model}")

        content = response.choices[0].message.content
        if not content:
            raise LLMError(f"Empty response content from {model}")

        if json_mode:
            try:
                content = json.loads(content)
            except json.JSONDecodeError:
                logger.warning(f"JSON decode error, will retry (model={model})")
                raise

        return content, usage


# Singleton instance
_client: Optional[LLMClient] = None


def get_llm_client() -> LLMClient:
    """
    Get or create singleton LLM client.

    Returns:
        Shared LLMClient instance
    """
    global _client
    if _client is None:
        _client = LLMClient()
    return _client
