"""
LLM Usage Tracking Types

LLMUsage captures tokens, cost and latency of a single LiteLLM call so the
exercise service can log what a cache fill cost.

Usage:
    from grammar_drills.services.llm.usage import extract_usage_from_response

    usage = extract_usage_from_response(
        response=litellm_response,
        model="openai/gpt-4o-mini",
        latency_ms=1234,
        operation="exercise_generation",
    )
"""

import logging
from dataclasses import dataclass
from typing import Optional

import litellm

logger = logging.getLogger(__name__)


@dataclass
class LLMUsage:
    """
    Structured usage data returned from completion calls.

    Attributes:
        model: Full model identifier (e.g., "openai/gpt-4o-mini")
        provider: Provider prefix of the model identifier
        operation: LLMOperation value the call was made for
        prompt_tokens: Number of input tokens
        completion_tokens: Number of output tokens
        total_tokens: Total tokens used
        cost_usd: Total cost in USD, when LiteLLM knows the model price
        latency_ms: Request latency in milliseconds
    """

    model: str = ""
    provider: str = ""
    operation: Optional[str] = None

    prompt_tokens: Optional[int] = None
    completion_tokens: Optional[int] = None
    total_tokens: Optional[int] = None

    cost_usd: Optional[float] = None
    latency_ms: Optional[int] = None

    def __str__(self) -> str:
        cost_str = f"${self.cost_usd:.4f}" if self.cost_usd else "N/A"
        tokens_str = str(self.total_tokens) if self.total_tokens else "N/A"
        return f"LLMUsage({self.model}, cost={cost_str}, tokens={tokens_str}, latency={self.latency_ms}ms)"


def extract_provider(model: str) -> str:
    """
    Extract provider name from model identifier.

    Args:
        model: Full model identifier (e.g., "openai/gpt-4o-mini")

    Returns:
        Provider name (e.g., "openai") or "unknown" if not parseable
    """
    if "/" in model:
        return model.split("/")[0]
    return "unknown"


def extract_usage_from_response(
    response,
    model: str,
    latency_ms: int,
    operation: Optional[str] = None,
) -> LLMUsage:
    """
    Extract usage and cost information from a LiteLLM response.

    Args:
        response: LiteLLM ModelResponse
        model: Model identifier used for the request
        latency_ms: Measured latency in milliseconds
        operation: Operation name for attribution

    Returns:
        LLMUsage populated with whatever the response carries
    """
    usage = LLMUsage(
        model=model,
        provider=extract_provider(model),
        operation=operation,
        latency_ms=latency_ms,
    )

    response_usage = getattr(response, "usage", None)
    if response_usage:
        usage.prompt_tokens = getattr(response_usage, "prompt_tokens", None)
        usage.completion_tokens = getattr(response_usage, "completion_tokens", None)
        usage.total_tokens = getattr(response_usage, "total_tokens", None)

    hidden = getattr(response, "_hidden_params", None)
    if isinstance(hidden, dict):
        usage.cost_usd = hidden.get("response_cost")

    if usage.cost_usd is None and usage.total_tokens:
        try:
            usage.cost_usd = litellm.completion_cost(completion_response=response)
        except Exception as e:
            logger.debug(f"Cost calculation not available for {model}: {e}")

    return usage
