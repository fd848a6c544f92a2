"""
LLM Service Module

Provides a unified interface to LLM providers via LiteLLM.

Key Components:
- client.py: LLMClient with operation-based model selection and retries
- usage.py: LLMUsage token/cost/latency record

Usage:
    from grammar_drills.enums import LLMOperation
    from grammar_drills.services.llm import build_messages, get_llm_client

    client = get_llm_client()
    content, usage = await client.complete(
        operation=LLMOperation.PROMPT_REFINEMENT,
        messages=build_messages("Rewrite this prompt..."),
    )
"""

from grammar_drills.services.llm.client import (
    LLMClient,
    build_messages,
    get_llm_client,
)
from grammar_drills.services.llm.usage import LLMUsage

__all__ = [
    "LLMClient",
    "LLMUsage",
    "get_llm_client",
    "build_messages",
]
