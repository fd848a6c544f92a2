"""
Prompt Refiner

Rewrites a topic's stored prompt before generation so that repeated cache
fills for the same topic produce more varied exercises. Refinement is an
optimization only: when it is disabled or fails, the stored prompt is used
unchanged.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from grammar_drills.config import settings
from grammar_drills.enums import LLMOperation
from grammar_drills.services.llm import LLMClient, build_messages

logger = logging.getLogger(__name__)


REFINEMENT_PROMPT = """You improve prompts that generate language-learning exercises.

Rewrite the prompt below so the exercises it produces are more varied and
more natural, following these rules:
1. Keep the grammar topic, the language and the proficiency level unchanged.
2. Keep every requirement about the output format, including the exact JSON
   structure and field names.
3. Ask for varied vocabulary, everyday situations and sentence structures.
4. Keep the prompt concise.

Answer with the rewritten prompt only, without any introduction or comments.

Prompt to rewrite:
---
{prompt}
---"""


@dataclass(frozen=True)
class RefinedPrompt:
    """Prompt to generate with, and whether it differs from the stored one."""

    text: str
    refined: bool


class PromptRefiner:
    """Rewrites generation prompts, falling back to the original on any failure."""

    def __init__(
        self,
        llm_client: LLMClient,
        enabled: Optional[bool] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.llm = llm_client
        self.enabled = settings.PROMPT_REFINEMENT_ENABLED if enabled is None else enabled
        self.model = model
        self.timeout = timeout or settings.REFINEMENT_TIMEOUT_SECONDS

    async def refine(self, prompt: str) -> RefinedPrompt:
        """
        Rewrite a prompt for more varied output.

        Args:
            prompt: Stored topic prompt

        Returns:
            RefinedPrompt; `refined` is False when the original is returned
        """
        if not self.enabled:
            return RefinedPrompt(text=prompt, refined=False)

        try:
            content, _ = await asyncio.wait_for(
                self.llm.complete(
                    operation=LLMOperation.PROMPT_REFINEMENT,
                    messages=build_messages(REFINEMENT_PROMPT.format(prompt=prompt)),
                    temperature=0.7,
                    model=self.model,
                    timeout=self.timeout,
                ),
                timeout=self.timeout,
            )
        except Exception as e:
            logger.warning(f"Prompt refinement failed, using original prompt: {e}")
            return RefinedPrompt(text=prompt, refined=False)

        refined = content.strip() if isinstance(content, str) else ""
        if not refined:
            logger.warning("Prompt refinement returned nothing, using original prompt")
            return RefinedPrompt(text=prompt, refined=False)

        return RefinedPrompt(text=refined, refined=True)
