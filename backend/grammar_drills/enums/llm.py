"""
LLM-related enums.

Operations are used for model selection and for attributing calls in logs.
"""

from enum import Enum


class LLMOperation(str, Enum):
    """
    Operations that call an LLM.

    Usage:
        from grammar_drills.enums import LLMOperation

        content, usage = await client.complete(
            operation=LLMOperation.EXERCISE_GENERATION,
            messages=[...],
            json_mode=True,
        )
    """

    # Generate a batch of exercises from a topic prompt (JSON output)
    EXERCISE_GENERATION = "exercise_generation"

    # Rewrite a topic prompt for more varied output (plain text)
    PROMPT_REFINEMENT = "prompt_refinement"
