"""
Exercise Content Client

Turns a prompt into a list of exercise payloads with one JSON-mode LLM call.
The payloads are opaque: only their container shape is checked.

Expected model output:
    {"exercises": [{...}, {...}, ...]}

A bare JSON list of objects is accepted as well.

Usage:
    from grammar_drills.services.exercises.content_client import ExerciseContentClient

    client = ExerciseContentClient(get_llm_client())
    payloads = await client.generate_exercises(prompt)
"""

import asyncio
import json
import logging
from typing import Any, Optional

from grammar_drills.config import settings
from grammar_drills.enums import LLMOperation
from grammar_drills.middleware.error_handling import GenerationError, LLMError
from grammar_drills.services.llm import LLMClient, build_messages

logger = logging.getLogger(__name__)


def parse_exercise_payloads(content: Any) -> list[dict[str, Any]]:
    """
    Extract exercise payloads from a parsed model response.

    Args:
        content: Parsed JSON returned by the model

    Returns:
        Non-empty list of exercise objects

    Raises:
        GenerationError: If the response has no usable exercises
    """
    if isinstance(content, dict):
        items = content.get("exercises")
    elif isinstance(content, list):
        items = content
    else:
        items = None

    if not isinstance(items, list):
        raise GenerationError(
            "Model response has no 'exercises' list",
            details={"response_type": type(content).__name__},
        )

    payloads = [item for item in items if isinstance(item, dict)]
    skipped = len(items) - len(payloads)
    if skipped:
        logger.warning(f"Dropped {skipped} exercise entries that are not JSON objects")

    if not payloads:
        raise GenerationError("Model returned no exercises")

    return payloads


class ExerciseContentClient:
    """
    Generates exercise payloads for a prompt.

    Every failure of the call (provider error, timeout, malformed JSON,
    empty result) surfaces as GenerationError.
    """

    def __init__(
        self,
        llm_client: LLMClient,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        temperature: Optional[float] = None,
    ):
        """
        Initialize the content client.

        Args:
            llm_client: LLM client used for the call
            model: Model override (default: per-operation setting)
            timeout: Overall deadline in seconds, including retries
                (default: settings.GENERATION_TIMEOUT_SECONDS)
            temperature: Sampling temperature
                (default: settings.EXERCISE_GENERATION_TEMPERATURE)
        """
        self.llm = llm_client
        self.model = model
        self.timeout = timeout or settings.GENERATION_TIMEOUT_SECONDS
        self.temperature = (
            temperature
            if temperature is not None
            else settings.EXERCISE_GENERATION_TEMPERATURE
        )

    async def generate_exercises(self, prompt: str) -> list[dict[str, Any]]:
        """
        Ask the model for a batch of exercises.

        Args:
            prompt: Generation prompt (refined or as stored on the topic)

        Returns:
            Exercise payloads in the order the model returned them

        Raises:
            GenerationError: If the call fails or returns no usable exercises
        """
        try:
            content, usage = await asyncio.wait_for(
                self.llm.complete(
                    operation=LLMOperation.EXERCISE_GENERATION,
                    messages=build_messages(prompt),
                    temperature=self.temperature,
                    json_mode=True,
                    model=self.model,
                    timeout=self.timeout,
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise GenerationError(
                f"Exercise generation timed out after {self.timeout:.0f}s"
            ) from e
        except json.JSONDecodeError as e:
            raise GenerationError("Model returned malformed JSON") from e
        except LLMError as e:
            raise GenerationError(e.message) from e
        except Exception as e:
            raise GenerationError(f"Exercise generation failed: {e}") from e

        payloads = parse_exercise_payloads(content)
        logger.info(f"Generated {len(payloads)} exercises ({usage})")
        return payloads
