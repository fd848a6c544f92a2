"""
Exercise delivery: cache lookup, review scheduling and cache fill.

Modules:
- srs.py: due-date rules and batch sampling (pure functions)
- content_client.py: one LLM call that returns exercise payloads
- prompt_refiner.py: optional prompt rewrite before generation
- cache_fill.py: refine, generate and store new exercises
- service.py: ExerciseBatchService, the entry point for handlers
"""

from grammar_drills.services.exercises.cache_fill import CacheFillResult, ExerciseCacheFiller
from grammar_drills.services.exercises.content_client import (
    ExerciseContentClient,
    parse_exercise_payloads,
)
from grammar_drills.services.exercises.prompt_refiner import PromptRefiner, RefinedPrompt
from grammar_drills.services.exercises.service import ExerciseBatch, ExerciseBatchService

__all__ = [
    "CacheFillResult",
    "ExerciseCacheFiller",
    "ExerciseContentClient",
    "parse_exercise_payloads",
    "PromptRefiner",
    "RefinedPrompt",
    "ExerciseBatch",
    "ExerciseBatchService",
]
