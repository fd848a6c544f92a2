"""
Hash Utilities for Exercise Cache Keys

Exercises are cached under the hash of the prompt that generated them, so a
prompt edit changes the key and old exercises stop being served.

Usage:
    from grammar_drills.utils.hash_utils import calculate_prompt_hash

    prompt_hash = calculate_prompt_hash(topic.prompt)
"""

import hashlib


def calculate_prompt_hash(prompt: str) -> str:
    """
    Calculate the cache key of a topic prompt.

    Args:
        prompt: Prompt text exactly as stored on the topic

    Returns:
        SHA-256 hex digest of the UTF-8 encoded prompt
    """
    return hashlib.sha256(prompt.encode("utf-8")).hexdigest()


def short_hash(value: str, length: int = 12) -> str:
    """Shortened hash for log messages."""
    return value[:length]
