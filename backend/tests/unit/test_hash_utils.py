"""
Unit tests for hash utilities.
"""

import hashlib

from grammar_drills.utils.hash_utils import calculate_prompt_hash, short_hash


class TestHashUtils:
    """Tests for hash utility functions."""

    def test_calculate_prompt_hash(self):
        """Equal prompts hash equally, different prompts differ."""
        hash1 = calculate_prompt_hash("test")
        hash2 = calculate_prompt_hash("test")
        hash3 = calculate_prompt_hash("different")

        assert hash1 == hash2
        assert hash1 != hash3
        assert len(hash1) == 64

    def test_prompt_hash_is_sha256_hex_of_utf8(self):
        """Prompt hash is the SHA-256 hex digest of the UTF-8 prompt."""
        prompt = "Erzeuge Übungen zu Präpositionen."
        expected = hashlib.sha256(prompt.encode("utf-8")).hexdigest()

        assert calculate_prompt_hash(prompt) == expected

    def test_prompt_hash_is_sensitive_to_whitespace(self):
        """Any edit to the prompt, including whitespace, changes the hash."""
        assert calculate_prompt_hash("Prompt") != calculate_prompt_hash("Prompt ")

    def test_short_hash(self):
        """Test short hash truncation."""
        full = calculate_prompt_hash("test")

        assert short_hash(full) == full[:12]
        assert short_hash(full, length=8) == full[:8]
