"""
Unit tests for default topic seeding.
"""

from unittest.mock import AsyncMock, patch

import pytest

from grammar_drills.services.topic_seed import load_default_topics, seed_default_topics


class TestLoadDefaultTopics:
    """Tests for reading the default topic catalogue."""

    def test_shipped_catalogue(self):
        """The shipped config has topics with non-empty names and prompts."""
        topics = load_default_topics()

        assert len(topics) == 3
        assert all(topic["name"] and topic["prompt"] for topic in topics)
        assert all("exercises" in topic["prompt"] for topic in topics)

    def test_malformed_entries_are_skipped(self):
        config = {
            "default_topics": [
                {"name": "Valid", "prompt": "  Generate exercises  "},
                {"name": "No prompt"},
                "just a string",
                {"name": "", "prompt": "x"},
            ]
        }

        topics = load_default_topics(config)

        assert topics == [{"name": "Valid", "prompt": "Generate exercises"}]

    def test_missing_key(self):
        assert load_default_topics({}) == []


class TestSeedDefaultTopics:
    """Tests for seed_default_topics."""

    @pytest.mark.asyncio
    async def test_seeds_empty_database(self, store):
        topics = [{"name": "A", "prompt": "a"}, {"name": "B", "prompt": "b"}]

        created = await seed_default_topics(store, topics)

        assert created == 2
        assert [t.name for t in await store.list_topics()] == ["A", "B"]

    @pytest.mark.asyncio
    async def test_existing_topics_untouched(self, store):
        """Seeding is skipped as soon as one topic exists."""
        await store.create_topic("Mine", "custom prompt")

        created = await seed_default_topics(store, [{"name": "A", "prompt": "a"}])

        assert created == 0
        assert [t.name for t in await store.list_topics()] == ["Mine"]

    @pytest.mark.asyncio
    async def test_seeding_twice_is_idempotent(self, store):
        topics = [{"name": "A", "prompt": "a"}]

        await seed_default_topics(store, topics)
        await seed_default_topics(store, topics)

        assert await store.count_topics() == 1

    @pytest.mark.asyncio
    async def test_failed_topic_does_not_stop_seeding(self, store):
        original_create = store.create_topic

        async def create_topic(name, prompt):
            if name == "Broken":
                raise RuntimeError("insert failed")
            return await original_create(name, prompt)

        topics = [{"name": "Broken", "prompt": "x"}, {"name": "Fine", "prompt": "y"}]
        with patch.object(store, "create_topic", AsyncMock(side_effect=create_topic)):
            created = await seed_default_topics(store, topics)

        assert created == 1
        assert [t.name for t in await store.list_topics()] == ["Fine"]
