"""
Default Topic Seeding

Fills an empty topic table with the default topics from config/default.yaml
(key: default_topics). Existing topics are never touched.
"""

import logging
from typing import Any, Optional

from grammar_drills.config import yaml_config
from grammar_drills.services.content_store import ContentStore

logger = logging.getLogger(__name__)


def load_default_topics(config: Optional[dict[str, Any]] = None) -> list[dict[str, str]]:
    """
    Read the default topic catalogue.

    Args:
        config: Parsed YAML config (default: config/default.yaml)

    Returns:
        List of {"name": ..., "prompt": ...} dicts; malformed entries are skipped
    """
    entries = (yaml_config if config is None else config).get("default_topics") or []

    topics = []
    for entry in entries:
        if not isinstance(entry, dict) or not entry.get("name") or not entry.get("prompt"):
            logger.warning(f"Ignoring malformed default topic entry: {entry!r}")
            continue
        topics.append({"name": str(entry["name"]).strip(), "prompt": str(entry["prompt"]).strip()})
    return topics


async def seed_default_topics(store: ContentStore, topics: list[dict[str, str]]) -> int:
    """
    Create the default topics if no topic exists yet.

    Args:
        store: Content store
        topics: Topics to create

    Returns:
        Number of topics created
    """
    if await store.count_topics() > 0:
        logger.debug("Topics already exist, skipping default topic seeding")
        return 0

    created = 0
    for topic in topics:
        try:
            await store.create_topic(topic["name"], topic["prompt"])
            created += 1
        except Exception as e:
            logger.error(f"Failed to seed default topic '{topic['name']}': {e}")

    logger.info(f"Seeded {created}/{len(topics)} default topics")
    return created
