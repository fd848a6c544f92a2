#!/usr/bin/env python3
"""
Topic Management Script

Inspect topics and prompt versions, seed the default topics and pre-fill the
exercise cache from the command line.

Setup:
    1. Ensure the database is reachable (DATABASE_URL or POSTGRES_* in .env)
    2. For `warm`, set an LLM provider key (e.g. OPENAI_API_KEY)

Usage:
    # Create the default topics if the database has none
    python backend/scripts/manage_topics.py seed

    # List topics with their cached exercise counts
    python backend/scripts/manage_topics.py list

    # Show the retained prompt versions of a topic
    python backend/scripts/manage_topics.py versions <topic_id>

    # Generate one round of exercises for a topic
    python backend/scripts/manage_topics.py warm <topic_id>
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Add backend to path for imports (must be before grammar_drills.* imports)
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

project_root = Path(__file__).parent.parent.parent
load_dotenv(project_root / ".env")

from grammar_drills.db.base import async_session_maker, engine, init_db
from grammar_drills.middleware.error_handling import ServiceError
from grammar_drills.services.content_store import ContentStore
from grammar_drills.services.exercises import (
    ExerciseCacheFiller,
    ExerciseContentClient,
    PromptRefiner,
)
from grammar_drills.services.llm import get_llm_client
from grammar_drills.services.topic_seed import load_default_topics, seed_default_topics
from grammar_drills.utils.hash_utils import calculate_prompt_hash, short_hash
from grammar_drills.utils.log_setup import setup_logging


async def seed() -> None:
    async with async_session_maker() as session:
        created = await seed_default_topics(ContentStore(session), load_default_topics())
    print(f"Created {created} topics")


async def list_topics() -> None:
    async with async_session_maker() as session:
        store = ContentStore(session)
        topics = await store.list_topics()
        if not topics:
            print("No topics found. Run `seed` to create the default topics.")
            return

        for topic in topics:
            prompt_hash = calculate_prompt_hash(topic.prompt)
            cached = await store.list_exercises(topic.id, prompt_hash)
            print(f"{topic.name}")
            print(f"   ID: {topic.id}")
            print(f"   Prompt hash: {short_hash(prompt_hash)}")
            print(f"   Cached exercises: {len(cached)}")
            print(f"   Updated: {topic.updated_at.strftime('%Y-%m-%d %H:%M')}")
            print()


async def list_versions(topic_id: str) -> None:
    async with async_session_maker() as session:
        store = ContentStore(session)
        topic = await store.get_topic(topic_id)
        versions = await store.list_versions(topic_id)

    print(f"{topic.name}: {len(versions)} retained versions\n")
    for version in versions:
        first_line = version.prompt.strip().splitlines()[0] if version.prompt.strip() else ""
        print(f"  v{version.version}  {version.created_at.strftime('%Y-%m-%d %H:%M')}  {version.id}")
        print(f"       {first_line[:80]}")


async def warm(topic_id: str, refine: bool) -> None:
    llm_client = get_llm_client()
    async with async_session_maker() as session:
        store = ContentStore(session)
        topic = await store.get_topic(topic_id)
        filler = ExerciseCacheFiller(
            store,
            ExerciseContentClient(llm_client),
            PromptRefiner(llm_client, enabled=refine),
        )
        result = await filler.fill(topic, calculate_prompt_hash(topic.prompt))

    print(f"Stored {len(result.exercises)} of {result.requested} generated exercises")
    if result.skipped:
        print(f"Skipped {result.skipped} exercises that failed to save (see log)")


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Manage grammar topics")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")

    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("seed", help="Create the default topics if none exist")
    subparsers.add_parser("list", help="List topics")

    versions_parser = subparsers.add_parser("versions", help="List prompt versions")
    versions_parser.add_argument("topic_id")

    warm_parser = subparsers.add_parser("warm", help="Generate exercises for a topic")
    warm_parser.add_argument("topic_id")
    warm_parser.add_argument(
        "--no-refine", action="store_true", help="Generate with the stored prompt"
    )
    return parser


async def main() -> None:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    setup_logging(args.debug)
    await init_db()

    try:
        if args.command == "seed":
            await seed()
        elif args.command == "list":
            await list_topics()
        elif args.command == "versions":
            await list_versions(args.topic_id)
        elif args.command == "warm":
            await warm(args.topic_id, refine=not args.no_refine)
    except ServiceError as e:
        logging.error(e.message)
        sys.exit(1)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
