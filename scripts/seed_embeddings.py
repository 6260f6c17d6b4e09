#!/usr/bin/env python3
"""
Seed Embeddings Script

Out-of-band ingestion for vector search: the API never writes embeddings,
so this script inserts sample notes and/or backfills the ``embedding``
column of existing notes from their title and body.

Usage:
    Requires the database to be reachable with the usual POSTGRES_* env vars:
    $ python scripts/seed_embeddings.py            # backfill missing embeddings
    $ python scripts/seed_embeddings.py --samples  # insert sample notes first
    $ python scripts/seed_embeddings.py --log-level DEBUG
"""

import argparse
import asyncio
import logging
import os
import sys

# Required for direct script execution without package installation
sys.path.append(os.path.join(os.path.dirname(__file__), "../src"))

from mod_notes.core.database import AsyncSessionLocal, dispose_engine  # noqa: E402
from mod_notes.core.logging import setup_logging  # noqa: E402
from mod_notes.models import Note  # noqa: E402
from mod_notes.repositories.notes import NoteRepository  # noqa: E402
from mod_notes.retrieval.embedding import synthesize_embedding  # noqa: E402

logger = logging.getLogger("mod_notes.scripts.seed_embeddings")

SAMPLE_NOTES = [
    ("Machine Learning", "Supervised models learn from labelled examples."),
    ("Deep Learning", "Neural networks with many layers learn representations."),
    ("Artificial Intelligence", "Systems that perceive, reason and act."),
    ("Grocery List", "Milk, eggs, bread, coffee."),
]


async def insert_samples(repo: NoteRepository) -> int:
    """Insert the sample notes, embedding included."""
    for title, body in SAMPLE_NOTES:
        note = await repo.create({"title": title, "body": body})
        await repo.update_embedding(note.id, synthesize_embedding(note.full_text))
    return len(SAMPLE_NOTES)


async def backfill(repo: NoteRepository) -> int:
    """Embed every note that has no embedding yet."""
    pending = await repo.find_where(Note.embedding.is_(None))
    for note in pending:
        await repo.update_embedding(note.id, synthesize_embedding(note.full_text))
    return len(pending)


async def main(samples: bool, log_level: str | None = None) -> None:
    setup_logging(log_level)
    try:
        async with AsyncSessionLocal() as session:
            repo = NoteRepository(session)
            if samples:
                logger.info(f"Inserted {await insert_samples(repo)} sample notes")
            logger.info(f"Backfilled embeddings for {await backfill(repo)} notes")
    finally:
        await dispose_engine()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument(
        "--samples", action="store_true", help="insert sample notes before backfilling"
    )
    parser.add_argument(
        "--log-level", default=None, help="override LOG_LEVEL, e.g. DEBUG"
    )
    args = parser.parse_args()
    asyncio.run(main(args.samples, args.log_level))
