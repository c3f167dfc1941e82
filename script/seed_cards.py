#!/usr/bin/env python3
"""
Seed the MongoDB `cards` collection with the starter catalog.

Ids are name slugs; a slug already present in the collection (or used earlier
in the same run) gets a -2, -3, ... suffix, so re-running adds copies.
Use --skip-existing to leave cards whose name is already stored untouched.

Usage:
    python script/seed_cards.py
    python script/seed_cards.py --dry-run
    python script/seed_cards.py --skip-existing
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List

# Make the project root importable when run from script/
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from database.card_repository import CardRepository  # noqa: E402
from database.mongodb_client import MongoDBClient  # noqa: E402
from database.seed_data import load_seed_cards  # noqa: E402

logger = logging.getLogger("seed_cards")


def seed(repository: CardRepository, dry_run: bool = False, skip_existing: bool = False) -> List[str]:
    """
    Write the starter catalog

    Returns:
        Ids written (or that would be written with dry_run)
    """
    existing_names = {card.name for card in repository.get_all()} if skip_existing else set()
    used_ids: List[str] = []

    for card in load_seed_cards():
        if card.name in existing_names:
            logger.info("  skip  %s (already stored)", card.name)
            continue

        if dry_run:
            card_id = repository.allocate_id(card.name, used_ids)
        else:
            card_id = repository.create(card, reserved=used_ids)
        used_ids.append(card_id)
        logger.info("  %s  %s -> %s", "plan" if dry_run else "saved", card.name, card_id)

    return used_ids


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed the card catalog")
    parser.add_argument("--dry-run", action="store_true", help="Show the ids without writing")
    parser.add_argument("--skip-existing", action="store_true", help="Skip cards whose name is already stored")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(message)s")

    mongo_client = MongoDBClient()
    try:
        repository = CardRepository(mongo_client.get_collection())
        ids = seed(repository, dry_run=args.dry_run, skip_existing=args.skip_existing)
        logger.info("Done: %d card(s)%s", len(ids), " (dry run)" if args.dry_run else "")
        logger.info("Collection stats: %s", mongo_client.get_stats())
    finally:
        mongo_client.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
