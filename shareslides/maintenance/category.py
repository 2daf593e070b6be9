"""Backfill the category field on deck files."""

import logging
from pathlib import Path

from shareslides.catalog.store import DeckFileError, find_deck_files, read_deck, write_deck

logger = logging.getLogger(__name__)

CATEGORIES = ("Organic", "AI")
DEFAULT_CATEGORY = "Organic"


def add_category_field(decks_dir: Path, default: str = DEFAULT_CATEGORY) -> tuple[list[str], list[str]]:
    """Set category on decks that have none.

    Returns:
        (updated, skipped) lists of deck file names
    """
    if default not in CATEGORIES:
        raise ValueError(f"Unknown category {default!r}, expected one of {CATEGORIES}")

    updated = []
    skipped = []
    for deck_path in find_deck_files(decks_dir):
        try:
            deck = read_deck(deck_path)
        except DeckFileError as e:
            logger.warning(str(e))
            continue

        if deck.get("category"):
            logger.info(f"Skipping {deck_path.name} - category already set to \"{deck['category']}\"")
            skipped.append(deck_path.name)
            continue

        deck["category"] = default
        write_deck(deck_path, deck)
        logger.info(f"Updated {deck_path.name} - added category: \"{default}\"")
        updated.append(deck_path.name)

    return updated, skipped
