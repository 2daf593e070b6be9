"""Assign short numeric IDs to decks: oldest upload = 1, newest = highest."""

import logging
from pathlib import Path
from typing import NamedTuple, Optional

from shareslides.catalog.loader import parse_uploaded_at
from shareslides.catalog.store import DeckFileError, find_deck_files, read_deck, write_deck

logger = logging.getLogger(__name__)


class ShortIdAssignment(NamedTuple):
    short_id: int
    title: str
    uploaded_at: Optional[str]


def format_short_id(short_id: int) -> str:
    return str(short_id).zfill(2)


def _oldest_first_key(deck: dict) -> tuple:
    uploaded = parse_uploaded_at(deck.get("uploadedAt"))
    if uploaded is None:
        return (1, 0.0)
    return (0, uploaded.timestamp())


def assign_short_ids(decks_dir: Path) -> list[ShortIdAssignment]:
    """Number every deck by upload date and rewrite its file.

    Undated decks are numbered after all dated ones, in filename order.
    """
    decks = []
    for deck_path in find_deck_files(decks_dir):
        try:
            decks.append((deck_path, read_deck(deck_path)))
        except DeckFileError as e:
            logger.warning(str(e))

    decks.sort(key=lambda item: _oldest_first_key(item[1]))

    assignments = []
    for short_id, (deck_path, deck) in enumerate(decks, start=1):
        deck["shortId"] = short_id
        write_deck(deck_path, deck)
        assignments.append(ShortIdAssignment(short_id, deck.get("title", ""), deck.get("uploadedAt")))
        logger.debug(f"{format_short_id(short_id)}: {deck_path.name}")

    return assignments
