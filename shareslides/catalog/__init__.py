"""Deck catalog loading, storage and validation for ShareSlides."""

from shareslides.catalog.loader import (
    Catalog,
    CatalogIntegrityError,
    CatalogNotInitializedError,
    build_catalog,
    deck_key,
    find_duplicates,
    get_catalog,
    init_catalog,
    load_catalog,
    merge_legacy_stats,
    parse_uploaded_at,
    sort_by_uploaded_at,
)
from shareslides.catalog.store import (
    DeckFileError,
    find_deck_files,
    read_deck,
    read_decks,
    read_legacy_stats,
    write_deck,
)

__all__ = [
    # loader.py
    "Catalog",
    "CatalogIntegrityError",
    "CatalogNotInitializedError",
    "build_catalog",
    "deck_key",
    "find_duplicates",
    "get_catalog",
    "init_catalog",
    "load_catalog",
    "merge_legacy_stats",
    "parse_uploaded_at",
    "sort_by_uploaded_at",
    # store.py
    "DeckFileError",
    "find_deck_files",
    "read_deck",
    "read_decks",
    "read_legacy_stats",
    "write_deck",
]
