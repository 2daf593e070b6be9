"""
Deck catalog loader.

Loads all deck records, merges in the legacy stats side-table, sorts by
upload date (newest first) and exposes lookups by slug, short ID and tag.

Usage:
    from shareslides.catalog.loader import load_catalog

    catalog = load_catalog(Path("src/content/decks"), Path("src/content/legacy-stats.json"))
    for deck in catalog.load_all():
        print(deck["slug"], deck.get("uploadedAt"))

The catalog is a plain value built once from its inputs. Code that wants a
single shared instance calls init_catalog() explicitly at startup and
get_catalog() afterwards; importing this module has no side effects.
"""

import logging
import re
from collections import Counter
from collections.abc import Iterable, Iterator, Mapping
from datetime import datetime, timezone
from pathlib import Path, PurePath
from typing import Optional, Union

from .store import DeckFileError, read_decks, read_legacy_stats

logger = logging.getLogger(__name__)

META_KEY = "_meta"

DeckSource = Union[str, PurePath]

# Fractional seconds of any length; padded or cut to microseconds before parsing
_FRACTION = re.compile(r"(T\d{2}:\d{2}:\d{2})\.(\d+)")


class CatalogIntegrityError(Exception):
    """Two or more records share a slug or short ID."""

    def __init__(self, duplicates: dict):
        self.duplicates = duplicates
        parts = []
        for field, values in duplicates.items():
            for value, count in values.items():
                parts.append(f"{field}={value!r} x{count}")
        super().__init__("Duplicate deck keys: " + ", ".join(parts))


class CatalogNotInitializedError(Exception):
    """get_catalog() was called before init_catalog()."""
    pass


# =============================================================================
# Key resolution and stats merge
# =============================================================================

def deck_key(record: Mapping, source: Optional[DeckSource] = None) -> str:
    """Resolve the lookup key for a record.

    Precedence:
        1. the record's own non-empty ``slug``
        2. the filename stem of ``source`` (e.g. ``decks/foo.json`` -> ``foo``)

    Returns an empty string when neither is available.
    """
    slug = record.get("slug")
    if isinstance(slug, str) and slug:
        return slug
    if source is None:
        return ""
    return PurePath(str(source)).stem


def _is_stats_entry(entry) -> bool:
    if not isinstance(entry, Mapping):
        return False
    views = entry.get("views")
    return isinstance(views, (int, float)) and not isinstance(views, bool)


def captured_at(legacy_stats: Mapping) -> Optional[str]:
    """Return the table-wide capture timestamp, if any."""
    meta = legacy_stats.get(META_KEY)
    if isinstance(meta, Mapping):
        return meta.get("capturedAt")
    return None


def merge_legacy_stats(record: dict, key: str, legacy_stats: Mapping) -> dict:
    """Attach legacy stats to a record when the table has an entry for its key.

    A matched record is returned as a shallow copy with ``legacyStats`` set;
    the shared ``_meta.capturedAt`` is broadcast onto it. An unmatched record
    is returned as-is.
    """
    if not key or key == META_KEY:
        return record

    entry = legacy_stats.get(key)
    if not _is_stats_entry(entry):
        return record

    stats = dict(entry)
    stats.pop("capturedAt", None)
    timestamp = captured_at(legacy_stats)
    if timestamp is not None:
        stats["capturedAt"] = timestamp

    merged = dict(record)
    merged["legacyStats"] = stats
    return merged


# =============================================================================
# Ordering
# =============================================================================

def parse_uploaded_at(value) -> Optional[datetime]:
    """Parse an ``uploadedAt`` value into an aware UTC datetime.

    Missing and empty values are undated. Values that are present but not a
    valid ISO 8601 timestamp are logged and also treated as undated.
    Fractional seconds of any precision are accepted.
    """
    if value is None or value == "":
        return None

    if not isinstance(value, str):
        logger.warning(f"Ignoring non-string uploadedAt value: {value!r}")
        return None

    text = value.strip()
    if text[-1:] in ("Z", "z"):
        text = text[:-1] + "+00:00"
    text = _FRACTION.sub(lambda m: f"{m.group(1)}.{m.group(2)[:6].ljust(6, '0')}", text)

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        logger.warning(f"Ignoring malformed uploadedAt value: {value!r}")
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _recency_key(record: Mapping) -> tuple:
    uploaded = parse_uploaded_at(record.get("uploadedAt"))
    if uploaded is None:
        return (1, 0.0)
    return (0, -uploaded.timestamp())


def sort_by_uploaded_at(records: Iterable[dict]) -> list[dict]:
    """Sort newest first. Undated records go last; ties keep input order."""
    return sorted(records, key=_recency_key)


# =============================================================================
# Integrity
# =============================================================================

def _is_short_id(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def find_duplicates(records: Iterable[Mapping]) -> dict:
    """Report slugs and short IDs used by more than one record.

    Returns:
        {"slug": {value: count}, "shortId": {value: count}}, only
        values with count > 1 are included
    """
    slugs = Counter()
    short_ids = Counter()
    for record in records:
        slug = record.get("slug")
        if isinstance(slug, str) and slug:
            slugs[slug] += 1
        short_id = record.get("shortId")
        if _is_short_id(short_id):
            short_ids[short_id] += 1

    return {
        "slug": {k: n for k, n in slugs.items() if n > 1},
        "shortId": {k: n for k, n in short_ids.items() if n > 1},
    }


# =============================================================================
# Catalog
# =============================================================================

class Catalog:
    """Immutable, sorted snapshot of all deck records.

    The record dicts are shared with the caller (unmatched records are the
    input objects themselves) and must be treated as read-only.
    """

    __slots__ = ("_records", "_by_slug", "_by_short_id", "_duplicates")

    def __init__(self, records: Iterable[dict], duplicates: Optional[dict] = None):
        self._records = tuple(records)
        duplicates = duplicates or {"slug": {}, "shortId": {}}
        self._duplicates = {field: dict(values) for field, values in duplicates.items()}

        # First record in catalog order wins on duplicate keys
        self._by_slug = {}
        self._by_short_id = {}
        for record in self._records:
            slug = record.get("slug")
            if isinstance(slug, str):
                self._by_slug.setdefault(slug, record)
            short_id = record.get("shortId")
            if _is_short_id(short_id):
                self._by_short_id.setdefault(short_id, record)

    def load_all(self) -> tuple[dict, ...]:
        """All records, newest upload first."""
        return self._records

    def find_by_slug(self, slug: str) -> Optional[dict]:
        return self._by_slug.get(slug)

    def find_by_short_id(self, short_id: int) -> Optional[dict]:
        if not _is_short_id(short_id):
            return None
        return self._by_short_id.get(short_id)

    def all_tags(self) -> list[str]:
        """Every tag used by any deck, deduplicated and sorted."""
        tags = set()
        for record in self._records:
            record_tags = record.get("tags")
            if isinstance(record_tags, list):
                tags.update(t for t in record_tags if isinstance(t, str))
        return sorted(tags)

    @property
    def duplicates(self) -> dict:
        """Copy of the duplicate-key report computed at build time."""
        return {field: dict(values) for field, values in self._duplicates.items()}

    @property
    def has_duplicates(self) -> bool:
        return any(self._duplicates.values())

    def __iter__(self) -> Iterator[dict]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"Catalog({len(self._records)} decks)"


def _iter_sources(decks) -> Iterator[tuple[Optional[DeckSource], dict]]:
    if isinstance(decks, Mapping):
        yield from decks.items()
    else:
        for record in decks:
            yield None, record


def build_catalog(
    decks: Union[Mapping[DeckSource, dict], Iterable[dict]],
    legacy_stats: Optional[Mapping] = None,
    *,
    strict: bool = False,
) -> Catalog:
    """Merge legacy stats into deck records and sort them into a Catalog.

    Args:
        decks: Mapping of storage location to record, or an iterable of records
        legacy_stats: Parsed legacy stats table (may be None or empty)
        strict: Raise CatalogIntegrityError on duplicate slugs or short IDs
            instead of logging them

    Returns:
        Catalog with one entry per input record
    """
    legacy_stats = legacy_stats or {}

    merged = []
    for source, record in _iter_sources(decks):
        key = deck_key(record, source)
        merged.append(merge_legacy_stats(record, key, legacy_stats))

    duplicates = find_duplicates(merged)
    if any(duplicates.values()):
        if strict:
            raise CatalogIntegrityError(duplicates)
        for field, values in duplicates.items():
            for value, count in values.items():
                logger.warning(f"Duplicate {field} {value!r} used by {count} decks; first one wins")

    return Catalog(sort_by_uploaded_at(merged), duplicates)


def load_catalog(decks_dir: Path, stats_path: Optional[Path] = None, *, strict: bool = False) -> Catalog:
    """Read deck files and the legacy stats table from disk and build a Catalog."""
    decks = read_decks(decks_dir)

    legacy_stats = {}
    if stats_path is not None:
        try:
            legacy_stats = read_legacy_stats(stats_path)
        except DeckFileError as e:
            logger.warning(f"{e}; continuing without legacy stats")
    catalog = build_catalog(decks, legacy_stats, strict=strict)
    logger.debug(f"Loaded {len(catalog)} decks from {decks_dir}")
    return catalog


# =============================================================================
# Shared instance
# =============================================================================

_shared_catalog: Optional[Catalog] = None


def init_catalog(decks_dir: Path, stats_path: Optional[Path] = None, *, strict: bool = False) -> Catalog:
    """Load the catalog and install it as the process-wide instance.

    Calling this again replaces the previous snapshot.
    """
    global _shared_catalog
    _shared_catalog = load_catalog(decks_dir, stats_path, strict=strict)
    return _shared_catalog


def get_catalog() -> Catalog:
    """Return the instance installed by init_catalog()."""
    if _shared_catalog is None:
        raise CatalogNotInitializedError("init_catalog() must be called before get_catalog()")
    return _shared_catalog


def reset_catalog() -> None:
    """Drop the shared instance."""
    global _shared_catalog
    _shared_catalog = None
