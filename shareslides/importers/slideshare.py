"""
SlideShare export importer.

Generates one deck JSON file per slideshow found in a SlideShare data
export. Existing deck files are never overwritten.

Usage:
    shareslides import slideshare [data/slideshare-export.json]
"""

import json
import logging
import re
import unicodedata
from dataclasses import dataclass, field
from pathlib import Path

from shareslides.catalog.store import write_deck

logger = logging.getLogger(__name__)

SLUG_MAX_LENGTH = 60
SLUG_MIN_LENGTH = 3
DEFAULT_LANGUAGE = "en"

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9]+")
_URL_ID = re.compile(r"-(\d+)$")
_PPTX_URL = re.compile(r"\.pptx?$", re.IGNORECASE)


class SlideShareImportError(Exception):
    """The export file is missing or not in the expected shape."""
    pass


@dataclass
class ImportResult:
    created: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


def slugify(text: str) -> str:
    """Convert a title to a URL-safe slug."""
    text = unicodedata.normalize("NFD", text.lower())
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    text = _NON_SLUG_CHARS.sub("-", text).strip("-")
    return text[:SLUG_MAX_LENGTH]


def generate_slug(title: str, ident: str, existing: set[str]) -> str:
    """Slug from title, falling back to the ID and suffixing it on collision."""
    base = slugify(title)
    if len(base) < SLUG_MIN_LENGTH:
        base = f"deck-{ident}"

    if base in existing:
        return f"{base}-{ident}"
    return base


def parse_tags(tags) -> list[str]:
    """Parse tags from a list or a comma-separated string."""
    if not tags:
        return []
    if isinstance(tags, str):
        tags = tags.split(",")
    elif not isinstance(tags, list):
        return []
    return [t.strip().lower() for t in tags if isinstance(t, str) and t.strip()]


def normalize_language(lang) -> str:
    if not lang:
        return DEFAULT_LANGUAGE
    return str(lang).lower()[:2] or DEFAULT_LANGUAGE


def extract_id(item: dict, index: int) -> str:
    """Numeric ID from the slideshow URL, else the id field, else the position."""
    url = item.get("url")
    if url:
        match = _URL_ID.search(url)
        if match:
            return match.group(1)
    if item.get("id"):
        return str(item["id"])
    return str(index + 1)


def process_slideshow(item: dict, index: int, existing: set[str]) -> dict:
    """Build a deck record from one export entry and reserve its slug."""
    ident = extract_id(item, index)
    title = item.get("title") or f"Untitled Deck {ident}"
    slug = generate_slug(title, ident, existing)
    existing.add(slug)

    deck = {
        "slug": slug,
        "title": title,
        "tags": parse_tags(item.get("tags")),
        "language": normalize_language(item.get("language")),
        "assets": {
            "pdf": f"/decks/{slug}/deck.pdf",
            "cover": f"/decks/{slug}/cover.webp",
        },
    }

    description = item.get("description")
    if isinstance(description, str) and description.strip():
        deck["description"] = description.strip()

    download_url = item.get("download_url")
    if download_url and _PPTX_URL.search(download_url):
        deck["assets"]["pptx"] = f"/decks/{slug}/deck.pptx"

    source = {}
    if item.get("url"):
        source["slideshareUrl"] = item["url"]
    if download_url:
        source["downloadUrl"] = download_url
    if source:
        deck["source"] = source

    return deck


def extract_slideshows(data) -> list:
    """Find the slideshow list in an export payload."""
    if isinstance(data, dict):
        slideshows = data.get("slideshows_uploaded") or data.get("slideshows") or data
    else:
        slideshows = data

    if not isinstance(slideshows, list):
        raise SlideShareImportError("Expected slideshows_uploaded array in input file")
    return slideshows


def import_slideshare(input_path: Path, output_dir: Path) -> ImportResult:
    """Create deck files in output_dir for every slideshow in the export."""
    logger.info(f"Reading: {input_path}")
    try:
        with open(input_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise SlideShareImportError(f"Error reading input file: {e}") from e

    slideshows = extract_slideshows(data)
    logger.info(f"Found {len(slideshows)} slideshows")

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    result = ImportResult()
    existing: set[str] = set()

    for index, item in enumerate(slideshows):
        if not isinstance(item, dict):
            logger.warning(f"Skipping entry {index}: not an object")
            continue

        deck = process_slideshow(item, index, existing)
        output_path = output_dir / f"{deck['slug']}.json"

        if output_path.exists():
            logger.info(f"  Skip: {deck['slug']} (already exists)")
            result.skipped.append(deck["slug"])
            continue

        write_deck(output_path, deck)
        logger.info(f"  Created: {deck['slug']}")
        result.created.append(deck["slug"])

    return result
