"""
Import upload dates from the SlideShare CSV export into deck files.

Each deck is matched on its SlideShare URL (``source.slideshareUrl``, or the
older ``legacy.slideshareUrl``) against the CSV ``document_url`` column, and
``date_uploaded`` is written back as ``uploadedAt`` in ISO 8601 form.
"""

import csv
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from shareslides.catalog.store import DeckFileError, find_deck_files, read_deck, write_deck

logger = logging.getLogger(__name__)

URL_COLUMN = "document_url"
DATE_COLUMN = "date_uploaded"

# "2010-10-12 13:16:21 UTC"
_SLIDESHARE_DATE = re.compile(r"^(\d{4}-\d{2}-\d{2})\s+(\d{2}:\d{2}:\d{2})\s*(?:UTC)?$")


@dataclass
class UploadedAtResult:
    updated: int = 0
    missing_url: int = 0
    missing_match: int = 0


def to_iso(date_str: Optional[str]) -> Optional[str]:
    """Convert a SlideShare date to ISO 8601 with a Z offset."""
    if not date_str:
        return None
    match = _SLIDESHARE_DATE.match(date_str)
    if not match:
        return None
    date_part, time_part = match.groups()
    return f"{date_part}T{time_part}Z"


def read_csv_rows(csv_path: Path) -> list[list[str]]:
    """Read CSV rows with fields stripped and blank rows dropped."""
    rows = []
    with open(csv_path, "r", encoding="utf-8", newline="") as f:
        for row in csv.reader(f):
            fields = [value.strip() for value in row]
            if any(fields):
                rows.append(fields)
    return rows


def build_url_to_date_map(rows: list[list[str]]) -> dict[str, str]:
    """Map document URL to ISO upload date from parsed CSV rows."""
    if len(rows) < 2:
        return {}

    headers = [h.lower().strip() for h in rows[0]]
    if URL_COLUMN not in headers or DATE_COLUMN not in headers:
        logger.error(f"CSV missing required columns: {URL_COLUMN} and/or {DATE_COLUMN}")
        logger.error(f"Found headers: {headers}")
        return {}

    url_index = headers.index(URL_COLUMN)
    date_index = headers.index(DATE_COLUMN)

    url_to_date = {}
    for row in rows[1:]:
        if len(row) <= max(url_index, date_index):
            continue
        url = row[url_index]
        iso_date = to_iso(row[date_index])
        if url and iso_date:
            url_to_date[url] = iso_date

    return url_to_date


def deck_slideshare_url(deck: dict) -> Optional[str]:
    for section in ("source", "legacy"):
        value = deck.get(section)
        if isinstance(value, dict) and value.get("slideshareUrl"):
            return value["slideshareUrl"]
    return None


def apply_uploaded_at(decks_dir: Path, url_to_date: dict[str, str]) -> UploadedAtResult:
    """Write uploadedAt into every deck whose URL appears in the map."""
    result = UploadedAtResult()

    for deck_path in find_deck_files(decks_dir):
        try:
            deck = read_deck(deck_path)
        except DeckFileError as e:
            logger.warning(str(e))
            continue

        url = deck_slideshare_url(deck)
        if not url:
            result.missing_url += 1
            continue

        iso_date = url_to_date.get(url)
        if not iso_date:
            result.missing_match += 1
            logger.warning(f"No CSV match for: {url}")
            continue

        deck["uploadedAt"] = iso_date
        write_deck(deck_path, deck)
        result.updated += 1

    return result


def import_uploaded_at(csv_path: Path, decks_dir: Path) -> UploadedAtResult:
    """Read the CSV export and update deck files in place."""
    url_to_date = build_url_to_date_map(read_csv_rows(csv_path))
    logger.info(f"Loaded {len(url_to_date)} URLs from CSV")
    return apply_uploaded_at(decks_dir, url_to_date)
