"""Reading and writing deck JSON files."""

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class DeckFileError(Exception):
    """A deck or stats file could not be read or parsed."""
    pass


def find_deck_files(decks_dir: Path) -> list[Path]:
    """Find all deck JSON files in a directory, sorted by filename."""
    decks_dir = Path(decks_dir)
    if not decks_dir.is_dir():
        return []
    return sorted(p for p in decks_dir.glob("*.json") if p.is_file())


def read_deck(path: Path) -> dict:
    """Load a single deck JSON file."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise DeckFileError(f"Failed to load {path}: {e}") from e

    if not isinstance(data, dict):
        raise DeckFileError(f"Failed to load {path}: expected a JSON object")
    return data


def read_decks(decks_dir: Path) -> dict[Path, dict]:
    """Load every deck in a directory, skipping files that fail to parse.

    Returns:
        Mapping of deck file path to record, in filename order
    """
    decks = {}
    for path in find_deck_files(decks_dir):
        try:
            decks[path] = read_deck(path)
        except DeckFileError as e:
            logger.warning(str(e))
    return decks


def write_deck(path: Path, record: dict) -> Path:
    """Write a deck record as pretty-printed JSON with a trailing newline."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(json.dumps(record, indent=2, ensure_ascii=False) + "\n")
    return path


def read_legacy_stats(path: Path) -> dict:
    """Load the legacy stats table. A missing file is an empty table."""
    path = Path(path)
    if not path.exists():
        logger.debug(f"No legacy stats file at {path}")
        return {}

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise DeckFileError(f"Failed to load {path}: {e}") from e

    if not isinstance(data, dict):
        raise DeckFileError(f"Failed to load {path}: expected a JSON object")
    return data
