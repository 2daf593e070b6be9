#!/usr/bin/env python3
"""
Deck Validator

Validates deck JSON files against the deck schema and performs
additional lint checks for consistency.

Usage:
    python -m shareslides.catalog.validate <deck.json> [<deck.json> ...]
    python -m shareslides.catalog.validate src/content/decks/*.json
"""

import json
import re
import sys
from pathlib import Path
from typing import Optional

import jsonschema

from .loader import parse_uploaded_at
from .store import DeckFileError, read_deck

SCHEMA_PATH = Path(__file__).resolve().parent.parent / "schemas" / "deck.schema.json"

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
LANGUAGE_PATTERN = re.compile(r"^[a-z]{2}$")
UPLOADED_AT_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(?:\.\d+)?Z$")


def load_schema(schema_path: Path = SCHEMA_PATH) -> dict:
    """Load the JSON schema file."""
    with open(schema_path, 'r', encoding='utf-8') as f:
        return json.load(f)


def validate_schema(record: dict, schema: dict) -> list[str]:
    """Validate a deck record against the JSON schema."""
    errors = []
    try:
        validator = jsonschema.Draft202012Validator(schema)
        for e in sorted(validator.iter_errors(record), key=lambda e: [str(p) for p in e.absolute_path]):
            errors.append(f"Schema error: {e.message} at {list(e.absolute_path)}")
    except jsonschema.SchemaError as e:
        errors.append(f"Schema definition error: {e.message}")

    return errors


def lint_deck(record: dict, source: Optional[Path] = None) -> tuple[list[str], list[str]]:
    """Perform additional lint checks beyond schema validation."""
    errors = []
    warnings = []

    slug = record.get('slug')
    if isinstance(slug, str) and slug:
        if not SLUG_PATTERN.match(slug):
            errors.append(f"slug must be lowercase letters, digits and hyphens, got '{slug}'")
        if source is not None and Path(source).stem != slug:
            errors.append(f"slug '{slug}' does not match filename '{Path(source).name}'")

    tags = record.get('tags')
    if isinstance(tags, list):
        for tag in tags:
            if isinstance(tag, str) and tag != tag.lower():
                errors.append(f"tag must be lowercase, got '{tag}'")
        seen = set()
        for tag in tags:
            if not isinstance(tag, str):
                continue
            if tag in seen:
                warnings.append(f"tag '{tag}' appears more than once")
            seen.add(tag)

    language = record.get('language')
    if isinstance(language, str) and not LANGUAGE_PATTERN.match(language):
        errors.append(f"language must be a two-letter lowercase code, got '{language}'")

    uploaded_at = record.get('uploadedAt')
    if uploaded_at:
        if parse_uploaded_at(uploaded_at) is None:
            errors.append(f"uploadedAt is not a valid timestamp: {uploaded_at!r}")
        elif isinstance(uploaded_at, str) and not UPLOADED_AT_PATTERN.match(uploaded_at):
            warnings.append(f"uploadedAt should be ISO 8601 with a Z offset, got '{uploaded_at}'")

    if 'category' not in record:
        warnings.append("category not set (treated as Organic)")

    return errors, warnings


def validate_deck_file(deck_path: Path, schema: Optional[dict] = None) -> tuple[bool, list[str], list[str]]:
    """
    Validate a deck JSON file.

    Returns:
        (is_valid, errors, warnings)
    """
    if schema is None:
        schema = load_schema()

    try:
        record = read_deck(deck_path)
    except DeckFileError as e:
        return False, [str(e)], []

    errors = validate_schema(record, schema)
    lint_errors, warnings = lint_deck(record, deck_path)
    errors.extend(lint_errors)

    return len(errors) == 0, errors, warnings


def main():
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)

    schema = load_schema()
    failed = 0
    for arg in sys.argv[1:]:
        deck_path = Path(arg)
        is_valid, errors, warnings = validate_deck_file(deck_path, schema)
        status = "OK" if is_valid else "FAIL"
        print(f"[{status}] {deck_path}")
        for error in errors:
            print(f"  [ERROR] {error}")
        for warning in warnings:
            print(f"  [WARN] {warning}")
        if not is_valid:
            failed += 1

    sys.exit(1 if failed else 0)


if __name__ == '__main__':
    main()
