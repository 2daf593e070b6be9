"""Shared fixtures for the ShareSlides test suite."""
import json
import sys
from pathlib import Path

import pytest

# Add project root to path so imports work without an install
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


# ── Minimal deck records matching the persisted schema ──────────────────

def make_deck(slug, **extra):
    deck = {
        "slug": slug,
        "title": slug.replace("-", " ").title(),
        "tags": [],
        "language": "en",
        "category": "Organic",
        "assets": {
            "pdf": f"/decks/{slug}/deck.pdf",
            "cover": f"/decks/{slug}/cover.webp",
        },
    }
    deck.update(extra)
    return deck


LEGACY_STATS = {
    "_meta": {"capturedAt": "2025-01-01T00:00:00Z"},
    "power-platform-intro": {"likes": 1, "views": 10, "downloads": 2},
    "old-filename-stem": {"likes": 4, "views": 250, "downloads": 7, "privacy": "public"},
}


def write_json(path: Path, data) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def sample_decks():
    return [
        make_deck("power-platform-intro", uploadedAt="2020-01-01T00:00:00Z",
                  tags=["powerapps", "lowcode"], shortId=1),
        make_deck("undated-deck", tags=["dataverse"]),
        make_deck("copilot-studio", uploadedAt="2022-01-01T00:00:00Z",
                  tags=["ai", "lowcode"], shortId=2, category="AI"),
    ]


@pytest.fixture
def project_root(tmp_path, sample_decks):
    """A project checkout with deck files and a legacy stats table."""
    decks_dir = tmp_path / "src" / "content" / "decks"
    for deck in sample_decks:
        write_json(decks_dir / f"{deck['slug']}.json", deck)
    write_json(tmp_path / "src" / "content" / "legacy-stats.json", LEGACY_STATS)
    (tmp_path / "public" / "decks").mkdir(parents=True)
    (tmp_path / "data").mkdir()
    return tmp_path


@pytest.fixture
def decks_dir(project_root):
    return project_root / "src" / "content" / "decks"


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    for name in (
        "SHARESLIDES_ROOT",
        "SHARESLIDES_DECKS_DIR",
        "SHARESLIDES_LEGACY_STATS",
        "SHARESLIDES_PUBLIC_DECKS_DIR",
        "SHARESLIDES_EXPORT_JSON",
        "SHARESLIDES_EXPORT_CSV",
    ):
        # setenv first so values loaded from a .env file are undone at teardown
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
