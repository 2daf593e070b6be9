"""Tests for the SlideShare export and uploadedAt CSV importers."""
import json

import pytest

from shareslides.catalog.store import read_deck
from shareslides.importers.slideshare import (
    SlideShareImportError,
    extract_id,
    extract_slideshows,
    generate_slug,
    import_slideshare,
    normalize_language,
    parse_tags,
    process_slideshow,
    slugify,
)
from shareslides.importers.uploaded_at import (
    apply_uploaded_at,
    build_url_to_date_map,
    import_uploaded_at,
    read_csv_rows,
    to_iso,
)

from conftest import make_deck, write_json


class TestSlugify:

    def test_basic(self):
        assert slugify("Power Platform: Intro & Tips!") == "power-platform-intro-tips"

    def test_strips_diacritics(self):
        assert slugify("Käyttöönotto ja hallinta") == "kayttoonotto-ja-hallinta"

    def test_truncates_to_60(self):
        assert len(slugify("word " * 40)) == 60

    def test_generate_slug_short_title_uses_id(self):
        assert generate_slug("AI", "123", set()) == "deck-123"

    def test_generate_slug_collision_appends_id(self):
        existing = {"power-apps"}
        assert generate_slug("Power Apps", "42", existing) == "power-apps-42"


class TestFieldParsing:

    def test_parse_tags(self):
        assert parse_tags("PowerApps, Dataverse ,,") == ["powerapps", "dataverse"]
        assert parse_tags([" AI ", "", "LowCode"]) == ["ai", "lowcode"]
        assert parse_tags(None) == []
        assert parse_tags(7) == []

    def test_normalize_language(self):
        assert normalize_language("English") == "en"
        assert normalize_language("FI") == "fi"
        assert normalize_language(None) == "en"

    def test_extract_id(self):
        assert extract_id({"url": "https://www.slideshare.net/user/my-deck-123456"}, 0) == "123456"
        assert extract_id({"url": "https://www.slideshare.net/user/my-deck", "id": 77}, 0) == "77"
        assert extract_id({}, 4) == "5"


class TestProcessSlideshow:

    def test_full_record(self):
        item = {
            "title": "Copilot Studio Deep Dive",
            "url": "https://www.slideshare.net/user/copilot-studio-deep-dive-98765",
            "download_url": "https://cdn.example.com/files/deck.pptx",
            "description": "  Agents everywhere.  ",
            "tags": "Copilot, AI",
            "language": "en-US",
        }
        deck = process_slideshow(item, 0, set())
        assert deck == {
            "slug": "copilot-studio-deep-dive",
            "title": "Copilot Studio Deep Dive",
            "tags": ["copilot", "ai"],
            "language": "en",
            "assets": {
                "pdf": "/decks/copilot-studio-deep-dive/deck.pdf",
                "cover": "/decks/copilot-studio-deep-dive/cover.webp",
                "pptx": "/decks/copilot-studio-deep-dive/deck.pptx",
            },
            "description": "Agents everywhere.",
            "source": {
                "slideshareUrl": item["url"],
                "downloadUrl": item["download_url"],
            },
        }

    def test_minimal_record(self):
        existing = set()
        deck = process_slideshow({"description": "   "}, 2, existing)
        assert deck["title"] == "Untitled Deck 3"
        assert deck["slug"] == "untitled-deck-3"
        assert "description" not in deck
        assert "source" not in deck
        assert "pptx" not in deck["assets"]
        assert existing == {"untitled-deck-3"}

    def test_extract_slideshows(self):
        assert extract_slideshows({"slideshows_uploaded": [1]}) == [1]
        assert extract_slideshows({"slideshows": [2]}) == [2]
        assert extract_slideshows([3]) == [3]
        with pytest.raises(SlideShareImportError):
            extract_slideshows({"other": {}})


class TestImportSlideShare:

    def test_creates_and_skips(self, tmp_path):
        export = write_json(tmp_path / "export.json", {"slideshows_uploaded": [
            {"title": "Power Apps Basics", "url": "https://www.slideshare.net/u/power-apps-basics-1"},
            {"title": "Power Apps Basics", "url": "https://www.slideshare.net/u/power-apps-basics-2"},
            {"title": "Existing Deck", "id": 9},
        ]})
        out = tmp_path / "decks"
        write_json(out / "existing-deck.json", make_deck("existing-deck", title="Keep me"))

        result = import_slideshare(export, out)

        assert result.created == ["power-apps-basics", "power-apps-basics-2"]
        assert result.skipped == ["existing-deck"]
        assert read_deck(out / "existing-deck.json")["title"] == "Keep me"
        assert read_deck(out / "power-apps-basics-2.json")["source"]["slideshareUrl"].endswith("-2")

    def test_missing_file(self, tmp_path):
        with pytest.raises(SlideShareImportError):
            import_slideshare(tmp_path / "nope.json", tmp_path / "decks")


CSV_TEXT = (
    "title,document_url,Date_Uploaded\n"
    '"Deck, with comma",https://www.slideshare.net/u/deck-one,2010-10-12 13:16:21 UTC\n'
    "\n"
    "Deck two,https://www.slideshare.net/u/deck-two,2011-01-02 03:04:05\n"
    "Bad date,https://www.slideshare.net/u/deck-three,12/10/2010\n"
)


class TestUploadedAt:

    def test_to_iso(self):
        assert to_iso("2010-10-12 13:16:21 UTC") == "2010-10-12T13:16:21Z"
        assert to_iso("2010-10-12 13:16:21") == "2010-10-12T13:16:21Z"
        assert to_iso("12/10/2010") is None
        assert to_iso("") is None

    def test_read_and_map(self, tmp_path):
        csv_path = tmp_path / "export.csv"
        csv_path.write_text(CSV_TEXT, encoding="utf-8")
        rows = read_csv_rows(csv_path)
        assert len(rows) == 4
        assert rows[1][0] == "Deck, with comma"

        url_to_date = build_url_to_date_map(rows)
        assert url_to_date == {
            "https://www.slideshare.net/u/deck-one": "2010-10-12T13:16:21Z",
            "https://www.slideshare.net/u/deck-two": "2011-01-02T03:04:05Z",
        }

    def test_missing_columns(self):
        assert build_url_to_date_map([["title", "url"], ["a", "b"]]) == {}
        assert build_url_to_date_map([["document_url", "date_uploaded"]]) == {}

    def test_apply(self, tmp_path):
        decks = tmp_path / "decks"
        write_json(decks / "one.json", make_deck("one", source={"slideshareUrl": "https://x/one"}))
        write_json(decks / "legacy.json", make_deck("legacy", legacy={"slideshareUrl": "https://x/legacy"}))
        write_json(decks / "nourl.json", make_deck("nourl"))
        write_json(decks / "nomatch.json", make_deck("nomatch", source={"slideshareUrl": "https://x/other"}))
        (decks / "broken.json").write_text("{", encoding="utf-8")

        result = apply_uploaded_at(decks, {
            "https://x/one": "2012-01-01T00:00:00Z",
            "https://x/legacy": "2013-01-01T00:00:00Z",
        })

        assert (result.updated, result.missing_url, result.missing_match) == (2, 1, 1)
        assert read_deck(decks / "one.json")["uploadedAt"] == "2012-01-01T00:00:00Z"
        assert read_deck(decks / "legacy.json")["uploadedAt"] == "2013-01-01T00:00:00Z"
        assert "uploadedAt" not in read_deck(decks / "nomatch.json")

    def test_import_uploaded_at(self, tmp_path):
        csv_path = tmp_path / "export.csv"
        csv_path.write_text(CSV_TEXT, encoding="utf-8")
        decks = tmp_path / "decks"
        write_json(decks / "deck-two.json", make_deck(
            "deck-two", source={"slideshareUrl": "https://www.slideshare.net/u/deck-two"}))

        result = import_uploaded_at(csv_path, decks)

        assert result.updated == 1
        saved = json.loads((decks / "deck-two.json").read_text(encoding="utf-8"))
        assert saved["uploadedAt"] == "2011-01-02T03:04:05Z"
