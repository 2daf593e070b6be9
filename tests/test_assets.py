"""Tests for deck asset preparation. External converters are mocked."""
import subprocess
from pathlib import Path
from unittest import mock

import pytest
from PIL import Image

from shareslides.assets import prepare, tools
from shareslides.assets.prepare import PrepareResults, prepare_assets, process_deck
from shareslides.assets.tools import AssetToolError, CommandResult, run_command, to_wsl_path


def fake_converter(cmd, args, cwd=None):
    """Stand-in for soffice/pdftoppm that writes the files they would."""
    if cmd == "soffice":
        outdir = args[args.index("--outdir") + 1]
        pdf_path = Path(outdir) / "deck.pdf"
        pdf_path.write_bytes(b"%PDF-1.4")
        return CommandResult(True, str(pdf_path), "")
    if cmd == "pdftoppm":
        if "-singlefile" in args:
            return CommandResult(False, "", "unknown option -singlefile")
        Image.new("RGB", (32, 18), (200, 30, 30)).save(cwd / "cover-1.png")
        return CommandResult(True, "", "")
    raise AssertionError(f"unexpected command {cmd}")


@pytest.fixture
def public_decks(tmp_path):
    root = tmp_path / "public" / "decks"
    (root / "from-pptx").mkdir(parents=True)
    (root / "from-pptx" / "deck.pptx").write_bytes(b"PK")
    (root / "has-pdf").mkdir()
    (root / "has-pdf" / "deck.pdf").write_bytes(b"%PDF-1.4")
    (root / "complete").mkdir()
    (root / "complete" / "deck.pdf").write_bytes(b"%PDF-1.4")
    (root / "complete" / "cover.webp").write_bytes(b"RIFF")
    (root / "empty").mkdir()
    return root


class TestTools:

    def test_to_wsl_path(self):
        assert to_wsl_path(r"E:\Dev\jukkan") == "/mnt/e/Dev/jukkan"
        assert to_wsl_path("/home/user/decks") == "/home/user/decks"

    def test_run_command_missing_binary(self, tmp_path):
        with mock.patch.object(tools, "is_windows", return_value=False):
            result = run_command("definitely-not-a-real-converter", [], cwd=tmp_path)
        assert not result.success

    def test_run_command_via_wsl(self, tmp_path):
        completed = subprocess.CompletedProcess([], 0, stdout="ok", stderr="")
        with mock.patch.object(tools, "is_windows", return_value=True), \
                mock.patch.object(tools.subprocess, "run", return_value=completed) as run:
            result = run_command("pdftoppm", ["-png", "deck.pdf", "cover"], cwd=r"C:\decks\a b")
        assert result == CommandResult(True, "ok", "")
        argv = run.call_args.args[0]
        assert argv[:3] == ["wsl", "bash", "-c"]
        assert argv[3] == "cd '/mnt/c/decks/a b' && pdftoppm -png deck.pdf cover"

    def test_missing_tools(self):
        with mock.patch.object(tools, "command_exists", side_effect=lambda cmd: cmd == "soffice"):
            assert tools.missing_tools() == ["pdftoppm"]


class TestPrepare:

    def test_process_all_decks(self, public_decks):
        with mock.patch.object(prepare, "missing_tools", return_value=[]), \
                mock.patch.object(prepare, "run_command", side_effect=fake_converter):
            results = prepare_assets(public_decks)

        assert results.pdf_converted == ["from-pptx"]
        assert results.cover_generated == ["from-pptx", "has-pdf"]
        assert results.skipped == ["empty"]
        assert results.total_failed == 0
        for slug in ("from-pptx", "has-pdf"):
            cover = public_decks / slug / "cover.webp"
            with Image.open(cover) as img:
                assert img.format == "WEBP"
            assert not list((public_decks / slug).glob("cover*.png"))

    def test_conversion_failure_is_recorded(self, public_decks):
        results = PrepareResults()
        failing = mock.Mock(return_value=CommandResult(False, "", "boom"))
        with mock.patch.object(prepare, "run_command", failing):
            process_deck(public_decks / "from-pptx", results)
        assert results.pdf_failed == ["from-pptx"]
        assert results.skipped == ["from-pptx"]
        assert results.cover_generated == []

    def test_cover_failure_when_no_png_produced(self, public_decks):
        results = PrepareResults()
        with mock.patch.object(prepare, "run_command", return_value=CommandResult(True, "", "")):
            process_deck(public_decks / "has-pdf", results)
        assert results.cover_failed == ["has-pdf"]

    def test_missing_tools_raise(self, public_decks):
        with mock.patch.object(prepare, "missing_tools", return_value=["soffice"]):
            with pytest.raises(AssetToolError):
                prepare_assets(public_decks)

    def test_missing_directory(self, tmp_path):
        with mock.patch.object(prepare, "missing_tools", return_value=[]):
            with pytest.raises(FileNotFoundError):
                prepare_assets(tmp_path / "nope")
