"""
Deck asset preparation.

Processes public/decks/* so each deck directory has:
- deck.pdf (converted from deck.pptx if missing)
- cover.webp (rendered from deck.pdf page 1 if missing)

Requires LibreOffice (soffice) and pdftoppm (poppler-utils) on PATH,
or inside WSL on Windows.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from PIL import Image

from .tools import AssetToolError, missing_tools, native_path, run_command

logger = logging.getLogger(__name__)

PDF_NAME = "deck.pdf"
PPTX_NAME = "deck.pptx"
COVER_NAME = "cover.webp"
COVER_QUALITY = 80

_COVER_PNG = re.compile(r"^cover(-\d+)?\.png$", re.IGNORECASE)


@dataclass
class PrepareResults:
    pdf_converted: list[str] = field(default_factory=list)
    pdf_failed: list[str] = field(default_factory=list)
    cover_generated: list[str] = field(default_factory=list)
    cover_failed: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def total_success(self) -> int:
        return len(self.pdf_converted) + len(self.cover_generated)

    @property
    def total_failed(self) -> int:
        return len(self.pdf_failed) + len(self.cover_failed)


def convert_pptx_to_pdf(deck_dir: Path) -> bool:
    """Convert deck.pptx to deck.pdf with LibreOffice."""
    pptx_path = deck_dir / PPTX_NAME
    pdf_path = deck_dir / PDF_NAME

    logger.info(f"  Converting {PPTX_NAME} to {PDF_NAME}...")
    result = run_command("soffice", [
        "--headless",
        "--convert-to", "pdf",
        "--outdir", native_path(deck_dir),
        native_path(pptx_path),
    ])

    if result.success and pdf_path.exists():
        return True

    logger.error(f"  LibreOffice conversion failed: {result.stderr.strip()}")
    return False


def find_cover_pngs(deck_dir: Path) -> list[Path]:
    """cover.png / cover-1.png / cover-01.png files left by pdftoppm."""
    return sorted(p for p in deck_dir.iterdir() if p.is_file() and _COVER_PNG.match(p.name))


def cleanup_png_files(deck_dir: Path) -> None:
    for png_path in find_cover_pngs(deck_dir):
        try:
            png_path.unlink()
            logger.debug(f"  Cleaned up: {png_path.name}")
        except OSError as e:
            logger.warning(f"  Could not remove {png_path.name}: {e}")


def render_first_page(deck_dir: Path) -> bool:
    """Render page 1 of deck.pdf to cover*.png inside deck_dir."""
    base_args = ["-png", "-f", "1", "-l", "1"]

    result = run_command("pdftoppm", [*base_args, "-singlefile", PDF_NAME, "cover"], cwd=deck_dir)
    if result.success:
        return True

    # Older poppler: no -singlefile, output is cover-1.png
    result = run_command("pdftoppm", [*base_args, PDF_NAME, "cover"], cwd=deck_dir)
    if result.success:
        return True

    logger.error(f"  pdftoppm failed: {result.stderr.strip()}")
    return False


def png_to_webp(png_path: Path, webp_path: Path, quality: int = COVER_QUALITY) -> None:
    with Image.open(png_path) as img:
        if img.mode not in ("RGB", "RGBA"):
            img = img.convert("RGB")
        img.save(webp_path, "WEBP", quality=quality)


def generate_cover(deck_dir: Path) -> bool:
    """Generate cover.webp from the first page of deck.pdf."""
    cover_path = deck_dir / COVER_NAME
    logger.info(f"  Generating {COVER_NAME} from {PDF_NAME}...")

    if not render_first_page(deck_dir):
        return False

    try:
        pngs = find_cover_pngs(deck_dir)
        if not pngs:
            logger.error("  No cover-*.png file found after pdftoppm")
            return False

        logger.debug(f"  Found: {pngs[0].name}")
        try:
            png_to_webp(pngs[0], cover_path)
        except OSError as e:
            logger.error(f"  WebP conversion failed: {e}")
            return False
    finally:
        cleanup_png_files(deck_dir)

    if cover_path.exists():
        return True

    logger.error(f"  {COVER_NAME} not found after conversion")
    return False


def process_deck(deck_dir: Path, results: PrepareResults) -> None:
    """Fill in whatever PDF or cover a single deck directory is missing."""
    slug = deck_dir.name
    logger.info(f"Processing: {slug}")

    has_pdf = (deck_dir / PDF_NAME).exists()
    has_pptx = (deck_dir / PPTX_NAME).exists()
    has_cover = (deck_dir / COVER_NAME).exists()

    pdf_ready = has_pdf
    if not has_pdf and has_pptx:
        if convert_pptx_to_pdf(deck_dir):
            results.pdf_converted.append(slug)
            pdf_ready = True
        else:
            results.pdf_failed.append(slug)
    elif not has_pdf:
        logger.warning(f"  No {PDF_NAME} or {PPTX_NAME} found")

    if has_cover:
        logger.info(f"  {COVER_NAME} already exists")
    elif pdf_ready:
        if generate_cover(deck_dir):
            results.cover_generated.append(slug)
        else:
            results.cover_failed.append(slug)
    else:
        logger.warning(f"  Cannot generate cover without {PDF_NAME}")
        results.skipped.append(slug)


def find_deck_dirs(public_decks_dir: Path) -> list[Path]:
    if not public_decks_dir.is_dir():
        return []
    return sorted(p for p in public_decks_dir.iterdir() if p.is_dir())


def prepare_assets(public_decks_dir: Path, results: Optional[PrepareResults] = None) -> PrepareResults:
    """Process every deck directory under public_decks_dir.

    Raises:
        AssetToolError: a required converter is not installed
        FileNotFoundError: public_decks_dir does not exist
    """
    missing = missing_tools()
    if missing:
        raise AssetToolError(f"Missing required tools: {', '.join(missing)}")

    public_decks_dir = Path(public_decks_dir)
    if not public_decks_dir.is_dir():
        raise FileNotFoundError(f"Decks directory not found: {public_decks_dir}")

    results = results or PrepareResults()
    deck_dirs = find_deck_dirs(public_decks_dir)
    logger.info(f"Found {len(deck_dirs)} deck directories")

    for deck_dir in deck_dirs:
        process_deck(deck_dir, results)

    return results
