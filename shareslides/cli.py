#!/usr/bin/env python3
"""ShareSlides CLI - slide deck archive toolkit."""

import json
import logging
from pathlib import Path

import click
import yaml

from shareslides import __version__
from shareslides.config import Settings


def _dump_yaml(data) -> str:
    return yaml.safe_dump(data, default_flow_style=False, allow_unicode=True, sort_keys=False)


def _load(settings: Settings, strict: bool):
    from shareslides.catalog.loader import CatalogIntegrityError, load_catalog
    from shareslides.catalog.store import DeckFileError

    try:
        return load_catalog(settings.decks_dir, settings.legacy_stats_path, strict=strict)
    except (CatalogIntegrityError, DeckFileError) as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.version_option(version=__version__)
@click.option("--root", type=click.Path(file_okay=False, path_type=Path),
              help="Project root (default: SHARESLIDES_ROOT or current directory)")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, root, verbose):
    """ShareSlides - slide deck archive toolkit.

    Load the deck catalog, import SlideShare exports, assign short IDs
    and prepare deck assets.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s"
    )
    ctx.obj = Settings.from_env(root)


# =============================================================================
# catalog
# =============================================================================

@cli.group()
def catalog():
    """Inspect the merged deck catalog."""
    pass


@catalog.command("list")
@click.option("--strict", is_flag=True, help="Fail on duplicate slugs or short IDs")
@click.pass_obj
def catalog_list(settings, strict):
    """List all decks, newest first."""
    decks = _load(settings, strict)
    for deck in decks:
        short_id = deck.get("shortId")
        prefix = f"{short_id:>3}" if short_id is not None else "  -"
        uploaded = (deck.get("uploadedAt") or "no date")[:10]
        views = deck.get("legacyStats", {}).get("views")
        suffix = f"  ({views} views)" if views is not None else ""
        click.echo(f"{prefix}  {uploaded:<10}  {deck.get('slug')}{suffix}")
    click.echo(f"\n{len(decks)} decks")


@catalog.command("show")
@click.argument("key")
@click.pass_obj
def catalog_show(settings, key):
    """Show one deck by short ID when KEY is numeric, otherwise (or if no
    deck has that short ID) by slug."""
    decks = _load(settings, strict=False)
    deck = decks.find_by_short_id(int(key)) if key.isdecimal() else None
    if deck is None:
        deck = decks.find_by_slug(key)
    if deck is None:
        raise click.ClickException(f"No deck found for {key!r}")
    click.echo(_dump_yaml(deck), nl=False)


@catalog.command("tags")
@click.pass_obj
def catalog_tags(settings):
    """Print every tag used by any deck."""
    for tag in _load(settings, strict=False).all_tags():
        click.echo(tag)


@catalog.command("export")
@click.argument("out", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--strict", is_flag=True, help="Fail on duplicate slugs or short IDs")
@click.pass_obj
def catalog_export(settings, out, strict):
    """Write the merged catalog to OUT (.yml/.yaml as YAML, otherwise JSON)."""
    decks = _load(settings, strict)
    payload = {
        "total_decks": len(decks),
        "tags": decks.all_tags(),
        "decks": list(decks.load_all()),
    }

    out.parent.mkdir(parents=True, exist_ok=True)
    with open(out, "w", encoding="utf-8") as f:
        if out.suffix in (".yml", ".yaml"):
            f.write(_dump_yaml(payload))
        else:
            json.dump(payload, f, indent=2, ensure_ascii=False)
            f.write("\n")
    click.echo(f"Catalog saved to: {out}")


# =============================================================================
# validate
# =============================================================================

@cli.command()
@click.argument("paths", nargs=-1, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_obj
def validate(settings, paths):
    """Validate deck files (default: every deck in the decks directory)."""
    from shareslides.catalog.store import find_deck_files
    from shareslides.catalog.validate import load_schema, validate_deck_file

    deck_paths = list(paths) or find_deck_files(settings.decks_dir)
    if not deck_paths:
        raise click.ClickException(f"No deck files found in {settings.decks_dir}")

    schema = load_schema()
    failed = 0
    for deck_path in deck_paths:
        is_valid, errors, warnings = validate_deck_file(deck_path, schema)
        if is_valid and not warnings:
            continue
        click.echo(f"[{'OK' if is_valid else 'FAIL'}] {deck_path.name}")
        for error in errors:
            click.echo(f"  [ERROR] {error}")
        for warning in warnings:
            click.echo(f"  [WARN] {warning}")
        if not is_valid:
            failed += 1

    click.echo(f"\nChecked {len(deck_paths)} deck(s), {failed} failed")
    if failed:
        raise SystemExit(1)


# =============================================================================
# import
# =============================================================================

@cli.group("import")
def import_():
    """Import data from a SlideShare export."""
    pass


@import_.command("slideshare")
@click.argument("input_path", required=False, type=click.Path(dir_okay=False, path_type=Path))
@click.pass_obj
def import_slideshare_cmd(settings, input_path):
    """Create deck files from a SlideShare JSON export."""
    from shareslides.importers.slideshare import SlideShareImportError, import_slideshare

    input_path = input_path or settings.export_json_path
    try:
        result = import_slideshare(input_path, settings.decks_dir)
    except SlideShareImportError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"\nDone! Created {len(result.created)} decks, skipped {len(result.skipped)}")
    if result.created:
        click.echo("\nNext steps:")
        click.echo("1. Add PDF files to public/decks/<slug>/deck.pdf")
        click.echo("2. Add cover images to public/decks/<slug>/cover.webp (or run prepare-assets)")
        click.echo("3. Optionally add PPTX files to public/decks/<slug>/deck.pptx")


@import_.command("uploaded-at")
@click.argument("csv_path", required=False, type=click.Path(dir_okay=False, path_type=Path))
@click.pass_obj
def import_uploaded_at_cmd(settings, csv_path):
    """Set uploadedAt on deck files from a SlideShare CSV export."""
    from shareslides.importers.uploaded_at import import_uploaded_at

    csv_path = csv_path or settings.export_csv_path
    if not csv_path.exists():
        raise click.ClickException(f"Failed to read CSV file: {csv_path}")

    result = import_uploaded_at(csv_path, settings.decks_dir)
    click.echo("\n--- Summary ---")
    click.echo(f"Updated: {result.updated}")
    click.echo(f"Missing slideshareUrl: {result.missing_url}")
    click.echo(f"Missing CSV match: {result.missing_match}")


# =============================================================================
# maintenance
# =============================================================================

@cli.command("assign-short-ids")
@click.pass_obj
def assign_short_ids_cmd(settings):
    """Number decks by upload date, oldest = 01."""
    from shareslides.maintenance.short_ids import assign_short_ids, format_short_id

    click.echo("Assigning short IDs (oldest to newest):\n")
    assignments = assign_short_ids(settings.decks_dir)
    for assignment in assignments:
        click.echo(f"{format_short_id(assignment.short_id)}: {assignment.title}")
        click.echo(f"    {assignment.uploaded_at or 'No date'}")
    click.echo(f"\nAssigned IDs to {len(assignments)} decks.")


@cli.command("add-category")
@click.option("--default", "default", type=click.Choice(["Organic", "AI"]), default="Organic",
              show_default=True, help="Category for decks without one")
@click.pass_obj
def add_category_cmd(settings, default):
    """Set category on decks that do not have one."""
    from shareslides.maintenance.category import add_category_field

    updated, skipped = add_category_field(settings.decks_dir, default)
    click.echo(f"\nDone! Updated {len(updated)} files, skipped {len(skipped)} files")


# =============================================================================
# assets
# =============================================================================

def _echo_section(title: str, slugs: list[str]) -> None:
    if slugs:
        click.echo(f"\n{title} ({len(slugs)}):")
        for slug in slugs:
            click.echo(f"   - {slug}")


@cli.command("prepare-assets")
@click.pass_obj
def prepare_assets_cmd(settings):
    """Convert PPTX to PDF and render missing covers."""
    from shareslides.assets.prepare import prepare_assets
    from shareslides.assets.tools import INSTALL_HINTS, AssetToolError, is_windows, missing_tools

    missing = missing_tools()
    if missing:
        click.echo("=" * 60)
        click.echo("MISSING TOOLS")
        click.echo("=" * 60)
        for tool in missing:
            click.echo(f"  [MISSING] {tool}")
        hints = {"WSL": INSTALL_HINTS["wsl"]} if is_windows() else {
            k: v for k, v in INSTALL_HINTS.items() if k != "wsl"
        }
        click.echo("\nInstallation instructions:")
        for platform, commands in hints.items():
            click.echo(f"\n  {platform}:")
            for command in commands:
                click.echo(f"    {command}")
        raise SystemExit(1)

    try:
        results = prepare_assets(settings.public_decks_dir)
    except (AssetToolError, FileNotFoundError) as e:
        raise click.ClickException(str(e)) from e

    click.echo("\n" + "=" * 60)
    click.echo("SUMMARY")
    click.echo("=" * 60)
    _echo_section("PDF Conversions", results.pdf_converted)
    _echo_section("PDF Conversion Failures", results.pdf_failed)
    _echo_section("Covers Generated", results.cover_generated)
    _echo_section("Cover Generation Failures", results.cover_failed)
    _echo_section("Skipped (no source files)", results.skipped)
    click.echo("\n" + "-" * 60)
    click.echo(
        f"Total: {results.total_success} successful, {results.total_failed} failed, "
        f"{len(results.skipped)} skipped"
    )


if __name__ == "__main__":
    cli()
