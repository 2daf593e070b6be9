"""Deck asset preparation for ShareSlides.

Exports are lazily loaded so importing the package does not pull in Pillow.
"""

__all__ = [
    # prepare.py
    "PrepareResults",
    "prepare_assets",
    "process_deck",
    "generate_cover",
    "convert_pptx_to_pdf",
    # tools.py
    "AssetToolError",
    "missing_tools",
    "to_wsl_path",
]


def __getattr__(name: str):
    """Lazy import for module exports."""
    if name in ("PrepareResults", "prepare_assets", "process_deck", "generate_cover", "convert_pptx_to_pdf"):
        from shareslides.assets import prepare
        return getattr(prepare, name)
    elif name in ("AssetToolError", "missing_tools", "to_wsl_path"):
        from shareslides.assets import tools
        return getattr(tools, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
