"""Importers that turn SlideShare exports into deck records."""

from shareslides.importers.slideshare import (
    ImportResult,
    SlideShareImportError,
    import_slideshare,
    process_slideshow,
    slugify,
)
from shareslides.importers.uploaded_at import (
    UploadedAtResult,
    import_uploaded_at,
    to_iso,
)

__all__ = [
    # slideshare.py
    "ImportResult",
    "SlideShareImportError",
    "import_slideshare",
    "process_slideshow",
    "slugify",
    # uploaded_at.py
    "UploadedAtResult",
    "import_uploaded_at",
    "to_iso",
]
