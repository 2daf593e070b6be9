"""One-off maintenance passes over the deck files."""

from shareslides.maintenance.category import CATEGORIES, DEFAULT_CATEGORY, add_category_field
from shareslides.maintenance.short_ids import ShortIdAssignment, assign_short_ids, format_short_id

__all__ = [
    # category.py
    "CATEGORIES",
    "DEFAULT_CATEGORY",
    "add_category_field",
    # short_ids.py
    "ShortIdAssignment",
    "assign_short_ids",
    "format_short_id",
]
