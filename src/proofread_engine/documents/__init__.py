"""Plain-text documents and selection-based edits."""

from .document import TextDocument
from .text import (
    SelectionBoundsError,
    edit_between,
    extract_text,
    full_selection,
    replace_lines,
    replace_selection,
    split_lines,
    validate_selection,
)

__all__ = [
    "TextDocument",
    "SelectionBoundsError",
    "edit_between",
    "extract_text",
    "full_selection",
    "replace_lines",
    "replace_selection",
    "split_lines",
    "validate_selection",
]
