"""Line/character helpers over plain text."""

from __future__ import annotations

from typing import List, Sequence, Tuple

from proofread_engine.tasks.models import TextSelection


class SelectionBoundsError(ValueError):
    """Raised when a selection does not fit inside the text it targets."""

    def __init__(self, message: str, *, selection: TextSelection | None = None) -> None:
        super().__init__(message)
        self.selection = selection


def split_lines(text: str) -> List[str]:
    return text.split("\n")


def _fits(lines: Sequence[str], selection: TextSelection) -> bool:
    if not (0 <= selection.start_line < len(lines)):
        return False
    if not (0 <= selection.end_line < len(lines)):
        return False
    if selection.start > selection.end:
        return False
    if not (0 <= selection.start_character <= len(lines[selection.start_line])):
        return False
    return 0 <= selection.end_character <= len(lines[selection.end_line])


def validate_selection(text: str, selection: TextSelection) -> bool:
    return _fits(split_lines(text), selection)


def _ensure_fits(lines: Sequence[str], selection: TextSelection) -> None:
    if not _fits(lines, selection):
        raise SelectionBoundsError(
            f"Selection {selection.describe()} is outside the document",
            selection=selection,
        )


def extract_text(text: str, selection: TextSelection) -> str:
    lines = split_lines(text)
    _ensure_fits(lines, selection)
    if selection.start_line == selection.end_line:
        line = lines[selection.start_line]
        return line[selection.start_character : selection.end_character]

    parts = [lines[selection.start_line][selection.start_character :]]
    parts.extend(lines[selection.start_line + 1 : selection.end_line])
    parts.append(lines[selection.end_line][: selection.end_character])
    return "\n".join(parts)


def replace_lines(
    lines: Sequence[str], selection: TextSelection, replacement: str
) -> List[str]:
    """Return a copy of ``lines`` with ``selection`` replaced."""

    _ensure_fits(lines, selection)
    before = lines[selection.start_line][: selection.start_character]
    after = lines[selection.end_line][selection.end_character :]
    spliced = split_lines(before + replacement + after)
    updated = list(lines)
    updated[selection.start_line : selection.end_line + 1] = spliced
    return updated


def replace_selection(text: str, selection: TextSelection, replacement: str) -> str:
    return "\n".join(replace_lines(split_lines(text), selection, replacement))


def _position_at(text: str, offset: int) -> Tuple[int, int]:
    head = text[:offset]
    line = head.count("\n")
    return (line, offset - (head.rfind("\n") + 1))


def edit_between(document_uri: str, old: str, new: str) -> Tuple[TextSelection, str]:
    """Return the single replacement turning ``old`` into ``new``.

    The range covers what lies between the longest common prefix and suffix,
    so typing next to a selection never reaches into it.
    """

    limit = min(len(old), len(new))
    prefix = 0
    while prefix < limit and old[prefix] == new[prefix]:
        prefix += 1
    suffix = 0
    while suffix < limit - prefix and old[-1 - suffix] == new[-1 - suffix]:
        suffix += 1

    start = _position_at(old, prefix)
    end = _position_at(old, len(old) - suffix)
    selection = TextSelection(document_uri, start[0], start[1], end[0], end[1])
    return selection, new[prefix : len(new) - suffix]


def full_selection(document_uri: str, text: str) -> TextSelection:
    lines = split_lines(text)
    return TextSelection(
        document_uri=document_uri,
        start_line=0,
        start_character=0,
        end_line=len(lines) - 1,
        end_character=len(lines[-1]),
    )


__all__ = [
    "SelectionBoundsError",
    "split_lines",
    "validate_selection",
    "extract_text",
    "replace_lines",
    "replace_selection",
    "full_selection",
    "edit_between",
]
