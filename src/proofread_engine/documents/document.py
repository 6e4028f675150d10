"""In-memory text document addressed by ``(line, character)`` positions."""

from __future__ import annotations

from typing import List, Sequence

from proofread_engine.tasks.models import TextSelection

from .text import extract_text, full_selection, replace_lines, split_lines


class TextDocument:
    """List-of-lines storage keyed by ``uri``.

    ``version`` increases on every applied edit so callers can tell whether a
    correction landed on the text it was computed from.
    """

    __slots__ = ("uri", "_lines", "version")

    def __init__(self, uri: str, text: str = "", *, version: int = 0) -> None:
        if not isinstance(text, str):
            raise TypeError(f"TextDocument text must be str, not {type(text).__name__}")
        self.uri = uri
        self._lines: List[str] = split_lines(text)
        self.version = version

    def __repr__(self) -> str:
        return (
            f"TextDocument(uri={self.uri!r}, lines={len(self._lines)}, "
            f"version={self.version})"
        )

    @classmethod
    def from_text(cls, uri: str, text: str) -> "TextDocument":
        return cls(uri, text)

    def snapshot(self) -> Sequence[str]:
        """Return the current lines without exposing internal mutability."""

        return tuple(self._lines)

    @property
    def text(self) -> str:
        return "\n".join(self._lines)

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def full_selection(self) -> TextSelection:
        return full_selection(self.uri, self.text)

    def get_text(self, selection: TextSelection) -> str:
        self._check_uri(selection)
        return extract_text(self.text, selection)

    def apply(self, selection: TextSelection, replacement: str) -> int:
        """Replace ``selection`` with ``replacement``; return the new version."""

        self._check_uri(selection)
        self._lines = replace_lines(self._lines, selection, replacement)
        self.version += 1
        return self.version

    def _check_uri(self, selection: TextSelection) -> None:
        if selection.document_uri != self.uri:
            raise ValueError(
                f"Selection targets {selection.document_uri!r}, not {self.uri!r}"
            )


__all__ = ["TextDocument"]
