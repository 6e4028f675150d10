"""Dataclasses describing correction targets and in-flight tasks."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Tuple

Position = Tuple[int, int]  # (line, character)


@dataclass(frozen=True, slots=True)
class TextSelection:
    """Range of text inside one document, zero-based with an exclusive end."""

    document_uri: str
    start_line: int
    start_character: int
    end_line: int
    end_character: int

    @classmethod
    def from_cursors(
        cls, document_uri: str, start: Position, end: Position
    ) -> "TextSelection":
        """Build a selection from two cursors, whichever order they arrive in."""

        if end < start:
            start, end = end, start
        return cls(
            document_uri=document_uri,
            start_line=start[0],
            start_character=start[1],
            end_line=end[0],
            end_character=end[1],
        )

    @property
    def start(self) -> Position:
        return (self.start_line, self.start_character)

    @property
    def end(self) -> Position:
        return (self.end_line, self.end_character)

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    def describe(self) -> str:
        return (
            f"{self.document_uri}:{self.start_line}:{self.start_character}"
            f"-{self.end_line}:{self.end_character}"
        )


@dataclass(frozen=True, slots=True)
class ActiveTask:
    """A correction currently holding ``selection``."""

    id: str
    selection: TextSelection
    start_time: datetime

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("ActiveTask id cannot be empty")


@dataclass(frozen=True, slots=True)
class TaskStats:
    """Counters describing task manager activity since the last reset."""

    active: int
    started: int
    completed: int
    cancelled: int
    conflicts: int


__all__ = ["Position", "TextSelection", "ActiveTask", "TaskStats"]
