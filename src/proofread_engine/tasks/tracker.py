"""Authoritative registry of in-flight tasks and the overlap predicate."""

from __future__ import annotations

from dataclasses import replace
from typing import Dict, Optional

from proofread_engine.runtime import telemetry

from .models import ActiveTask, Position, TextSelection


def selections_overlap(left: TextSelection, right: TextSelection) -> bool:
    """Return True when both ranges share at least one character position.

    Ranges are half-open over ``(line, character)`` order, so a selection that
    ends exactly where another begins does not overlap it. Selections from
    different documents never overlap.
    """

    if left.document_uri != right.document_uri:
        return False

    if left.end_line < right.start_line or (
        left.end_line == right.start_line
        and left.end_character <= right.start_character
    ):
        return False

    if right.end_line < left.start_line or (
        right.end_line == left.start_line
        and right.end_character <= left.start_character
    ):
        return False

    return True


def _replacement_end(edited: TextSelection, replacement: str) -> Position:
    lines = replacement.split("\n")
    if len(lines) == 1:
        return (edited.start_line, edited.start_character + len(replacement))
    return (edited.start_line + len(lines) - 1, len(lines[-1]))


def _shift(position: Position, old_end: Position, new_end: Position) -> Position:
    line, character = position
    if line == old_end[0]:
        return (new_end[0], new_end[1] + character - old_end[1])
    return (line + new_end[0] - old_end[0], character)


def rebase_selection(
    selection: TextSelection, edited: TextSelection, replacement: str
) -> Optional[TextSelection]:
    """Map ``selection`` through an edit that replaced ``edited`` with ``replacement``.

    An edit ending at or before the selection start moves it; one starting at
    or after its end leaves it alone. Returns None when the edit reaches into
    the selection, since its text is no longer what it was.
    """

    if selection.document_uri != edited.document_uri:
        return selection
    if edited.end <= selection.start:
        new_end = _replacement_end(edited, replacement)
        return TextSelection.from_cursors(
            selection.document_uri,
            _shift(selection.start, edited.end, new_end),
            _shift(selection.end, edited.end, new_end),
        )
    if edited.start >= selection.end:
        return selection
    return None


class SelectionTracker:
    """Owns the id -> task mapping; answers overlap queries by linear scan."""

    def __init__(self, *, logger_name: Optional[str] = None) -> None:
        self._tasks: Dict[str, ActiveTask] = {}
        self._logger_name = logger_name

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._tasks

    def is_overlapping(self, left: TextSelection, right: TextSelection) -> bool:
        return selections_overlap(left, right)

    def add_task(self, task: ActiveTask) -> None:
        # No overlap re-check here; TaskManager gates insertion.
        self._tasks[task.id] = task
        telemetry.record_event(
            "tracker.add",
            level="debug",
            data={"task_id": task.id, "selection": task.selection.describe()},
            logger_name=self._logger_name,
        )

    def remove_task(self, task_id: str) -> Optional[ActiveTask]:
        task = self._tasks.pop(task_id, None)
        if task is not None:
            telemetry.record_event(
                "tracker.remove",
                level="debug",
                data={"task_id": task_id},
                logger_name=self._logger_name,
            )
        return task

    def move_task(
        self, task_id: str, selection: TextSelection
    ) -> Optional[ActiveTask]:
        task = self._tasks.get(task_id)
        if task is None:
            return None
        moved = replace(task, selection=selection)
        self._tasks[task_id] = moved
        telemetry.record_event(
            "tracker.move",
            level="debug",
            data={"task_id": task_id, "selection": selection.describe()},
            logger_name=self._logger_name,
        )
        return moved

    def get_task(self, task_id: str) -> Optional[ActiveTask]:
        return self._tasks.get(task_id)

    def get_active_tasks(self) -> list[ActiveTask]:
        return list(self._tasks.values())

    def get_overlapping_tasks(self, selection: TextSelection) -> list[ActiveTask]:
        return [
            task
            for task in self._tasks.values()
            if selections_overlap(task.selection, selection)
        ]

    def has_overlapping_tasks(self, selection: TextSelection) -> bool:
        return bool(self.get_overlapping_tasks(selection))

    def clear(self) -> None:
        dropped = len(self._tasks)
        self._tasks.clear()
        telemetry.record_event(
            "tracker.clear",
            data={"dropped": dropped},
            logger_name=self._logger_name,
        )


__all__ = ["SelectionTracker", "rebase_selection", "selections_overlap"]
