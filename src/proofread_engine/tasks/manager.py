"""Task manager gating corrections on non-overlapping selections."""

from __future__ import annotations

import threading
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterable, Iterator, Optional

from proofread_engine.runtime.telemetry import record_event, span

from .models import ActiveTask, TaskStats, TextSelection
from .tracker import SelectionTracker, rebase_selection


class TaskConflictError(RuntimeError):
    """Raised when a selection overlaps a task that is still running."""

    def __init__(self, selection: TextSelection, conflicts: Iterable[ActiveTask]):
        conflicts_tuple = tuple(conflicts)
        message = (
            f"Selection {selection.describe()} is currently being processed by "
            f"{[task.id for task in conflicts_tuple]}"
        )
        super().__init__(message)
        self.selection = selection
        self.conflicts = conflicts_tuple


def _new_task_id() -> str:
    return f"task_{uuid.uuid4().hex}"


class TaskManager:
    """Single authority for starting and releasing correction tasks.

    ``start_task`` checks for overlap and inserts under one lock, so two
    callers can never both observe a free range and both claim it.
    """

    def __init__(
        self,
        tracker: Optional[SelectionTracker] = None,
        *,
        logger_name: str | None = None,
    ) -> None:
        self._tracker = (
            tracker if tracker is not None else SelectionTracker(logger_name=logger_name)
        )
        self._logger_name = logger_name
        self._lock = threading.RLock()
        self._started = 0
        self._completed = 0
        self._cancelled = 0
        self._conflicts = 0

    def can_start_task(self, selection: TextSelection) -> bool:
        with self._lock:
            return not self._tracker.has_overlapping_tasks(selection)

    def start_task(self, selection: TextSelection) -> str:
        with span(
            "tasks::start",
            logger_name=self._logger_name,
            component="tasks",
            metadata={"selection": selection.describe()},
        ) as handle:
            with self._lock:
                conflicts = self._tracker.get_overlapping_tasks(selection)
                if conflicts:
                    self._conflicts += 1
                    handle.add_metadata(
                        "conflicts", ",".join(task.id for task in conflicts)
                    )
                    raise TaskConflictError(selection, conflicts)

                task = ActiveTask(
                    id=_new_task_id(),
                    selection=selection,
                    start_time=datetime.now(timezone.utc),
                )
                self._tracker.add_task(task)
                self._started += 1
            handle.add_metadata("task_id", task.id)
            return task.id

    def complete_task(self, task_id: str) -> None:
        with self._lock:
            released = self._tracker.remove_task(task_id)
            if released is not None:
                self._completed += 1
        record_event(
            "tasks.complete",
            data={"task_id": task_id, "released": released is not None},
            logger_name=self._logger_name,
        )

    def cancel_task(self, task_id: str) -> None:
        with self._lock:
            released = self._tracker.remove_task(task_id)
            if released is not None:
                self._cancelled += 1
        record_event(
            "tasks.cancel",
            level="warning" if released is not None else "info",
            data={"task_id": task_id, "released": released is not None},
            logger_name=self._logger_name,
        )

    @contextmanager
    def task(self, selection: TextSelection) -> Iterator[str]:
        """Hold ``selection`` for the duration of the block.

        The task is completed on normal exit and cancelled when the block
        raises, including ``asyncio.CancelledError``.
        """

        task_id = self.start_task(selection)
        try:
            yield task_id
        except BaseException:
            self.cancel_task(task_id)
            raise
        else:
            self.complete_task(task_id)

    def get_conflicting_tasks(self, selection: TextSelection) -> list[ActiveTask]:
        with self._lock:
            return self._tracker.get_overlapping_tasks(selection)

    def is_selection_overlapping(
        self, left: TextSelection, right: TextSelection
    ) -> bool:
        return self._tracker.is_overlapping(left, right)

    def get_task(self, task_id: str) -> Optional[ActiveTask]:
        with self._lock:
            return self._tracker.get_task(task_id)

    def rebase_tasks(
        self,
        edited: TextSelection,
        replacement: str,
        *,
        skip: Optional[str] = None,
    ) -> list[str]:
        """Move tracked selections past an edit applied to their document.

        Returns the ids of tasks whose range the edit reached into; those keep
        their old coordinates.
        """

        touched: list[str] = []
        with self._lock:
            for task in self._tracker.get_active_tasks():
                if task.id == skip:
                    continue
                moved = rebase_selection(task.selection, edited, replacement)
                if moved is None:
                    touched.append(task.id)
                elif moved != task.selection:
                    self._tracker.move_task(task.id, moved)
        return touched

    def get_active_tasks(self) -> list[ActiveTask]:
        with self._lock:
            return self._tracker.get_active_tasks()

    def clear_all_tasks(self) -> None:
        with self._lock:
            self._tracker.clear()

    def stats(self) -> TaskStats:
        with self._lock:
            return TaskStats(
                active=len(self._tracker),
                started=self._started,
                completed=self._completed,
                cancelled=self._cancelled,
                conflicts=self._conflicts,
            )

    def reset_statistics(self) -> None:
        with self._lock:
            self._started = 0
            self._completed = 0
            self._cancelled = 0
            self._conflicts = 0


__all__ = ["TaskManager", "TaskConflictError"]
