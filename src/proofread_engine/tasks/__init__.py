"""Selection-overlap concurrency control for correction tasks."""

from .manager import TaskConflictError, TaskManager
from .models import ActiveTask, Position, TaskStats, TextSelection
from .tracker import SelectionTracker, rebase_selection, selections_overlap

__all__ = [
    "ActiveTask",
    "Position",
    "TaskStats",
    "TextSelection",
    "SelectionTracker",
    "selections_overlap",
    "rebase_selection",
    "TaskManager",
    "TaskConflictError",
]
