"""Event bus the correction workflow uses to notify UI collaborators."""

from __future__ import annotations

from typing import Callable, Dict

TASK_STARTED = "task.started"
TASK_COMPLETED = "task.completed"
TASK_CANCELLED = "task.cancelled"
TASK_CONFLICT = "task.conflict"
CORRECTION_APPLIED = "correction.applied"

EVENTS = (
    TASK_STARTED,
    TASK_COMPLETED,
    TASK_CANCELLED,
    TASK_CONFLICT,
    CORRECTION_APPLIED,
)


class CorrectionBus:
    """Minimal publish/subscribe hub keyed by event name."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, list[Callable[[object], None]]] = {}

    def subscribe(self, event: str, callback: Callable[[object], None]) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in self._subscribers.get(event, []):
            callback(payload)


__all__ = [
    "CorrectionBus",
    "EVENTS",
    "TASK_STARTED",
    "TASK_COMPLETED",
    "TASK_CANCELLED",
    "TASK_CONFLICT",
    "CORRECTION_APPLIED",
]
