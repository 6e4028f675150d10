"""Correction workflow bracketing LLM calls with selection tasks."""

from .events import (
    CORRECTION_APPLIED,
    EVENTS,
    TASK_CANCELLED,
    TASK_COMPLETED,
    TASK_CONFLICT,
    TASK_STARTED,
    CorrectionBus,
)
from .models import CorrectionClient, CorrectionRequest
from .service import CorrectionService, StaleSelectionError

__all__ = [
    "CorrectionBus",
    "CorrectionClient",
    "CorrectionRequest",
    "CorrectionService",
    "StaleSelectionError",
    "EVENTS",
    "TASK_STARTED",
    "TASK_COMPLETED",
    "TASK_CANCELLED",
    "TASK_CONFLICT",
    "CORRECTION_APPLIED",
]
