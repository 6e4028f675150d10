"""Correction workflow: gate on the selection, call the model, apply the edit."""

from __future__ import annotations

from typing import Optional

from proofread_engine.documents import (
    SelectionBoundsError,
    TextDocument,
    validate_selection,
)
from proofread_engine.llm.response import CorrectionResponse, ResponseParseError
from proofread_engine.prompts import PromptManager
from proofread_engine.runtime import telemetry
from proofread_engine.tasks import (
    ActiveTask,
    TaskConflictError,
    TaskManager,
    TaskStats,
    TextSelection,
)

from .events import (
    CORRECTION_APPLIED,
    TASK_CANCELLED,
    TASK_COMPLETED,
    TASK_CONFLICT,
    TASK_STARTED,
    CorrectionBus,
)
from .models import CorrectionClient, CorrectionRequest


class StaleSelectionError(SelectionBoundsError):
    """Raised when the target text changed while the correction was running."""


class CorrectionService:
    """Brackets every model call with a task that locks the target range."""

    def __init__(
        self,
        prompts: PromptManager,
        client: CorrectionClient,
        tasks: Optional[TaskManager] = None,
        *,
        bus: Optional[CorrectionBus] = None,
        logger_name: str | None = None,
    ) -> None:
        self.prompts = prompts
        self.client = client
        self.tasks = tasks if tasks is not None else TaskManager(logger_name=logger_name)
        self.bus = bus if bus is not None else CorrectionBus()
        self._logger_name = logger_name

    def is_selection_blocked(self, selection: TextSelection) -> bool:
        return not self.tasks.can_start_task(selection)

    async def correct(
        self,
        request: CorrectionRequest,
        *,
        document: Optional[TextDocument] = None,
    ) -> CorrectionResponse:
        """Correct ``request.text``; when ``document`` is given, apply the result.

        The selection stays locked from before the network call until the edit
        is applied, and is released on every exit path.
        """

        selection = request.selection
        if selection.is_empty and not request.is_full_document:
            raise SelectionBoundsError("Selection is empty", selection=selection)
        prompt = self.prompts.combine_prompts(request.prompt_id)

        try:
            with self.tasks.task(selection) as task_id:
                payload = {"task_id": task_id, "selection": selection}
                self.bus.emit(TASK_STARTED, payload)
                try:
                    response = await self._request(prompt, request.text)
                    if document is not None:
                        self._apply(document, request, response, task_id)
                except BaseException as exc:
                    self.bus.emit(
                        TASK_CANCELLED,
                        {**payload, "reason": str(exc) or type(exc).__name__},
                    )
                    raise
        except TaskConflictError as exc:
            self.bus.emit(
                TASK_CONFLICT, {"selection": selection, "conflicts": exc.conflicts}
            )
            raise

        self.bus.emit(TASK_COMPLETED, payload)
        return response

    async def correct_selection(
        self, document: TextDocument, selection: TextSelection, prompt_id: str
    ) -> CorrectionResponse:
        text = document.get_text(selection)
        request = CorrectionRequest(prompt_id=prompt_id, text=text, selection=selection)
        return await self.correct(request, document=document)

    async def process_full_document(
        self, document: TextDocument, prompt_id: str
    ) -> str:
        text = document.text
        if not text.strip():
            raise SelectionBoundsError("Document is empty")
        request = CorrectionRequest(
            prompt_id=prompt_id,
            text=text,
            selection=document.full_selection(),
            is_full_document=True,
        )
        response = await self.correct(request, document=document)
        return response.corrected_text

    def cancel_task(self, task_id: str) -> None:
        self.tasks.cancel_task(task_id)

    def get_active_tasks(self) -> list[ActiveTask]:
        return self.tasks.get_active_tasks()

    def statistics(self) -> TaskStats:
        return self.tasks.stats()

    async def _request(self, prompt: str, text: str) -> CorrectionResponse:
        response = await self.client.send_correction(prompt, text)
        corrected = response.corrected_text.strip()
        if not corrected:
            raise ResponseParseError("API returned empty response")
        return CorrectionResponse(corrected_text=corrected, explanation=response.explanation)

    def apply_edit(
        self, document: TextDocument, selection: TextSelection, replacement: str
    ) -> int:
        """Apply an edit made outside a correction, moving pending ranges past it."""

        return self._edit(document, selection, replacement)

    def _edit(
        self,
        document: TextDocument,
        selection: TextSelection,
        replacement: str,
        *,
        task_id: Optional[str] = None,
    ) -> int:
        version = document.apply(selection, replacement)
        touched = self.tasks.rebase_tasks(selection, replacement, skip=task_id)
        if touched:
            telemetry.record_event(
                "correction.edit_overlaps",
                level="warning",
                data={"uri": document.uri, "tasks": touched},
                logger_name=self._logger_name,
            )
        return version

    def _apply(
        self,
        document: TextDocument,
        request: CorrectionRequest,
        response: CorrectionResponse,
        task_id: str,
    ) -> None:
        # Earlier edits may have moved the range; the tracked task has its
        # current coordinates.
        task = self.tasks.get_task(task_id)
        selection = task.selection if task is not None else request.selection
        if (
            not validate_selection(document.text, selection)
            or document.get_text(selection) != request.text
        ):
            raise StaleSelectionError(
                "Target text changed while the correction was running",
                selection=selection,
            )
        version = self._edit(
            document, selection, response.corrected_text, task_id=task_id
        )
        self.bus.emit(
            CORRECTION_APPLIED,
            {
                "task_id": task_id,
                "selection": selection,
                "version": version,
            },
        )
        telemetry.record_event(
            "correction.applied",
            data={"task_id": task_id, "uri": document.uri, "version": version},
            logger_name=self._logger_name,
        )


__all__ = ["CorrectionService", "StaleSelectionError"]
