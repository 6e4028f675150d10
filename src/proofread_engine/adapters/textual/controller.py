"""Textual-facing adapter that runs corrections and reports through UI hooks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence

from proofread_engine.correction import EVENTS, CorrectionService
from proofread_engine.documents import TextDocument, edit_between
from proofread_engine.errors import classify_error
from proofread_engine.llm import CorrectionResponse
from proofread_engine.tasks import ActiveTask, Position, TaskConflictError, TextSelection


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class CorrectionUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_status: Callable[[str], None]
    update_text: Callable[[str, str], None] = _noop
    show_active: Callable[[Sequence[ActiveTask]], None] = _noop
    log: Callable[[str], None] = _noop


class TextualCorrectionAdapter:
    """Bridges TextArea selections to ``CorrectionService`` calls."""

    def __init__(self, service: CorrectionService, hooks: CorrectionUIHooks) -> None:
        self.service = service
        self.hooks = hooks
        self._documents: Dict[str, TextDocument] = {}
        for event in EVENTS:
            service.bus.subscribe(
                event, lambda payload, name=event: self._handle_event(name, payload)
            )

    def open_document(self, uri: str, text: str) -> TextDocument:
        document = TextDocument.from_text(uri, text)
        self._documents[uri] = document
        return document

    def document(self, uri: str) -> TextDocument:
        try:
            return self._documents[uri]
        except KeyError as exc:
            raise KeyError(f"Document '{uri}' is not open") from exc

    def sync_text(self, uri: str, text: str) -> None:
        """Mirror a user edit into the document.

        Running corrections keep their ranges: the edit is applied as a single
        replacement and pending selections after it are moved along.
        """

        document = self.document(uri)
        current = document.text
        if current == text:
            return
        selection, replacement = edit_between(uri, current, text)
        self.service.apply_edit(document, selection, replacement)

    def selection_for(self, uri: str, start: Position, end: Position) -> TextSelection:
        return TextSelection.from_cursors(uri, start, end)

    def default_prompt_id(self) -> str:
        self.service.prompts.ensure_default_prompts()
        return self.service.prompts.get_prompts()[0].id

    async def correct(
        self,
        uri: str,
        start: Position,
        end: Position,
        *,
        prompt_id: Optional[str] = None,
    ) -> Optional[CorrectionResponse]:
        """Correct the selected range; returns None when it could not run."""

        selection = self.selection_for(uri, start, end)
        blocking = self.service.tasks.get_conflicting_tasks(selection)
        if blocking:
            self.hooks.update_status(f"blocked by {blocking[0].id}")
            return None

        document = self.document(uri)
        self.hooks.update_status("processing")
        try:
            response = await self.service.correct_selection(
                document, selection, prompt_id or self.default_prompt_id()
            )
        except TaskConflictError as exc:
            self.hooks.update_status(f"blocked by {exc.conflicts[0].id}")
            return None
        except Exception as exc:
            info = classify_error(exc)
            self._log("error ->", category=info.category.value, message=info.message)
            self.hooks.update_status(f"error: {info.message}")
            return None

        self.hooks.update_text(uri, document.text)
        self.hooks.update_status("done")
        return response

    def _handle_event(self, name: str, payload: object | None) -> None:
        self._log("event ->", event=name, payload=payload)
        if name.startswith("task."):
            self.hooks.show_active(self.service.get_active_tasks())

    def _log(self, prefix: str, **fields: object) -> None:
        parts = [prefix]
        for key, value in fields.items():
            if value is not None:
                parts.append(f"{key}={value!r}")
        self.hooks.log(" ".join(parts))


__all__ = ["TextualCorrectionAdapter", "CorrectionUIHooks"]
