"""Executable Textual app for proofreading a file with an LLM."""

from __future__ import annotations

import argparse
import os
from pathlib import Path
from typing import Optional, Sequence

try:  # pragma: no cover - imported only when the app is run
    from textual.app import App, ComposeResult
    from textual.widgets import Footer, Header, Static, TextArea
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use proofread_engine.adapters.textual.app"
    ) from exc

from proofread_engine.config import LLMApiConfiguration
from proofread_engine.correction import CorrectionService
from proofread_engine.llm import LLMApiClient
from proofread_engine.prompts import PromptManager
from proofread_engine.tasks import ActiveTask

from .controller import CorrectionUIHooks, TextualCorrectionAdapter


class ProofreadApp(App[None]):
    """TextArea editor where ``ctrl+r`` corrects the current selection."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#editor {
		height: 1fr;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}

	#tasks-line {
		height: 1;
		background: $surface-darken-2;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+r", "correct_selection", "Correct selection"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        *,
        path: Path,
        config: LLMApiConfiguration,
        prompt_name: Optional[str] = None,
    ) -> None:
        super().__init__()
        self._path = path
        self._uri = path.resolve().as_uri()
        self._config = config
        self._prompt_name = prompt_name
        self._client: LLMApiClient | None = None
        self.adapter: TextualCorrectionAdapter | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        text = self._path.read_text(encoding="utf-8") if self._path.exists() else ""
        yield TextArea(text, id="editor")
        yield Static("", id="status-line")
        yield Static("", id="tasks-line")
        yield Footer()

    async def on_mount(self) -> None:
        prompts = PromptManager()
        prompts.ensure_default_prompts()
        self._client = LLMApiClient(self._config)
        service = CorrectionService(prompts, self._client)
        hooks = CorrectionUIHooks(
            update_status=self._update_status,
            update_text=self._update_text,
            show_active=self._show_active,
            log=self.log,
        )
        self.adapter = TextualCorrectionAdapter(service, hooks)
        self.adapter.open_document(self._uri, self._editor.text)

    async def on_unmount(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        if self.adapter:
            self.adapter.sync_text(self._uri, event.text_area.text)

    def action_correct_selection(self) -> None:
        if not self.adapter:
            return
        start, end = self._editor.selection
        prompt_id = None
        if self._prompt_name:
            prompt = self.adapter.service.prompts.find_by_name(self._prompt_name)
            if prompt is None:
                self._update_status(f"unknown prompt {self._prompt_name!r}")
                return
            prompt_id = prompt.id
        # One worker per request so disjoint selections run side by side.
        self.run_worker(
            self.adapter.correct(self._uri, start, end, prompt_id=prompt_id),
            exclusive=False,
        )

    @property
    def _editor(self) -> TextArea:
        return self.query_one("#editor", TextArea)

    def _update_status(self, status: str) -> None:
        self.query_one("#status-line", Static).update(status)

    def _update_text(self, uri: str, text: str) -> None:
        if uri == self._uri and self._editor.text != text:
            self._editor.load_text(text)

    def _show_active(self, tasks: Sequence[ActiveTask]) -> None:
        summary = ", ".join(task.selection.describe() for task in tasks)
        self.query_one("#tasks-line", Static).update(
            f"processing: {summary}" if summary else ""
        )


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Proofread a text file with an LLM.")
    parser.add_argument("file", type=Path, help="File to open")
    parser.add_argument(
        "--prompt",
        default=os.environ.get("PROOFREAD_ENGINE_PROMPT"),
        help="Name of the prompt to use (default: the first prompt)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    config = LLMApiConfiguration.from_env().validate()
    app = ProofreadApp(path=args.file, config=config, prompt_name=args.prompt)
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual run
    main()
