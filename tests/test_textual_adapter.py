from __future__ import annotations

import asyncio
from typing import List, Optional, Sequence, Tuple

from proofread_engine.adapters.textual import CorrectionUIHooks, TextualCorrectionAdapter
from proofread_engine.correction import CorrectionService
from proofread_engine.llm import CorrectionResponse, LLMApiError
from proofread_engine.prompts import DEFAULT_PROMPT_NAME, PromptManager
from proofread_engine.tasks import ActiveTask

URI = "file:///draft.txt"


class EchoClient:
    def __init__(self, *, gate: Optional[asyncio.Event] = None) -> None:
        self.gate = gate
        self.prompts: List[str] = []

    async def send_correction(self, prompt: str, text: str) -> CorrectionResponse:
        self.prompts.append(prompt)
        if self.gate is not None:
            await self.gate.wait()
        return CorrectionResponse(corrected_text=text.capitalize())


class FailingClient:
    async def send_correction(self, prompt: str, text: str) -> CorrectionResponse:
        raise LLMApiError("denied", status_code=401)


def make_adapter(
    client: object,
) -> Tuple[TextualCorrectionAdapter, List[str], List[Tuple[str, str]], List[int], List[str]]:
    statuses: List[str] = []
    texts: List[Tuple[str, str]] = []
    active: List[int] = []
    logs: List[str] = []

    def show_active(tasks: Sequence[ActiveTask]) -> None:
        active.append(len(tasks))

    hooks = CorrectionUIHooks(
        update_status=statuses.append,
        update_text=lambda uri, text: texts.append((uri, text)),
        show_active=show_active,
        log=logs.append,
    )
    service = CorrectionService(PromptManager(), client)  # type: ignore[arg-type]
    adapter = TextualCorrectionAdapter(service, hooks)
    adapter.open_document(URI, "hello there\nbye")
    return adapter, statuses, texts, active, logs


def test_adapter_corrects_selection_and_updates_text() -> None:
    client = EchoClient()
    adapter, statuses, texts, active, logs = make_adapter(client)

    response = asyncio.run(adapter.correct(URI, (0, 5), (0, 0)))

    assert response is not None
    assert texts == [(URI, "Hello there\nbye")]
    assert statuses == ["processing", "done"]
    assert active[0] == 1 and active[-1] == 0
    assert any(line.startswith("event ->") for line in logs)
    assert adapter.service.prompts.get_prompts()[0].name == DEFAULT_PROMPT_NAME


def test_adapter_reports_blocking_task() -> None:
    gate = asyncio.Event()
    adapter, statuses, texts, _active, _logs = make_adapter(EchoClient(gate=gate))

    async def scenario() -> None:
        first = asyncio.create_task(adapter.correct(URI, (0, 0), (0, 5)))
        await asyncio.sleep(0)
        blocked = await adapter.correct(URI, (0, 2), (0, 8))
        assert blocked is None
        gate.set()
        await first

    asyncio.run(scenario())

    assert any(status.startswith("blocked by task_") for status in statuses)
    assert texts[-1] == (URI, "Hello there\nbye")


def test_adapter_surfaces_errors_in_status() -> None:
    adapter, statuses, texts, _active, logs = make_adapter(FailingClient())

    result = asyncio.run(adapter.correct(URI, (1, 0), (1, 3)))

    assert result is None
    assert texts == []
    assert statuses[-1] == "error: denied"
    assert any("category='api'" in line for line in logs)
    assert adapter.service.get_active_tasks() == []


def test_sync_text_replaces_idle_document() -> None:
    adapter, _statuses, _texts, _active, _logs = make_adapter(EchoClient())

    adapter.sync_text(URI, "edited by hand")

    assert adapter.document(URI).text == "edited by hand"


class ShorteningClient:
    def __init__(self, gate: asyncio.Event) -> None:
        self.gate = gate

    async def send_correction(self, prompt: str, text: str) -> CorrectionResponse:
        await self.gate.wait()
        return CorrectionResponse(corrected_text=text[:2])


def test_sync_text_during_correction_keeps_user_edit() -> None:
    gate = asyncio.Event()
    adapter, statuses, texts, _active, _logs = make_adapter(ShorteningClient(gate))

    async def scenario() -> None:
        running = asyncio.create_task(adapter.correct(URI, (0, 0), (0, 5)))
        await asyncio.sleep(0)
        adapter.sync_text(URI, "hello there\nbye EDITED BY USER")
        assert adapter.document(URI).text == "hello there\nbye EDITED BY USER"
        gate.set()
        await running

    asyncio.run(scenario())

    assert texts == [(URI, "he there\nbye EDITED BY USER")]
    assert statuses[-1] == "done"


def test_sync_text_before_selection_moves_correction() -> None:
    gate = asyncio.Event()
    adapter, _statuses, texts, _active, _logs = make_adapter(EchoClient(gate=gate))

    async def scenario() -> None:
        running = asyncio.create_task(adapter.correct(URI, (0, 6), (0, 11)))
        await asyncio.sleep(0)
        adapter.sync_text(URI, "oh hello there\nbye")
        gate.set()
        await running

    asyncio.run(scenario())

    assert texts == [(URI, "oh hello There\nbye")]


def test_sync_text_inside_selection_reports_stale_error() -> None:
    gate = asyncio.Event()
    adapter, statuses, texts, _active, _logs = make_adapter(EchoClient(gate=gate))

    async def scenario() -> None:
        running = asyncio.create_task(adapter.correct(URI, (0, 0), (0, 5)))
        await asyncio.sleep(0)
        adapter.sync_text(URI, "help there\nbye")
        gate.set()
        await running

    asyncio.run(scenario())

    assert texts == []
    assert statuses[-1].startswith("error:")
    assert adapter.document(URI).text == "help there\nbye"
    assert adapter.service.get_active_tasks() == []
