"""Request and client contracts for the correction workflow."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from proofread_engine.llm.response import CorrectionResponse
from proofread_engine.tasks.models import TextSelection


@dataclass(frozen=True, slots=True)
class CorrectionRequest:
    prompt_id: str
    text: str
    selection: TextSelection
    is_full_document: bool = False


class CorrectionClient(Protocol):
    """Anything able to turn a prompt plus text into a correction."""

    async def send_correction(self, prompt: str, text: str) -> CorrectionResponse:
        """Return the model's correction of ``text`` under ``prompt``."""
        ...


__all__ = ["CorrectionRequest", "CorrectionClient"]
