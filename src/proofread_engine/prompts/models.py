"""Dataclasses for named correction prompts."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

MAX_NAME_LENGTH = 100
MAX_CONTENT_LENGTH = 2000
MAX_SHARED_LENGTH = 2000


@dataclass(frozen=True, slots=True)
class CustomPrompt:
    """User-defined instruction sent ahead of the text to correct."""

    id: str
    name: str
    content: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True, slots=True)
class PromptConfiguration:
    """Snapshot of every prompt plus the shared suffix appended to each."""

    custom_prompts: tuple[CustomPrompt, ...] = field(default_factory=tuple)
    shared_prompt: str = ""


__all__ = [
    "CustomPrompt",
    "PromptConfiguration",
    "MAX_NAME_LENGTH",
    "MAX_CONTENT_LENGTH",
    "MAX_SHARED_LENGTH",
]
