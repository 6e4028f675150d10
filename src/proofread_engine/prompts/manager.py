"""CRUD store for named prompts and the shared prompt suffix."""

from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Dict, Optional

from proofread_engine.runtime.telemetry import span

from .models import (
    MAX_CONTENT_LENGTH,
    MAX_NAME_LENGTH,
    MAX_SHARED_LENGTH,
    CustomPrompt,
    PromptConfiguration,
)

DEFAULT_PROMPT_NAME = "Grammar Correction"
DEFAULT_PROMPT_CONTENT = (
    "Please correct any grammar, spelling, and punctuation errors in the "
    "following text while preserving its original meaning and style."
)


class PromptNotFoundError(KeyError):
    """Raised when a prompt id is not registered."""

    def __init__(self, prompt_id: str) -> None:
        super().__init__(f"Prompt '{prompt_id}' not found")
        self.prompt_id = prompt_id

    def __str__(self) -> str:
        return str(self.args[0])


class PromptValidationError(ValueError):
    """Raised when a prompt name or content breaks the store's rules."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _check_name(name: str) -> str:
    cleaned = (name or "").strip()
    if not cleaned or len(cleaned) > MAX_NAME_LENGTH:
        raise PromptValidationError(
            f"Prompt name must be 1-{MAX_NAME_LENGTH} characters", field="name"
        )
    return cleaned


def _check_content(content: str) -> str:
    cleaned = (content or "").strip()
    if not cleaned or len(cleaned) > MAX_CONTENT_LENGTH:
        raise PromptValidationError(
            f"Prompt content must be 1-{MAX_CONTENT_LENGTH} characters",
            field="content",
        )
    return cleaned


class PromptManager:
    """Keeps prompts keyed by id; names are unique and at least one prompt
    survives once any has been created."""

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._prompts: Dict[str, CustomPrompt] = {}
        self._shared_prompt = ""
        self._logger_name = logger_name

    def __len__(self) -> int:
        return len(self._prompts)

    def create_prompt(self, name: str, content: str) -> CustomPrompt:
        with span(
            "prompts::create",
            logger_name=self._logger_name,
            component="prompts",
            metadata={"name": name},
        ) as handle:
            cleaned_name = _check_name(name)
            cleaned_content = _check_content(content)
            if self.find_by_name(cleaned_name) is not None:
                raise PromptValidationError(
                    f"Prompt with name '{cleaned_name}' already exists", field="name"
                )

            now = _now()
            prompt = CustomPrompt(
                id=f"prompt_{uuid.uuid4().hex}",
                name=cleaned_name,
                content=cleaned_content,
                created_at=now,
                updated_at=now,
            )
            self._prompts[prompt.id] = prompt
            handle.add_metadata("prompt_id", prompt.id)
            return prompt

    def update_prompt(self, prompt_id: str, name: str, content: str) -> CustomPrompt:
        with span(
            "prompts::update",
            logger_name=self._logger_name,
            component="prompts",
            metadata={"prompt_id": prompt_id},
        ):
            current = self._require(prompt_id)
            cleaned_name = _check_name(name)
            cleaned_content = _check_content(content)
            clash = self.find_by_name(cleaned_name)
            if clash is not None and clash.id != prompt_id:
                raise PromptValidationError(
                    f"Prompt with name '{cleaned_name}' already exists", field="name"
                )

            updated = replace(
                current,
                name=cleaned_name,
                content=cleaned_content,
                updated_at=_now(),
            )
            self._prompts[prompt_id] = updated
            return updated

    def delete_prompt(self, prompt_id: str) -> CustomPrompt:
        with span(
            "prompts::delete",
            logger_name=self._logger_name,
            component="prompts",
            metadata={"prompt_id": prompt_id},
        ):
            self._require(prompt_id)
            if len(self._prompts) <= 1:
                raise PromptValidationError("Cannot delete the last remaining prompt")
            return self._prompts.pop(prompt_id)

    def get_prompts(self) -> list[CustomPrompt]:
        return list(self._prompts.values())

    def get_prompt(self, prompt_id: str) -> Optional[CustomPrompt]:
        return self._prompts.get(prompt_id)

    def find_by_name(self, name: str) -> Optional[CustomPrompt]:
        wanted = name.strip()
        return next(
            (prompt for prompt in self._prompts.values() if prompt.name == wanted),
            None,
        )

    @property
    def shared_prompt(self) -> str:
        return self._shared_prompt

    def set_shared_prompt(self, content: str) -> None:
        if len(content) > MAX_SHARED_LENGTH:
            raise PromptValidationError(
                f"Shared prompt must not exceed {MAX_SHARED_LENGTH} characters",
                field="shared_prompt",
            )
        self._shared_prompt = content

    def combine_prompts(self, prompt_id: str) -> str:
        """Return the prompt content with the shared prompt appended."""

        prompt = self._require(prompt_id)
        if not self._shared_prompt.strip():
            return prompt.content
        return f"{prompt.content}\n\n{self._shared_prompt}"

    def get_configuration(self) -> PromptConfiguration:
        return PromptConfiguration(
            custom_prompts=tuple(self._prompts.values()),
            shared_prompt=self._shared_prompt,
        )

    def load_configuration(self, config: PromptConfiguration) -> None:
        """Replace every prompt with ``config``; nothing changes if it is invalid."""

        loaded: Dict[str, CustomPrompt] = {}
        names = set()
        for prompt in config.custom_prompts:
            name = _check_name(prompt.name)
            content = _check_content(prompt.content)
            if name in names:
                raise PromptValidationError(
                    f"Prompt with name '{name}' already exists", field="name"
                )
            if prompt.id in loaded:
                raise PromptValidationError(
                    f"Prompt id '{prompt.id}' is duplicated", field="id"
                )
            names.add(name)
            loaded[prompt.id] = replace(prompt, name=name, content=content)

        self.set_shared_prompt(config.shared_prompt)
        self._prompts = loaded

    def ensure_default_prompts(self) -> None:
        if not self._prompts:
            self.create_prompt(DEFAULT_PROMPT_NAME, DEFAULT_PROMPT_CONTENT)

    def _require(self, prompt_id: str) -> CustomPrompt:
        try:
            return self._prompts[prompt_id]
        except KeyError:
            raise PromptNotFoundError(prompt_id) from None


__all__ = [
    "PromptManager",
    "PromptNotFoundError",
    "PromptValidationError",
    "DEFAULT_PROMPT_NAME",
    "DEFAULT_PROMPT_CONTENT",
]
