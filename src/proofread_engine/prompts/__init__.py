"""Named correction prompts and the shared prompt suffix."""

from .manager import (
    DEFAULT_PROMPT_CONTENT,
    DEFAULT_PROMPT_NAME,
    PromptManager,
    PromptNotFoundError,
    PromptValidationError,
)
from .models import CustomPrompt, PromptConfiguration

__all__ = [
    "CustomPrompt",
    "PromptConfiguration",
    "PromptManager",
    "PromptNotFoundError",
    "PromptValidationError",
    "DEFAULT_PROMPT_NAME",
    "DEFAULT_PROMPT_CONTENT",
]
