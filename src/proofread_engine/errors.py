"""Maps engine exceptions to user-facing error categories."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import httpx

from proofread_engine.config import ConfigurationError
from proofread_engine.documents import SelectionBoundsError
from proofread_engine.llm import LLMApiError, ResponseParseError
from proofread_engine.prompts import PromptNotFoundError, PromptValidationError
from proofread_engine.tasks import TaskConflictError


class ErrorCategory(str, Enum):
    VALIDATION = "validation"
    API = "api"
    SYSTEM = "system"
    USER = "user"


@dataclass(frozen=True, slots=True)
class ErrorInfo:
    category: ErrorCategory
    message: str
    suggestion: Optional[str] = None
    retryable: bool = False


def classify_error(exc: BaseException) -> ErrorInfo:
    """Describe ``exc`` the way a notification should present it."""

    message = str(exc) or type(exc).__name__

    if isinstance(exc, TaskConflictError):
        blocking = ", ".join(task.id for task in exc.conflicts)
        return ErrorInfo(
            ErrorCategory.USER,
            "This text is already being processed",
            suggestion=(
                f"Wait for {blocking} to finish or select different text."
            ),
            retryable=True,
        )
    if isinstance(exc, SelectionBoundsError):
        return ErrorInfo(
            ErrorCategory.USER,
            message,
            suggestion="Select the text to correct and try again.",
        )
    if isinstance(exc, (PromptNotFoundError, PromptValidationError, ConfigurationError)):
        return ErrorInfo(
            ErrorCategory.VALIDATION,
            message,
            suggestion="Check your prompt and API settings.",
        )
    if isinstance(exc, LLMApiError):
        if exc.status_code in (401, 403):
            suggestion = "Check that the API key is valid."
        elif exc.status_code == 429:
            suggestion = "Rate limit reached; wait a moment before retrying."
        else:
            suggestion = "Check your network connection and API endpoint."
        return ErrorInfo(
            ErrorCategory.API, message, suggestion=suggestion, retryable=exc.retryable
        )
    if isinstance(exc, ResponseParseError):
        return ErrorInfo(
            ErrorCategory.API,
            message,
            suggestion="The model reply was unusable; try again.",
            retryable=True,
        )
    if isinstance(exc, httpx.HTTPError):
        return ErrorInfo(
            ErrorCategory.API,
            message,
            suggestion="Check your network connection and API endpoint.",
            retryable=True,
        )
    return ErrorInfo(ErrorCategory.SYSTEM, message)


__all__ = ["ErrorCategory", "ErrorInfo", "classify_error"]
