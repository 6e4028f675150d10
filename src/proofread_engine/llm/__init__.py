"""LLM request building, transport, and reply parsing."""

from .client import LLMApiClient, LLMApiError
from .request import SYSTEM_PROMPT, build_correction_request, build_user_prompt
from .response import CorrectionResponse, ResponseParseError, parse_correction_response

__all__ = [
    "LLMApiClient",
    "LLMApiError",
    "SYSTEM_PROMPT",
    "build_correction_request",
    "build_user_prompt",
    "CorrectionResponse",
    "ResponseParseError",
    "parse_correction_response",
]
