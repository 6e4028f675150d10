"""Extraction of the corrected text from a chat-completions reply."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Mapping

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


@dataclass(frozen=True, slots=True)
class CorrectionResponse:
    corrected_text: str
    explanation: str = ""


class ResponseParseError(ValueError):
    """Raised when the model reply does not carry a usable correction."""

    def __init__(self, message: str, *, content: str | None = None) -> None:
        super().__init__(message)
        self.content = content


def _message_content(payload: Mapping[str, Any]) -> str:
    choices = payload.get("choices") if isinstance(payload, Mapping) else None
    if not choices:
        raise ResponseParseError("No response choices available")
    first = choices[0]
    message = first.get("message") if isinstance(first, Mapping) else None
    content = message.get("content") if isinstance(message, Mapping) else None
    if not isinstance(content, str) or not content.strip():
        raise ResponseParseError("Empty response content")
    return content


def parse_correction_response(payload: Mapping[str, Any]) -> CorrectionResponse:
    """Pull ``correctedText``/``explanation`` out of ``choices[0]``.

    Models often wrap the JSON object in prose or code fences, so the outermost
    ``{...}`` span is decoded rather than the whole message.
    """

    content = _message_content(payload)
    match = _JSON_OBJECT.search(content)
    raw = match.group(0) if match else content
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ResponseParseError(
            "Failed to parse JSON response", content=content
        ) from exc

    if not isinstance(data, dict):
        raise ResponseParseError("Response is not a JSON object", content=content)
    corrected = data.get("correctedText")
    if not isinstance(corrected, str):
        raise ResponseParseError(
            "Response is missing a string 'correctedText'", content=content
        )
    explanation = data.get("explanation")
    return CorrectionResponse(
        corrected_text=corrected,
        explanation=explanation if isinstance(explanation, str) else "",
    )


__all__ = ["CorrectionResponse", "ResponseParseError", "parse_correction_response"]
