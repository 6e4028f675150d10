"""Chat-completions payload construction."""

from __future__ import annotations

from typing import Any, Dict

from proofread_engine.config import LLMApiConfiguration

SYSTEM_PROMPT = """You are a professional writing assistant. Improve the provided text and reply with a single JSON object:
{
  "correctedText": "The improved version of the text",
  "explanation": "A short explanation of the changes made"
}
Return only the JSON object."""


def build_user_prompt(prompt: str, text: str) -> str:
    if prompt and prompt.strip():
        return f"{prompt}\n\nText to improve:\n{text}"
    return f"Please improve the following text:\n\n{text}"


def build_correction_request(
    prompt: str, text: str, config: LLMApiConfiguration
) -> Dict[str, Any]:
    return {
        "model": config.model,
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": build_user_prompt(prompt, text)},
        ],
        "max_tokens": config.max_tokens,
        "temperature": config.temperature,
    }


__all__ = ["SYSTEM_PROMPT", "build_user_prompt", "build_correction_request"]
