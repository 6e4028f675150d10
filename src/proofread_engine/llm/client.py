"""Async HTTP client for OpenAI-compatible chat-completions endpoints."""

from __future__ import annotations

from types import TracebackType
from typing import Optional, Type

import httpx

from proofread_engine.config import LLMApiConfiguration
from proofread_engine.runtime.telemetry import span

from .request import build_correction_request
from .response import CorrectionResponse, ResponseParseError, parse_correction_response


class LLMApiError(RuntimeError):
    """Raised when the endpoint is unreachable or answers with an error status."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.retryable = retryable


def _is_retryable_status(status_code: int) -> bool:
    return status_code == 429 or status_code >= 500


class LLMApiClient:
    """Sends one correction request per call; no retries at this layer."""

    def __init__(
        self,
        config: LLMApiConfiguration,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        logger_name: str | None = None,
    ) -> None:
        self.config = config.validate()
        self._logger_name = logger_name
        headers = {"Content-Type": "application/json"}
        if config.api_key:
            headers["Authorization"] = f"Bearer {config.api_key}"
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(config.timeout_seconds, connect=10.0),
            headers=headers,
            transport=transport,
        )

    async def send_correction(self, prompt: str, text: str) -> CorrectionResponse:
        payload = build_correction_request(prompt, text, self.config)
        with span(
            "llm::send_correction",
            logger_name=self._logger_name,
            component="llm",
            metadata={"model": self.config.model, "chars": len(text)},
        ) as handle:
            try:
                response = await self._client.post(self.config.endpoint, json=payload)
            except httpx.HTTPError as exc:
                raise LLMApiError(
                    f"Request to {self.config.endpoint} failed: {exc}",
                    retryable=True,
                ) from exc

            handle.add_metadata("status", response.status_code)
            if response.is_error:
                raise LLMApiError(
                    f"API request failed with status {response.status_code}: "
                    f"{response.text}",
                    status_code=response.status_code,
                    retryable=_is_retryable_status(response.status_code),
                )

            try:
                body = response.json()
            except ValueError as exc:
                raise ResponseParseError(
                    "API returned a non-JSON body", content=response.text
                ) from exc
            return parse_correction_response(body)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "LLMApiClient":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        await self.aclose()


__all__ = ["LLMApiClient", "LLMApiError"]
