from __future__ import annotations

import asyncio
import json
from typing import Any, Dict, List

import httpx
import pytest

from proofread_engine.config import LLMApiConfiguration
from proofread_engine.llm import (
    LLMApiClient,
    LLMApiError,
    ResponseParseError,
    build_correction_request,
    parse_correction_response,
)


def make_config(**changes: Any) -> LLMApiConfiguration:
    return LLMApiConfiguration(
        endpoint="https://llm.test/v1/chat/completions",
        api_key="sk-test-key",
        model="test-model",
    ).with_overrides(**changes)


def make_reply(content: str) -> Dict[str, Any]:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def test_build_request_uses_config_and_prompt() -> None:
    payload = build_correction_request(
        "Fix grammar.", "teh cat", make_config(max_tokens=50)
    )

    assert payload["model"] == "test-model"
    assert payload["max_tokens"] == 50
    assert payload["messages"][0]["role"] == "system"
    assert payload["messages"][1]["content"] == "Fix grammar.\n\nText to improve:\nteh cat"


def test_build_request_with_blank_prompt() -> None:
    payload = build_correction_request("  ", "teh cat", make_config())

    assert payload["messages"][1]["content"] == (
        "Please improve the following text:\n\nteh cat"
    )


def test_parse_response_extracts_wrapped_json() -> None:
    content = 'Sure!\n```json\n{"correctedText": "the cat", "explanation": "typo"}\n```'

    response = parse_correction_response(make_reply(content))

    assert response.corrected_text == "the cat"
    assert response.explanation == "typo"


@pytest.mark.parametrize(
    "payload",
    [
        {"choices": []},
        make_reply(""),
        make_reply("no json here"),
        make_reply('{"explanation": "missing text"}'),
        make_reply('{"correctedText": 3}'),
    ],
)
def test_parse_response_rejects_unusable_replies(payload: Dict[str, Any]) -> None:
    with pytest.raises(ResponseParseError):
        parse_correction_response(payload)


def test_client_posts_with_bearer_auth() -> None:
    seen: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        body = json.dumps({"correctedText": "the cat", "explanation": "typo"})
        return httpx.Response(200, json=make_reply(body))

    async def run() -> str:
        async with LLMApiClient(
            make_config(), transport=httpx.MockTransport(handler)
        ) as client:
            response = await client.send_correction("Fix grammar.", "teh cat")
            return response.corrected_text

    assert asyncio.run(run()) == "the cat"
    assert seen[0].headers["Authorization"] == "Bearer sk-test-key"
    assert json.loads(seen[0].content)["model"] == "test-model"


@pytest.mark.parametrize(("status", "retryable"), [(401, False), (429, True), (503, True)])
def test_client_maps_error_status(status: int, retryable: bool) -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(status, text="nope"))

    async def run() -> None:
        async with LLMApiClient(make_config(), transport=transport) as client:
            await client.send_correction("p", "t")

    with pytest.raises(LLMApiError) as excinfo:
        asyncio.run(run())

    assert excinfo.value.status_code == status
    assert excinfo.value.retryable is retryable


def test_client_wraps_transport_failures() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    async def run() -> None:
        async with LLMApiClient(
            make_config(), transport=httpx.MockTransport(handler)
        ) as client:
            await client.send_correction("p", "t")

    with pytest.raises(LLMApiError) as excinfo:
        asyncio.run(run())

    assert excinfo.value.status_code is None
    assert excinfo.value.retryable is True
