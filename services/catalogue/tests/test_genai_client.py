"""Tests for the Gemini AI assist client, with the API stubbed by httpx.MockTransport."""
import asyncio
import json

import httpx

from app.clients import genai_client
from app.schemas import PartCategory


def _reply(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def _transport(handler_result, seen=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        if isinstance(handler_result, Exception):
            raise handler_result
        status, body = handler_result
        return httpx.Response(status, json=body)

    return httpx.MockTransport(handler)


def test_generate_description_returns_trimmed_text():
    seen = []
    transport = _transport((200, _reply("  A bold pipe for bold riders.\n")), seen)

    result = asyncio.run(
        genai_client.generate_description("Street Fury Pipe", PartCategory.EXHAUST, api_key="k", transport=transport)
    )

    assert result == "A bold pipe for bold riders."
    request = seen[0]
    assert request.headers["x-goog-api-key"] == "k"
    assert request.url.path.endswith(":generateContent")
    prompt = json.loads(request.content)["contents"][0]["parts"][0]["text"]
    assert "Part Name: Street Fury Pipe" in prompt
    assert "Category: Exhaust" in prompt


def test_generate_description_http_error_returns_sentinel():
    transport = _transport((500, {"error": "boom"}))
    result = asyncio.run(
        genai_client.generate_description("Pipe", PartCategory.EXHAUST, api_key="k", transport=transport)
    )
    assert result == genai_client.DESCRIPTION_ERROR
    assert result.startswith("Error:")
    assert genai_client.is_error(result)


def test_missing_api_key_returns_sentinel_without_calling():
    seen = []
    transport = _transport((200, _reply("unused")), seen)
    result = asyncio.run(
        genai_client.generate_description("Pipe", PartCategory.EXHAUST, api_key="", transport=transport)
    )
    assert result == genai_client.DESCRIPTION_ERROR
    assert seen == []


def test_reorder_extracts_first_number():
    transport = _transport((200, _reply("I would reorder 40 units, maybe 45.")))
    result = asyncio.run(
        genai_client.suggest_reorder_quantity("Brake Levers", PartCategory.BRAKES, 3, api_key="k", transport=transport)
    )
    assert result == "40"
    assert not genai_client.is_error(result)


def test_reorder_defaults_when_reply_has_no_number():
    transport = _transport((200, _reply("Plenty.")))
    result = asyncio.run(
        genai_client.suggest_reorder_quantity("Brake Levers", PartCategory.BRAKES, 3, api_key="k", transport=transport)
    )
    assert result == "10"


def test_reorder_network_error_returns_error():
    transport = _transport(httpx.ConnectError("unreachable"))
    result = asyncio.run(
        genai_client.suggest_reorder_quantity("Tire", PartCategory.WHEELS, 0, api_key="k", transport=transport)
    )
    assert result == "Error"


def test_reorder_malformed_payload_returns_error():
    transport = _transport((200, {"candidates": []}))
    result = asyncio.run(
        genai_client.suggest_reorder_quantity("Tire", PartCategory.WHEELS, 0, api_key="k", transport=transport)
    )
    assert result == "Error"


def test_reorder_prompt_mentions_stock():
    prompt = genai_client.reorder_prompt("Tire", PartCategory.WHEELS, 7)
    assert "Current Stock: 7" in prompt
    assert "Category: Wheels & Tires" in prompt
