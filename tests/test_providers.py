"""Unit tests for model clients. SDK calls are mocked, no network."""

from unittest.mock import AsyncMock, MagicMock

import httpx
import openai
import pytest

from brief_council.providers.base import ProviderError
from brief_council.providers.openai_provider import OpenAICompatibleClient
from config.config_loader import EndpointConfig


@pytest.fixture
def endpoint(monkeypatch) -> EndpointConfig:
    monkeypatch.setenv("TEST_GROQ_KEY", "gsk-test")
    return EndpointConfig(
        name="groq",
        sdk="openai",
        api_key_env="TEST_GROQ_KEY",
        timeout_sec=5,
        base_url="https://api.groq.com/openai/v1",
    )


def _completion(content: str | None) -> MagicMock:
    response = MagicMock()
    response.choices = [MagicMock(message=MagicMock(content=content))]
    response.usage = MagicMock(total_tokens=42)
    return response


def test_missing_key_raises(monkeypatch):
    monkeypatch.delenv("ABSENT_KEY", raising=False)
    config = EndpointConfig(name="groq", sdk="openai", api_key_env="ABSENT_KEY", timeout_sec=5)
    with pytest.raises(ProviderError, match="Missing API key"):
        OpenAICompatibleClient(config)


async def test_complete_sends_system_and_user(endpoint):
    client = OpenAICompatibleClient(endpoint)
    create = AsyncMock(return_value=_completion("respuesta"))
    client._client = MagicMock()
    client._client.chat.completions.create = create

    text = await client.complete("llama-3.1-8b-instant", "Eres GUARD.", "texto", 200)

    assert text == "respuesta"
    kwargs = create.call_args.kwargs
    assert kwargs["model"] == "llama-3.1-8b-instant"
    assert kwargs["messages"] == [
        {"role": "system", "content": "Eres GUARD."},
        {"role": "user", "content": "texto"},
    ]
    assert kwargs["max_tokens"] == 200
    assert kwargs["temperature"] == 0.3


async def test_rate_limit_is_classified(endpoint):
    client = OpenAICompatibleClient(endpoint)
    request = httpx.Request("POST", "https://api.groq.com/openai/v1/chat/completions")
    error = openai.RateLimitError(
        "Rate limit reached. Please try again in 1.5s",
        response=httpx.Response(429, request=request),
        body=None,
    )
    client._client = MagicMock()
    client._client.chat.completions.create = AsyncMock(side_effect=error)

    with pytest.raises(ProviderError) as exc_info:
        await client.complete("m", "s", "u", 10)

    assert exc_info.value.rate_limited is True
    assert "try again in 1.5s" in exc_info.value.raw


async def test_other_errors_are_not_rate_limited(endpoint):
    client = OpenAICompatibleClient(endpoint)
    client._client = MagicMock()
    client._client.chat.completions.create = AsyncMock(side_effect=RuntimeError("connection reset"))

    with pytest.raises(ProviderError) as exc_info:
        await client.complete("m", "s", "u", 10)

    assert exc_info.value.rate_limited is False
    assert "connection reset" in str(exc_info.value)


async def test_empty_content_raises(endpoint):
    client = OpenAICompatibleClient(endpoint)
    client._client = MagicMock()
    client._client.chat.completions.create = AsyncMock(return_value=_completion(None))

    with pytest.raises(ProviderError, match="empty"):
        await client.complete("m", "s", "u", 10)
