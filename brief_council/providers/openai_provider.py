"""OpenAI-compatible client (OpenAI, Groq, ...) using the openai SDK with native async."""

import asyncio
import logging
import os
import time

import openai
from openai import AsyncOpenAI

from brief_council.providers.base import ModelClient, ProviderError
from config.config_loader import EndpointConfig

logger = logging.getLogger(__name__)


class OpenAICompatibleClient(ModelClient):
    """Chat-completions endpoint via openai SDK; base_url selects the vendor."""

    def __init__(self, config: EndpointConfig) -> None:
        self._config = config
        api_key = os.environ.get(config.api_key_env, "").strip()
        if not api_key:
            raise ProviderError(config.name, f"Missing API key: {config.api_key_env}")
        self._client = AsyncOpenAI(api_key=api_key, base_url=config.base_url)

    def name(self) -> str:
        return self._config.name

    async def complete(self, model: str, system: str, user: str, max_tokens: int) -> str:
        start = time.monotonic()
        try:
            response = await asyncio.wait_for(
                self._client.chat.completions.create(
                    model=model,
                    messages=[
                        {"role": "system", "content": system},
                        {"role": "user", "content": user},
                    ],
                    max_tokens=max_tokens,
                    temperature=self._config.temperature,
                    top_p=self._config.top_p,
                ),
                timeout=self._config.timeout_sec,
            )
        except TimeoutError as exc:
            raise ProviderError(self._config.name, f"Request timed out after {self._config.timeout_sec}s") from exc
        except openai.RateLimitError as exc:
            raise ProviderError(
                self._config.name, f"{model} rate limited: {exc}", rate_limited=True, raw=str(exc)
            ) from exc
        except Exception as exc:
            raise ProviderError(self._config.name, f"{model} API call failed: {exc}", raw=str(exc)) from exc

        latency = time.monotonic() - start

        choice = response.choices[0] if response.choices else None
        if not choice or not choice.message.content:
            raise ProviderError(self._config.name, f"{model} returned empty response content")

        token_count: int | None = None
        if response.usage:
            token_count = response.usage.total_tokens

        logger.info("%s %s: %.2fs, %s tokens", self._config.name, model, latency, token_count)
        return choice.message.content
