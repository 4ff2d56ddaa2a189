"""Anthropic Claude client using anthropic SDK with native async."""

import asyncio
import logging
import os
import time

import anthropic as anthropic_sdk

from brief_council.providers.base import ModelClient, ProviderError
from config.config_loader import EndpointConfig

logger = logging.getLogger(__name__)


class AnthropicClient(ModelClient):
    """Anthropic Claude endpoint via anthropic SDK."""

    def __init__(self, config: EndpointConfig) -> None:
        self._config = config
        api_key = os.environ.get(config.api_key_env, "").strip()
        if not api_key:
            raise ProviderError(config.name, f"Missing API key: {config.api_key_env}")
        self._client = anthropic_sdk.AsyncAnthropic(api_key=api_key)

    def name(self) -> str:
        return self._config.name

    async def complete(self, model: str, system: str, user: str, max_tokens: int) -> str:
        start = time.monotonic()
        try:
            response = await asyncio.wait_for(
                self._client.messages.create(
                    model=model,
                    max_tokens=max_tokens,
                    system=system,
                    messages=[{"role": "user", "content": user}],
                    temperature=self._config.temperature,
                ),
                timeout=self._config.timeout_sec,
            )
        except TimeoutError as exc:
            raise ProviderError(self._config.name, f"Request timed out after {self._config.timeout_sec}s") from exc
        except anthropic_sdk.RateLimitError as exc:
            raise ProviderError(
                self._config.name, f"{model} rate limited: {exc}", rate_limited=True, raw=str(exc)
            ) from exc
        except Exception as exc:
            raise ProviderError(self._config.name, f"{model} API call failed: {exc}", raw=str(exc)) from exc

        latency = time.monotonic() - start

        text_blocks = [b.text for b in (response.content or []) if b.type == "text"]
        if not text_blocks:
            raise ProviderError(self._config.name, f"{model} returned no text blocks")

        token_count: int | None = None
        if response.usage:
            token_count = response.usage.input_tokens + response.usage.output_tokens

        logger.info("%s %s: %.2fs, %s tokens", self._config.name, model, latency, token_count)
        return "\n".join(text_blocks)
