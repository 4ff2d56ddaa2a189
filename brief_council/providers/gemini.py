"""Gemini client using google-genai SDK with native async."""

import asyncio
import logging
import os
import time

from google import genai
from google.genai import errors as genai_errors
from google.genai import types as genai_types

from brief_council.providers.base import ModelClient, ProviderError
from config.config_loader import EndpointConfig

logger = logging.getLogger(__name__)


class GeminiClient(ModelClient):
    """Google Gemini endpoint via google-genai SDK."""

    def __init__(self, config: EndpointConfig) -> None:
        self._config = config
        api_key = os.environ.get(config.api_key_env, "").strip()
        if not api_key:
            raise ProviderError(config.name, f"Missing API key: {config.api_key_env}")
        self._client = genai.Client(api_key=api_key)

    def name(self) -> str:
        return self._config.name

    async def complete(self, model: str, system: str, user: str, max_tokens: int) -> str:
        start = time.monotonic()
        try:
            response = await asyncio.wait_for(
                self._client.aio.models.generate_content(
                    model=model,
                    contents=user,
                    config=genai_types.GenerateContentConfig(
                        system_instruction=system,
                        max_output_tokens=max_tokens,
                        temperature=self._config.temperature,
                        top_p=self._config.top_p,
                    ),
                ),
                timeout=self._config.timeout_sec,
            )
        except TimeoutError as exc:
            raise ProviderError(self._config.name, f"Request timed out after {self._config.timeout_sec}s") from exc
        except genai_errors.APIError as exc:
            raise ProviderError(
                self._config.name,
                f"{model} API call failed: {exc}",
                rate_limited=exc.code == 429,
                raw=str(exc),
            ) from exc
        except Exception as exc:
            raise ProviderError(self._config.name, f"{model} API call failed: {exc}", raw=str(exc)) from exc

        latency = time.monotonic() - start

        if not response.text:
            raise ProviderError(self._config.name, f"{model} returned empty response text")

        token_count: int | None = None
        if response.usage_metadata:
            token_count = response.usage_metadata.total_token_count

        logger.info("%s %s: %.2fs, %s tokens", self._config.name, model, latency, token_count)
        return response.text
