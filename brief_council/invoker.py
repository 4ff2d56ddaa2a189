"""Resilient model calls: retry, backoff, and per-model fallback.

Every external call in the council goes through ModelInvoker. The policy is a
plain object so the same attempt/delay rules apply at every call site:

* attempts are numbered 0..attempts_per_model * len(models) - 1;
* attempt i runs on models[min(i // attempts_per_model, len(models) - 1)],
  so the primary model exhausts its retries before the fallback is tried;
* rate-limited failures wait the server's "try again in N s" hint, or
  base_delay * 2**i plus jitter when there is no hint;
* any other failure waits linear_delay * (i + 1);
* the last error is raised once every attempt failed.
"""

import asyncio
import logging
import math
import random
import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from brief_council.personas import PERSONAS
from brief_council.providers.base import ModelClient, ProviderError
from config.config_loader import RetryConfig, RoleConfig

logger = logging.getLogger(__name__)

_RETRY_AFTER_RE = re.compile(r"try again in ([0-9.]+)\s*s", re.IGNORECASE)

SleepFn = Callable[[float], Awaitable[None]]


def parse_retry_after(text: str | None) -> float | None:
    """Seconds from a "Please try again in 1.25s" hint, rounded up to whole ms."""
    match = _RETRY_AFTER_RE.search(text or "")
    if not match:
        return None
    try:
        seconds = float(match.group(1))
    except ValueError:
        return None
    return math.ceil(seconds * 1000) / 1000


@dataclass
class RetryPolicy:
    attempts_per_model: int = 3
    base_delay_sec: float = 0.4
    linear_delay_sec: float = 0.25
    max_jitter_sec: float = 0.2

    @classmethod
    def from_config(cls, config: RetryConfig) -> "RetryPolicy":
        return cls(
            attempts_per_model=config.attempts_per_model,
            base_delay_sec=config.base_delay_sec,
            linear_delay_sec=config.linear_delay_sec,
            max_jitter_sec=config.max_jitter_sec,
        )

    def total_attempts(self, model_count: int) -> int:
        return max(self.attempts_per_model, 1) * max(model_count, 1)

    def model_for_attempt(self, models: list[str], attempt: int) -> str:
        index = min(attempt // max(self.attempts_per_model, 1), len(models) - 1)
        return models[index]

    def delay_for(self, error: ProviderError, attempt: int, rng: random.Random | None = None) -> float:
        """Seconds to wait after *attempt* failed with *error*."""
        if error.rate_limited:
            hinted = parse_retry_after(error.raw)
            if hinted is not None:
                return hinted
            jitter = (rng or random).uniform(0, self.max_jitter_sec)
            return self.base_delay_sec * (2 ** attempt) + jitter
        return self.linear_delay_sec * (attempt + 1)


class ModelInvoker:
    """Binds a RetryPolicy to one model client."""

    def __init__(
        self,
        client: ModelClient,
        policy: RetryPolicy | None = None,
        sleep: SleepFn = asyncio.sleep,
        rng: random.Random | None = None,
    ) -> None:
        self.client = client
        self.policy = policy or RetryPolicy()
        self._sleep = sleep
        self._rng = rng

    async def invoke(
        self,
        model: str,
        system: str,
        user: str,
        max_tokens: int,
        fallback_model: str | None = None,
        attempts_per_model: int | None = None,
    ) -> str:
        """Call the client until one attempt succeeds.

        Raises:
            ProviderError: The last error, after every attempt on every model failed.
        """
        policy = self.policy
        if attempts_per_model is not None:
            policy = RetryPolicy(
                attempts_per_model=attempts_per_model,
                base_delay_sec=policy.base_delay_sec,
                linear_delay_sec=policy.linear_delay_sec,
                max_jitter_sec=policy.max_jitter_sec,
            )

        models = [model] + ([fallback_model] if fallback_model else [])
        total = policy.total_attempts(len(models))
        attempt = 0
        while True:
            current = policy.model_for_attempt(models, attempt)
            try:
                return await self.client.complete(current, system, user, max_tokens)
            except ProviderError as exc:
                if attempt + 1 >= total:
                    logger.error(
                        "%s exhausted %d attempts across %s: %s",
                        self.client.name(), total, ", ".join(models), exc,
                    )
                    raise
                delay = policy.delay_for(exc, attempt, self._rng)
                logger.warning(
                    "%s attempt %d/%d on %s failed (%s), retrying in %.2fs",
                    self.client.name(),
                    attempt + 1,
                    total,
                    current,
                    "rate limited" if exc.rate_limited else "error",
                    delay,
                )
                await self._sleep(delay)
                attempt += 1


class PersonaCaller:
    """Resolves a role to its persona, endpoint invoker, and model ids."""

    def __init__(
        self,
        invokers: dict[str, ModelInvoker],
        roles: dict[str, RoleConfig],
        personas: dict[str, str] | None = None,
    ) -> None:
        self._invokers = invokers
        self._roles = roles
        self._personas = personas or PERSONAS

    async def call(self, role: str, user: str, max_tokens: int) -> str:
        role_cfg = self._roles[role]
        invoker = self._invokers[role_cfg.endpoint]
        logger.debug("Calling %s (%s) with %d-char prompt", role, role_cfg.model, len(user))
        return await invoker.invoke(
            role_cfg.model,
            self._personas[role],
            user,
            max_tokens,
            fallback_model=role_cfg.fallback_model,
        )
