"""Shared pytest fixtures."""

from dataclasses import dataclass
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from brief_council.invoker import ModelInvoker, PersonaCaller, RetryPolicy
from brief_council.models import Brief
from brief_council.personas import PERSONAS, ROLES
from brief_council.providers.base import ModelClient, ProviderError
from config.config_loader import (
    AppConfig,
    DefaultsConfig,
    EndpointConfig,
    LimitsConfig,
    RetryConfig,
    RoleConfig,
)

_ROLE_BY_PERSONA = {persona: role for role, persona in PERSONAS.items()}


@dataclass
class Call:
    role: str
    model: str
    user: str
    max_tokens: int


class MockClient(ModelClient):
    """Test double ModelClient.

    Replies per role (resolved from the persona): a string is returned on
    every call, a list is consumed one item per call, and an Exception item is
    raised instead of returned.
    """

    def __init__(self, replies: dict | None = None, endpoint_name: str = "mock") -> None:
        self._name = endpoint_name
        self.replies = {role: "OK-GUARD" if role == "guard" else f"{role} output" for role in ROLES}
        self.replies.update(replies or {})
        self.calls: list[Call] = []

    def name(self) -> str:
        return self._name

    def calls_for(self, role: str) -> list[Call]:
        return [c for c in self.calls if c.role == role]

    async def complete(self, model: str, system: str, user: str, max_tokens: int) -> str:
        role = _ROLE_BY_PERSONA.get(system, "unknown")
        self.calls.append(Call(role=role, model=model, user=user, max_tokens=max_tokens))
        reply = self.replies[role]
        if isinstance(reply, list):
            reply = reply.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def sample_limits() -> LimitsConfig:
    return LimitsConfig()


@pytest.fixture
def sample_roles() -> dict[str, RoleConfig]:
    roles = {role: RoleConfig(role=role, endpoint="mock", model=f"{role}-model") for role in ROLES}
    roles["data"].fallback_model = "data-fallback-model"
    return roles


@pytest.fixture
def sample_app_config(tmp_path: Path, sample_roles, sample_limits) -> AppConfig:
    return AppConfig(
        defaults=DefaultsConfig(output_dir=tmp_path / "output"),
        endpoints={
            "mock": EndpointConfig(name="mock", sdk="openai", api_key_env="MOCK_API_KEY", timeout_sec=30),
        },
        roles=sample_roles,
        retry=RetryConfig(attempts_per_model=3, base_delay_sec=0.0, linear_delay_sec=0.0, max_jitter_sec=0.0),
        limits=sample_limits,
        available_endpoints={"mock"},
    )


@pytest.fixture
def sleeps() -> list[float]:
    return []


@pytest.fixture
def fake_sleep(sleeps):
    async def _sleep(delay: float) -> None:
        sleeps.append(delay)
    return AsyncMock(side_effect=_sleep)


@pytest.fixture
def mock_client() -> MockClient:
    return MockClient()


@pytest.fixture
def make_caller(sample_roles, fake_sleep):
    """Build a PersonaCaller around a MockClient with instant retries."""

    def _make(client: MockClient, attempts_per_model: int = 3) -> PersonaCaller:
        invoker = ModelInvoker(client, RetryPolicy(attempts_per_model=attempts_per_model), sleep=fake_sleep)
        return PersonaCaller({"mock": invoker}, sample_roles)

    return _make


@pytest.fixture
def full_brief() -> Brief:
    return Brief(
        objetivo="Vender GPS online",
        restricciones=["presupuesto $500"],
        criterio_exito="≥ 50 pedidos con ROI positivo en 4 semanas",
        prioridad="alta",
        plazo="4 semanas",
        modo="full",
    )


@pytest.fixture
def lite_brief(full_brief: Brief) -> Brief:
    full_brief.modo = "lite"
    return full_brief


def rate_limited(message: str = "Rate limit reached. Please try again in 1.5s") -> ProviderError:
    return ProviderError("mock", "rate limited", rate_limited=True, raw=message)


def transient(message: str = "503 Service Unavailable") -> ProviderError:
    return ProviderError("mock", message)
