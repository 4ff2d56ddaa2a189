"""Integration tests: real API calls, no mocks. Requires .env with the configured keys."""

import pytest
from dotenv import load_dotenv

from config.config_loader import load_config

load_dotenv()

_CONFIG = load_config()
pytestmark = pytest.mark.integration

if _CONFIG.missing_endpoints():
    pytestmark = pytest.mark.skip(
        reason=f"Missing API keys for endpoints: {', '.join(sorted(_CONFIG.missing_endpoints()))}"
    )


async def test_intake_then_lite_debate():
    """Run one intake turn and a lite debate against the real endpoint, verify no crash."""
    from brief_council.service import CouncilService

    service = CouncilService(_CONFIG)

    intake = await service.handle({
        "message": "Quiero vender GPS online con 500 USD de presupuesto, plan free, en 4 semanas",
        "phase": "intake",
        "context": {"plan": "free"},
    })
    assert intake.status == 200, intake.body
    assert intake.body["next_phase_hint"] in {"intake", "ready", "needs_fix"}
    assert intake.body["context_echo"]["__intake_turns"] == 1

    brief = intake.body["brief"] or {"objetivo": "Vender GPS online", "modo": "lite"}
    debate = await service.handle({
        "message": "iniciar debate",
        "phase": "debate",
        "brief": {**brief, "modo": "lite"},
    })
    assert debate.status == 200, debate.body
    assert debate.body["reply"]
    assert debate.body["agents_called"] == ["coach", "tech", "guard"]
    assert 0.0 <= debate.body["scores"]["total"] <= 1.0
