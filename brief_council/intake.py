"""Intake phase: facilitator turn, embedded brief parsing, readiness decision."""

import json
import logging
import re
from typing import Any

from brief_council.invoker import PersonaCaller
from brief_council.models import (
    HINT_INTAKE,
    HINT_NEEDS_FIX,
    HINT_READY,
    Brief,
    IntakeResult,
)
from brief_council.normalizer import normalize
from brief_council.personas import FACILITATOR
from brief_council.prompts import build_facilitator_prompt
from brief_council.signals import extract_signals
from config.config_loader import LimitsConfig

logger = logging.getLogger(__name__)

TURN_COUNTER_KEY = "__intake_turns"

_BRIEF_BLOCK_RE = re.compile(r"<<<BRIEF>>>(.*?)<<<END>>>", re.DOTALL)

PROPOSAL_NOTE = "Propongo este Resumen inicial. ¿Confirmas para iniciar debate o editamos algo?"


def read_turn_count(context: dict[str, Any] | None) -> int:
    try:
        return int((context or {}).get(TURN_COUNTER_KEY, 0))
    except (TypeError, ValueError):
        return 0


def extract_brief_block(text: str) -> tuple[Brief | None, str]:
    """Return (parsed brief or None, text with every brief block removed)."""
    visible = _BRIEF_BLOCK_RE.sub("", text).strip()
    match = _BRIEF_BLOCK_RE.search(text)
    if not match:
        return None, visible
    try:
        raw = json.loads(match.group(1))
    except json.JSONDecodeError:
        logger.warning("Facilitator returned a brief block that is not valid JSON")
        return None, visible
    if not isinstance(raw, dict):
        logger.warning("Facilitator brief block is %s, expected an object", type(raw).__name__)
        return None, visible
    return Brief.from_dict(raw), visible


def assumed_brief() -> Brief:
    """Best-effort brief used once the question limit is reached without one."""
    return Brief(
        objetivo="Validar ventas online con presupuesto acotado",
        restricciones=["plan free", "bajo riesgo", "bajas comisiones"],
        criterio_exito="primeras 20 ventas con ROI ≥ 0",
        prioridad="alta",
        plazo="4 semanas",
        supuestos=["KYC básico si aplica", "cumplimiento mínimo requerido"],
    )


class IntakeController:
    """Drives collecting -> ready | needs_fix, one caller turn at a time."""

    def __init__(self, caller: PersonaCaller, limits: LimitsConfig | None = None) -> None:
        self._caller = caller
        self._limits = limits or LimitsConfig()

    async def run_turn(self, message: str, context: dict[str, Any] | None = None) -> IntakeResult:
        context = dict(context or {})
        turns = read_turn_count(context) + 1
        context_echo = {**context, TURN_COUNTER_KEY: turns}
        signals = extract_signals(message)

        logger.info("Intake turn %d", turns)
        facilitator_out = await self._caller.call(
            FACILITATOR,
            build_facilitator_prompt(context_echo, message),
            self._limits.facilitator_tokens,
        )

        source, reply = extract_brief_block(facilitator_out)
        if source is None and turns >= self._limits.intake_question_limit:
            logger.info("No brief after %d turns; proposing one with assumptions", turns)
            source = assumed_brief()
            reply = f"{reply}\n\n{PROPOSAL_NOTE}" if reply else PROPOSAL_NOTE

        result = normalize(source, signals, context)

        if result.needs_clarification:
            hint = HINT_NEEDS_FIX
            brief: Brief | None = result.brief
            reply = f"{reply}\n\n{result.clarification_message}" if reply else result.clarification_message
        elif source is not None and result.brief.objetivo:
            hint = HINT_READY
            brief = result.brief
        else:
            hint = HINT_INTAKE
            brief = None

        logger.info("Intake turn %d -> %s", turns, hint)
        return IntakeResult(
            reply=reply,
            brief=brief,
            next_phase_hint=hint,
            context_echo=context_echo,
        )
