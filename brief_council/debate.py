"""Debate phase: coach framing, specialist rounds, scoring, fusion, guard."""

import asyncio
import logging
import time
from typing import Any

from brief_council.conflict import detect_conflict
from brief_council.guard import ContentGuard
from brief_council.invoker import PersonaCaller
from brief_council.models import MODE_LITE, Brief, DebateResult, TranscriptEntry
from brief_council.personas import BIZ, COACH, DATA, GUARD, SPECIALISTS, TECH
from brief_council.prompts import (
    build_brief_prompt,
    build_fusion_prompt,
    build_round2_digest,
    cap,
)
from brief_council.scoring import score_agents
from config.config_loader import LimitsConfig

logger = logging.getLogger(__name__)

FRAMING_ROUND = 1
DELTA_ROUND = 2
FUSION_ROUND = 3

LITE_PANEL = (TECH,)
FULL_PANEL = SPECIALISTS


def select_agents(brief: Brief, context: dict[str, Any] | None = None) -> list[str]:
    """lite (or context["lite"]) runs the tech specialist only; full runs all three."""
    lite = brief.modo == MODE_LITE or bool((context or {}).get("lite"))
    return list(LITE_PANEL if lite else FULL_PANEL)


class DebateOrchestrator:
    """Runs one debate turn end to end for a normalized brief."""

    def __init__(
        self,
        caller: PersonaCaller,
        limits: LimitsConfig | None = None,
        guard: ContentGuard | None = None,
    ) -> None:
        self._caller = caller
        self._limits = limits or LimitsConfig()
        self._guard = guard or ContentGuard(caller, self._limits)

    async def _run_round(self, roles: list[str], prompt: str, max_tokens: int) -> dict[str, str]:
        """Call every role once; results keyed in role order.

        Concurrent calls all settle before the first failure is raised.
        """
        if self._limits.sequential_dispatch:
            outputs: dict[str, str] = {}
            for role in roles:
                outputs[role] = await self._caller.call(role, prompt, max_tokens)
            return outputs

        results = await asyncio.gather(
            *(self._caller.call(role, prompt, max_tokens) for role in roles),
            return_exceptions=True,
        )
        for role, result in zip(roles, results):
            if isinstance(result, BaseException):
                logger.error("Specialist %s failed: %s", role, result)
                raise result
        return dict(zip(roles, results))

    def _record(self, transcript: list[TranscriptEntry], agent: str, round_number: int, text: str) -> None:
        transcript.append(TranscriptEntry(agent=agent, round=round_number, content=cap(text, self._limits.transcript_cap)))

    async def run(self, brief: Brief, context: dict[str, Any] | None = None) -> DebateResult:
        """Run the debate for *brief*.

        Raises:
            ProviderError: When any coach or specialist call exhausts its retries.
        """
        start = time.monotonic()
        transcript: list[TranscriptEntry] = []
        agents_called: list[str] = [COACH]

        framing = await self._caller.call(COACH, build_brief_prompt(brief), self._limits.coach_tokens)
        self._record(transcript, COACH, FRAMING_ROUND, framing)

        roles = select_agents(brief, context)
        agents_called += roles
        logger.info("Round 1 with %d specialists: %s", len(roles), ", ".join(roles))

        round1 = await self._run_round(roles, framing, self._limits.round1_tokens)
        for role in roles:
            self._record(transcript, role, FRAMING_ROUND, round1[role])

        latest = dict(round1)
        round2_ran = False
        if len(roles) > 1:
            conflict = detect_conflict(round1.get(TECH), round1.get(BIZ))
            if conflict.triggered:
                logger.info("Conflict detected (%s); running round 2", ", ".join(conflict.reasons))
                digest = build_round2_digest(round1, self._limits.digest_cap)
                round2 = await self._run_round(roles, digest, self._limits.round2_tokens)
                for role in roles:
                    if round2[role]:
                        self._record(transcript, role, DELTA_ROUND, round2[role])
                        latest[role] = round2[role]
                round2_ran = True
            else:
                logger.info("No conflict between specialists; skipping round 2")

        scores = score_agents(latest.get(TECH), latest.get(BIZ), latest.get(DATA))
        logger.info("Scores: total=%.3f (%s)", scores.total, scores.rationale)

        fused = await self._caller.call(
            COACH,
            build_fusion_prompt(scores, latest, self._limits.fusion_cap),
            self._limits.fusion_tokens,
        )
        self._record(transcript, COACH, FUSION_ROUND, fused)

        review = await self._guard.review(fused)
        agents_called.append(GUARD)

        return DebateResult(
            reply=review.text,
            transcript=transcript,
            scores=scores,
            agents_called=agents_called,
            brief=brief,
            round2_ran=round2_ran,
            guard_accepted=review.accepted,
            total_duration_sec=time.monotonic() - start,
        )
