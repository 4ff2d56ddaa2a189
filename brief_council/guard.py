"""Post-hoc policy review with at most one corrective patch."""

import logging

from brief_council.invoker import PersonaCaller
from brief_council.models import GuardReview
from brief_council.personas import COACH, GUARD, GUARD_APPROVAL
from brief_council.prompts import build_patch_prompt
from config.config_loader import LimitsConfig

logger = logging.getLogger(__name__)


def is_approved(verdict: str | None) -> bool:
    return GUARD_APPROVAL.lower() in (verdict or "").lower()


class ContentGuard:
    """Soft quality gate: a disapproval never becomes an error."""

    def __init__(self, caller: PersonaCaller, limits: LimitsConfig | None = None) -> None:
        self._caller = caller
        self._limits = limits or LimitsConfig()

    async def review(self, candidate: str) -> GuardReview:
        verdict = await self._caller.call(GUARD, candidate, self._limits.guard_tokens)
        if is_approved(verdict):
            logger.info("Guard approved the candidate")
            return GuardReview(text=candidate, accepted=True)

        logger.warning("Guard requested corrections; applying one patch")
        patched = await self._caller.call(
            COACH,
            build_patch_prompt(verdict, candidate),
            self._limits.patch_tokens,
        )
        recheck = await self._caller.call(GUARD, patched, self._limits.guard_recheck_tokens)
        if is_approved(recheck):
            logger.info("Guard approved the patched candidate")
            return GuardReview(text=patched, accepted=True, corrections=verdict, patched=True)

        logger.warning("Guard still disapproves after patch; serving the original candidate")
        return GuardReview(text=candidate, accepted=False, corrections=verdict)
