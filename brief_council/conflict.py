"""Deterministic conflict rule between the tech and business round-1 outputs."""

import re

from brief_council.models import ConflictReport

HEAVY_ARCHITECTURE_RE = re.compile(r"CQRS|Event\s*Sourcing|DDD|microservic", re.IGNORECASE)
FAST_LAUNCH_RE = re.compile(r"lanzar rápido|sin DDD|go-to-market|launch fast|ship fast", re.IGNORECASE)
GROWTH_PRICING_RE = re.compile(r"pricing|freemium|(?-i:\bCAC\b|\bROI\b)", re.IGNORECASE)
COST_CONCERN_RE = re.compile(r"coste|costo|\bcost\b|latencia|latency|(?-i:\bSLA\b)", re.IGNORECASE)


def detect_conflict(tech: str | None, biz: str | None) -> ConflictReport:
    """Flag a conflict worth a delta round.

    Fires when tech proposes heavyweight architecture while biz pushes a fast
    launch, or when biz argues pricing/growth while tech raises cost,
    latency or SLA concerns.
    """
    tech = tech or ""
    biz = biz or ""
    reasons: list[str] = []
    if HEAVY_ARCHITECTURE_RE.search(tech) and FAST_LAUNCH_RE.search(biz):
        reasons.append("architecture-vs-launch")
    if GROWTH_PRICING_RE.search(biz) and COST_CONCERN_RE.search(tech):
        reasons.append("pricing-vs-cost")
    return ConflictReport(triggered=bool(reasons), reasons=reasons)
