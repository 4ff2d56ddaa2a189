"""Heuristic scores from the specialist outputs. No model calls."""

import re

from brief_council.models import Scores

PRESENT = 0.9
ABSENT = 0.6

INTERFACE_RE = re.compile(r"(?-i:\bGET\b|\bPOST\b)|endpoint|schema|arquitectura|architecture|OpenAPI", re.IGNORECASE)
GO_TO_MARKET_RE = re.compile(r"canal|channel|pricing|ICP|propuesta|embudo|funnel|ventas", re.IGNORECASE)
EXPERIMENT_RE = re.compile(
    r"experimento|experiment|hipótesis|hypothesis|métrica|metric|dashboard|instrumentación",
    re.IGNORECASE,
)


def _presence(pattern: re.Pattern, text: str | None) -> float:
    return PRESENT if pattern.search(text or "") else ABSENT


def interface_heuristic(text: str | None) -> float:
    return _presence(INTERFACE_RE, text)


def go_to_market_heuristic(text: str | None) -> float:
    return _presence(GO_TO_MARKET_RE, text)


def experiment_heuristic(text: str | None) -> float:
    return _presence(EXPERIMENT_RE, text)


def score_agents(tech: str | None, biz: str | None, data: str | None) -> Scores:
    has_api = interface_heuristic(tech)
    has_gtm = go_to_market_heuristic(biz)
    has_exp = experiment_heuristic(data)

    viabilidad = has_api
    roi = has_gtm
    ttv = (has_api + has_gtm) / 2
    riesgo = 1 - min(has_api, has_gtm, has_exp)
    total = (viabilidad + roi + ttv + (1 - riesgo)) / 4

    found = [
        label
        for label, value in (("API", has_api), ("GTM", has_gtm), ("experimentos", has_exp))
        if value == PRESENT
    ]
    rationale = f"Señales presentes: {'+'.join(found)}" if found else "Sin señales claras en los agentes"

    return Scores(
        viabilidad=viabilidad,
        roi=roi,
        ttv=ttv,
        riesgo=riesgo,
        total=total,
        rationale=rationale,
    )
