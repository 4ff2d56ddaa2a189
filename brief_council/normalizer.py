"""Brief normalization: the one place where brief defaults are written."""

import logging
import re
from dataclasses import replace
from typing import Any

from brief_council.models import MODE_FULL, MODE_LITE, Brief, Normalization, Signals

logger = logging.getLogger(__name__)

DEFAULT_PRIORITY = "alta"
DEFAULT_DEADLINE = "4 semanas"
LOW_RISK_CONSTRAINT = "bajo riesgo"

SALES_CRITERION = "≥ 50 pedidos con ROI positivo en 4 semanas"
TRANSFER_CRITERION = "≥ 95% transferencias exitosas y ≥ 1k usuarios activos"
GENERIC_CRITERION = "Objetivo validado con métricas clave alcanzadas"

PRESERVE_CAPITAL_OBJECTIVE = "Conservar capital (ROI≈0) con riesgo mínimo"
MAXIMIZE_SALES_OBJECTIVE = "Maximizar ventas con el presupuesto disponible"
RESOLVED_OBJECTIVES = (PRESERVE_CAPITAL_OBJECTIVE, MAXIMIZE_SALES_OBJECTIVE)
FALLBACK_NO_PROFIT_OBJECTIVE = "Conservar capital mientras se valida el negocio"

CLARIFICATION_MESSAGE = (
    'Detecté que mencionaste "no tener ganancias". ¿Prefieres '
    f"**{PRESERVE_CAPITAL_OBJECTIVE.lower()}** o "
    f"**{MAXIMIZE_SALES_OBJECTIVE.lower()}**? "
    "Elige una opción para ajustar el Resumen."
)

_BUDGET_MENTION_RE = re.compile(r"presupuesto|budget", re.IGNORECASE)
_SELLING_RE = re.compile(r"vender|venta", re.IGNORECASE)


def wants_lite_plan(context: dict[str, Any] | None, signals: Signals) -> bool:
    context = context or {}
    return bool(context.get("lite")) or context.get("plan") == "free" or signals.plan_lite


def infer_objective(signals: Signals) -> str | None:
    if signals.product:
        return f"Vender {signals.product} online"
    if signals.wants_sales:
        return "Incrementar ventas online"
    if signals.p2p:
        return "Lanzar P2P para enviar dinero entre personas"
    return None


def infer_success_criterion(objective: str | None, signals: Signals) -> str:
    if signals.wants_sales or _SELLING_RE.search(objective or ""):
        return SALES_CRITERION
    if signals.p2p:
        return TRANSFER_CRITERION
    return GENERIC_CRITERION


def is_resolved_objective(objective: str | None) -> bool:
    """True once the user picked one of the alternatives offered on a contradiction."""
    if not objective:
        return False
    lowered = objective.strip().lower()
    return any(lowered == alt.lower() for alt in RESOLVED_OBJECTIVES)


def normalize(
    partial: Brief | None,
    signals: Signals,
    context: dict[str, Any] | None = None,
) -> Normalization:
    """Fill missing brief fields and flag a no-profit objective.

    The input brief is never mutated. Re-running on the output with the same
    signals only re-flags the contradiction while the objective is still
    unresolved, and never duplicates the low-risk constraint.
    """
    brief = replace(partial) if partial is not None else Brief()
    brief.restricciones = list(brief.restricciones or [])
    if brief.supuestos is not None:
        brief.supuestos = list(brief.supuestos)

    if not brief.objetivo:
        brief.objetivo = infer_objective(signals)

    if signals.budget and not any(_BUDGET_MENTION_RE.search(r) for r in brief.restricciones):
        brief.restricciones.append(f"presupuesto ${signals.budget}")

    if brief.modo not in (MODE_LITE, MODE_FULL):
        brief.modo = MODE_LITE if wants_lite_plan(context, signals) else MODE_FULL
    if not brief.prioridad:
        brief.prioridad = DEFAULT_PRIORITY
    if not brief.plazo:
        brief.plazo = DEFAULT_DEADLINE
    if not brief.criterio_exito:
        brief.criterio_exito = infer_success_criterion(brief.objetivo, signals)

    if signals.wants_no_profit and not is_resolved_objective(brief.objetivo):
        logger.warning("Contradictory objective (no profit) detected; asking for clarification")
        if LOW_RISK_CONSTRAINT not in brief.restricciones:
            brief.restricciones.append(LOW_RISK_CONSTRAINT)
        brief.objetivo = brief.objetivo or FALLBACK_NO_PROFIT_OBJECTIVE
        return Normalization(
            brief=brief,
            needs_clarification=True,
            clarification_message=CLARIFICATION_MESSAGE,
        )

    return Normalization(brief=brief)
