"""User-prompt builders for each call the council makes."""

import json
from typing import Any

from brief_council.models import Brief, Scores
from brief_council.personas import SPECIALIST_LABELS

ELLIPSIS = "…"

OUTPUT_FORMAT = """- Decisión (1–2 frases)
- Plan 7 días (tabla)
- Riesgos + mitigación (tabla)
- Métricas/targets (5)
- Supuestos (≤5)
- Próximas decisiones (≤5)"""

RUBRIC = "Criterios: viabilidad, ROI, TTV, riesgo (bajo)."


def cap(text: str | None, limit: int = 2000) -> str:
    """Truncate *text* to *limit* characters, marking the cut with an ellipsis."""
    if not text:
        return ""
    if len(text) > limit:
        return text[:limit] + ELLIPSIS
    return text


def build_facilitator_prompt(context: dict[str, Any], message: str) -> str:
    return (
        f"Contexto: {json.dumps(context, ensure_ascii=False)}\n"
        f"Usuario: {message}\n"
        "Si es posible, devuelve el JSON entre <<<BRIEF>>> y <<<END>>>.\n"
        "Recuerda: máximo 2 preguntas; si faltan datos, completa con supuestos."
    )


def build_brief_prompt(brief: Brief) -> str:
    """Render a normalized brief plus the evaluation rubric for the coach."""
    constraints = "; ".join(brief.restricciones or []) or "ninguna"
    lines = [
        "RESUMEN",
        f"OBJETIVO: {brief.objetivo}",
        f"RESTRICCIONES: {constraints}",
        f"CRITERIO_EXITO: {brief.criterio_exito}",
        f"PRIORIDAD: {brief.prioridad}  PLAZO: {brief.plazo}",
        f"MODO: {brief.modo}",
    ]
    if brief.supuestos:
        lines.append(f"SUPUESTOS: {'; '.join(brief.supuestos)}")
    lines += [RUBRIC, "", "Formato EXACTO (sin saludos):", OUTPUT_FORMAT, ""]
    return "\n".join(lines)


def build_round2_digest(outputs: dict[str, str], limit: int = 500) -> str:
    """Condense round-1 specialist outputs for the delta round."""
    parts = ["RESUMEN R1 (máx 100 palabras por agente)"]
    for role, text in outputs.items():
        label = SPECIALIST_LABELS.get(role, role.upper())
        parts.append(f"- {label}:\n{cap(text, limit)}")
    parts.append("Indica SOLO ajustes críticos y trade-offs en 4 bullets.")
    return "\n".join(parts)


def build_fusion_prompt(scores: Scores, outputs: dict[str, str], limit: int = 1100) -> str:
    sections = [
        "FUSIÓN",
        f"Puntajes: {json.dumps(scores.to_dict(), ensure_ascii=False)}",
        "Devuelve EXACTAMENTE:",
        OUTPUT_FORMAT,
        "",
    ]
    for role, text in outputs.items():
        label = SPECIALIST_LABELS.get(role, role.upper())
        sections += [f"{label}-DEF:", cap(text, limit), ""]
    return "\n".join(sections)


def build_patch_prompt(corrections: str, text: str) -> str:
    return (
        "Aplica estas correcciones sin cambiar el contenido esencial:\n"
        f"{corrections}\n\nTexto:\n{text}"
    )
