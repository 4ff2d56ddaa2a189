"""Dataclasses for the brief council pipeline. No I/O, no model calls."""

from dataclasses import dataclass, field
from typing import Any

MODE_LITE = "lite"
MODE_FULL = "full"
MODES = (MODE_LITE, MODE_FULL)

HINT_INTAKE = "intake"
HINT_NEEDS_FIX = "needs_fix"
HINT_READY = "ready"


def _text_or_none(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass
class Brief:
    objetivo: str | None = None
    restricciones: list[str] | None = None
    criterio_exito: str | None = None
    prioridad: str | None = None
    plazo: str | None = None
    modo: str | None = None                  # "lite" | "full" once normalized
    supuestos: list[str] | None = None

    @classmethod
    def from_dict(cls, raw: dict[str, Any] | None) -> "Brief":
        """Read caller or model JSON as-is. Fills nothing in; see normalizer."""
        raw = raw or {}

        def as_list(value: Any) -> list[str] | None:
            if value is None:
                return None
            if not isinstance(value, (list, tuple)):
                value = [value]
            return [str(v).strip() for v in value if str(v).strip()]

        modo = _text_or_none(raw.get("modo"))
        if modo is not None:
            modo = modo.lower()
            if modo not in MODES:
                modo = None

        return cls(
            objetivo=_text_or_none(raw.get("objetivo")),
            restricciones=as_list(raw.get("restricciones")),
            criterio_exito=_text_or_none(raw.get("criterio_exito")),
            prioridad=_text_or_none(raw.get("prioridad")),
            plazo=_text_or_none(raw.get("plazo")),
            modo=modo,
            supuestos=as_list(raw.get("supuestos")),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "objetivo": self.objetivo,
            "restricciones": list(self.restricciones or []),
            "criterio_exito": self.criterio_exito,
            "prioridad": self.prioridad,
            "plazo": self.plazo,
            "modo": self.modo,
        }
        if self.supuestos:
            out["supuestos"] = list(self.supuestos)
        return out


@dataclass(frozen=True)
class Signals:
    wants_no_profit: bool = False
    budget: int | None = None
    product: str | None = None
    wants_sales: bool = False
    p2p: bool = False
    plan_lite: bool = False


@dataclass
class Normalization:
    brief: Brief
    needs_clarification: bool = False
    clarification_message: str = ""


@dataclass
class TranscriptEntry:
    agent: str
    round: int
    content: str

    def to_dict(self) -> dict[str, Any]:
        return {"agent": self.agent, "round": self.round, "content": self.content}


@dataclass
class Scores:
    viabilidad: float
    roi: float
    ttv: float
    riesgo: float
    total: float
    rationale: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "viabilidad": self.viabilidad,
            "roi": self.roi,
            "ttv": self.ttv,
            "riesgo": self.riesgo,
            "total": self.total,
            "rationale": self.rationale,
        }


@dataclass
class ConflictReport:
    triggered: bool
    reasons: list[str] = field(default_factory=list)


@dataclass
class GuardReview:
    text: str
    accepted: bool
    corrections: str | None = None
    patched: bool = False


@dataclass
class IntakeResult:
    reply: str
    brief: Brief | None
    next_phase_hint: str
    context_echo: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {
            "reply": self.reply,
            "brief": self.brief.to_dict() if self.brief else None,
            "next_phase_hint": self.next_phase_hint,
            "context_echo": self.context_echo,
        }


@dataclass
class DebateResult:
    reply: str
    transcript: list[TranscriptEntry]
    scores: Scores
    agents_called: list[str]
    brief: Brief | None = None
    round2_ran: bool = False
    guard_accepted: bool = True
    total_duration_sec: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "reply": self.reply,
            "transcript": [e.to_dict() for e in self.transcript],
            "scores": self.scores.to_dict(),
            "agents_called": list(self.agents_called),
        }
