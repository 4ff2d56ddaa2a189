"""Rich console output and markdown file save for council turns."""

import logging
import re
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table
from rich.text import Text

from brief_council.models import Brief, DebateResult, IntakeResult, Scores, TranscriptEntry

logger = logging.getLogger(__name__)

console = Console(legacy_windows=False)

_ROUND_LABELS = {1: "Ronda 1", 2: "Ronda 2 (réplica)", 3: "Fusión"}


def _slug(text: str, max_len: int = 40) -> str:
    """Convert text to a filename-safe slug."""
    slug = re.sub(r"[^\w\s-]", "", text.lower())
    slug = re.sub(r"[\s_-]+", "-", slug).strip("-")
    return slug[:max_len]


def _preview(text: str, words: int = 50) -> str:
    """Return first N words of a text."""
    all_words = text.split()
    preview = " ".join(all_words[:words])
    if len(all_words) > words:
        preview += "..."
    return preview


def _brief_lines(brief: Brief) -> list[str]:
    lines = [
        f"**Objetivo:** {brief.objetivo}",
        f"**Restricciones:** {'; '.join(brief.restricciones or []) or 'ninguna'}",
        f"**Criterio de éxito:** {brief.criterio_exito}",
        f"**Prioridad:** {brief.prioridad} | **Plazo:** {brief.plazo} | **Modo:** {brief.modo}",
    ]
    if brief.supuestos:
        lines.append(f"**Supuestos:** {'; '.join(brief.supuestos)}")
    return lines


def scores_table(scores: Scores) -> Table:
    table = Table(title="Puntajes", show_header=True, header_style="bold")
    table.add_column("Criterio")
    table.add_column("Valor", justify="right")
    for label, value in (
        ("viabilidad", scores.viabilidad),
        ("roi", scores.roi),
        ("ttv", scores.ttv),
        ("riesgo", scores.riesgo),
        ("total", scores.total),
    ):
        table.add_row(label, f"{value:.2f}")
    table.caption = scores.rationale
    return table


def print_intake(result: IntakeResult) -> None:
    console.print(Rule(f"[bold cyan]Intake[/bold cyan] → {result.next_phase_hint}"))
    if result.reply:
        console.print(Markdown(result.reply))
    if result.brief is not None:
        console.print(Panel(Markdown("\n\n".join(_brief_lines(result.brief))), title="Resumen", border_style="dim"))


def print_transcript(transcript: list[TranscriptEntry]) -> None:
    """Print a brief preview of every transcript entry."""
    for entry in transcript:
        console.print(
            Panel(
                _preview(entry.content),
                title=f"[bold]{entry.agent}[/bold]",
                subtitle=_ROUND_LABELS.get(entry.round, f"Ronda {entry.round}"),
                border_style="dim",
            )
        )


def print_debate(result: DebateResult) -> None:
    """Print transcript previews, scores and the final recommendation."""
    console.print(Rule("[bold cyan]Transcript[/bold cyan]"))
    print_transcript(result.transcript)
    console.print(scores_table(result.scores))
    console.print(Rule("[bold green]Recomendación[/bold green]"))
    console.print(
        Text(
            f"Agentes: {', '.join(result.agents_called)} | "
            f"Ronda 2: {'sí' if result.round2_ran else 'no'} | "
            f"Guard: {'OK' if result.guard_accepted else 'sin aprobar'} | "
            f"Duración: {result.total_duration_sec:.1f}s",
            style="dim",
        )
    )
    console.print(Markdown(result.reply))


def save_to_file(result: DebateResult, output_dir: Path) -> Path:
    """Save the debate transcript and recommendation as a markdown file.

    Args:
        result: The completed DebateResult.
        output_dir: Directory to save the file in.

    Returns:
        Path to the saved file.
    """
    output_dir.mkdir(parents=True, exist_ok=True)

    objective = (result.brief.objetivo if result.brief else None) or "debate"
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    filepath = output_dir / f"{timestamp}_{_slug(objective)}.md"

    lines: list[str] = [
        f"# Brief Council: {objective[:80]}",
        "",
        f"**Date:** {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
        f"**Agents:** {', '.join(result.agents_called)}",
        f"**Round 2:** {'yes' if result.round2_ran else 'no'}",
        f"**Guard:** {'approved' if result.guard_accepted else 'not approved'}",
        f"**Duration:** {result.total_duration_sec:.1f}s",
        "",
    ]
    if result.brief is not None:
        lines += ["## Brief", ""] + _brief_lines(result.brief) + [""]
    lines += ["---", ""]

    current_round: int | None = None
    for entry in result.transcript:
        if entry.round != current_round:
            current_round = entry.round
            lines += [f"## {_ROUND_LABELS.get(entry.round, f'Ronda {entry.round}')}", ""]
        lines += [f"### {entry.agent}", "", entry.content, ""]

    scores = result.scores
    lines += [
        "## Scores",
        "",
        "| viabilidad | roi | ttv | riesgo | total |",
        "|---|---|---|---|---|",
        f"| {scores.viabilidad:.2f} | {scores.roi:.2f} | {scores.ttv:.2f} | {scores.riesgo:.2f} | {scores.total:.2f} |",
        "",
        f"*{scores.rationale}*",
        "",
        "## Recommendation",
        "",
        result.reply,
        "",
    ]

    filepath.write_text("\n".join(lines), encoding="utf-8")
    logger.info("Debate saved to: %s", filepath)
    return filepath
