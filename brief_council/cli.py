"""Click CLI: the caller that keeps brief and context between council turns."""

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler

from brief_council.models import HINT_READY, DebateResult, IntakeResult
from brief_council.output import print_debate, print_intake, save_to_file
from brief_council.providers.base import ProviderError
from brief_council.service import (
    PHASE_DEBATE,
    PHASE_INTAKE,
    PHASES,
    CouncilRequest,
    CouncilService,
    MissingCredentialError,
    RequestError,
    parse_request,
)
from config.config_loader import load_config

logger = logging.getLogger(__name__)

console = Console(legacy_windows=False)


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def _read_json_file(path: str | None, what: str) -> dict[str, Any] | None:
    if not path:
        return None
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise RequestError(f"{what} file is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise RequestError(f"{what} file must contain a JSON object")
    return data


def _build_payload(
    message: str | None,
    phase: str,
    brief_file: str | None,
    context_file: str | None,
    lite: bool,
) -> dict[str, Any]:
    """Assemble a request body from CLI arguments. --lite sets context["lite"]."""
    context = _read_json_file(context_file, "context") or {}
    if lite:
        context = {**context, "lite": True}
    payload: dict[str, Any] = {"message": message or "", "context": context, "phase": phase}
    brief = _read_json_file(brief_file, "brief")
    if brief is not None:
        payload["brief"] = brief
    return payload


async def _run_turn(service: CouncilService, request: CouncilRequest) -> IntakeResult | DebateResult:
    if request.phase == PHASE_INTAKE:
        return await service.intake.run_turn(request.message, request.context)
    return await service.run_debate_phase(request)


def _render(result: IntakeResult | DebateResult, as_json: bool, save: bool, output_dir: Path) -> None:
    if as_json:
        console.print_json(data=result.to_dict())
    elif isinstance(result, IntakeResult):
        print_intake(result)
    else:
        print_debate(result)

    if save and isinstance(result, DebateResult):
        saved_path = save_to_file(result, output_dir)
        console.print(f"\n[dim]Saved to: {saved_path}[/dim]")


async def _run_interactive(service: CouncilService, context: dict[str, Any], save: bool, output_dir: Path) -> None:
    """Intake turns until the brief is ready, then one debate turn."""
    while True:
        message = (await asyncio.to_thread(click.prompt, "Tú", prompt_suffix=" > ")).strip()
        if not message:
            continue
        result = await service.intake.run_turn(message, context)
        print_intake(result)
        context = result.context_echo

        if result.next_phase_hint != HINT_READY or result.brief is None:
            continue
        if not await asyncio.to_thread(click.confirm, "¿Iniciar debate con este Resumen?", default=True):
            continue

        request = CouncilRequest(
            message=message,
            context=context,
            phase=PHASE_DEBATE,
            brief=result.brief.to_dict(),
        )
        debate_result = await service.run_debate_phase(request)
        _render(debate_result, as_json=False, save=save, output_dir=output_dir)
        return


@click.command()
@click.argument("message", required=False)
@click.option("--phase", type=click.Choice(PHASES), default=PHASE_INTAKE, show_default=True,
              help="Which phase this turn runs")
@click.option("--brief-file", type=click.Path(exists=True), help="JSON brief echoed back from a previous intake turn")
@click.option("--context-file", type=click.Path(exists=True), help="JSON context echoed back from a previous turn")
@click.option("--lite", is_flag=True, help="Lite plan: a single specialist, no second round")
@click.option("--json", "as_json", is_flag=True, help="Print the raw response body as JSON")
@click.option("--interactive", is_flag=True, help="Chat through intake, then run the debate")
@click.option("--save", is_flag=True, help="Save debate transcripts as markdown")
@click.option("--output", "output_path", default=None, help="Output directory (default: from config)")
@click.option("--verbose", is_flag=True, help="Enable DEBUG-level logging")
def main(
    message: str | None,
    phase: str,
    brief_file: str | None,
    context_file: str | None,
    lite: bool,
    as_json: bool,
    interactive: bool,
    save: bool,
    output_path: str | None,
    verbose: bool,
) -> None:
    """Brief Council -- turn a request into a brief, then a checked recommendation.

    \b
    Examples:
      brief-council "quiero vender GPS, presupuesto 500" --lite
      brief-council "seguimos" --context-file ctx.json
      brief-council "debate" --phase debate --brief-file brief.json --save
      brief-council --interactive
    """
    if sys.platform == "win32":
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding="utf-8", errors="replace")
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding="utf-8", errors="replace")

    load_dotenv()
    _setup_logging(verbose)

    try:
        config = load_config()
    except (FileNotFoundError, ValueError) as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        sys.exit(1)

    output_dir = Path(output_path) if output_path else config.defaults.output_dir

    try:
        service = CouncilService(config)
    except MissingCredentialError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        sys.exit(1)

    try:
        if interactive:
            context = _build_payload(None, PHASE_INTAKE, None, context_file, lite)["context"]
            asyncio.run(_run_interactive(service, context, save, output_dir))
            return

        request = parse_request(_build_payload(message, phase, brief_file, context_file, lite))
        result = asyncio.run(_run_turn(service, request))
    except RequestError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        sys.exit(1)
    except ProviderError as exc:
        console.print(f"[bold red]Model error:[/bold red] {exc}")
        sys.exit(1)

    _render(result, as_json, save, output_dir)


if __name__ == "__main__":
    main()
