"""Transport-agnostic request/response contract for the council.

A transport (HTTP handler, CLI, test) hands CouncilService.handle() the
decoded request body and sends back ServiceResponse.status / .body.
"""

import logging
from dataclasses import dataclass
from typing import Any

from brief_council.debate import DebateOrchestrator
from brief_council.intake import IntakeController
from brief_council.invoker import ModelInvoker, PersonaCaller, RetryPolicy
from brief_council.models import Brief
from brief_council.normalizer import normalize
from brief_council.providers.anthropic import AnthropicClient
from brief_council.providers.base import ModelClient, ProviderError
from brief_council.providers.gemini import GeminiClient
from brief_council.providers.openai_provider import OpenAICompatibleClient
from brief_council.signals import extract_signals
from config.config_loader import AppConfig

logger = logging.getLogger(__name__)

PHASE_INTAKE = "intake"
PHASE_DEBATE = "debate"
PHASES = (PHASE_INTAKE, PHASE_DEBATE)

STATUS_OK = 200
STATUS_BAD_REQUEST = 400
STATUS_SERVER_ERROR = 500
STATUS_MISCONFIGURED = 500

CLIENT_CLASSES: dict[str, type[ModelClient]] = {
    "openai": OpenAICompatibleClient,
    "anthropic": AnthropicClient,
    "gemini": GeminiClient,
}


class RequestError(ValueError):
    """Malformed request; rejected before any model call."""


class MissingCredentialError(RuntimeError):
    """An endpoint used by a role has no API key configured."""


@dataclass
class CouncilRequest:
    message: str
    context: dict[str, Any]
    phase: str = PHASE_INTAKE
    brief: dict[str, Any] | None = None


@dataclass
class ServiceResponse:
    status: int
    body: dict[str, Any]


def parse_request(payload: Any) -> CouncilRequest:
    """Validate a decoded request body.

    Raises:
        RequestError: On a missing/blank message or wrongly typed fields.
    """
    if not isinstance(payload, dict):
        raise RequestError("request body must be a JSON object")

    message = payload.get("message")
    if not isinstance(message, str) or not message.strip():
        raise RequestError("message requerido (string)")

    context = payload.get("context")
    if context is None:
        context = {}
    elif not isinstance(context, dict):
        raise RequestError("context must be an object")

    phase = payload.get("phase") or PHASE_INTAKE
    if phase not in PHASES:
        raise RequestError(f"phase must be one of: {', '.join(PHASES)}")

    brief = payload.get("brief")
    if brief is not None and not isinstance(brief, dict):
        raise RequestError("brief must be an object")

    return CouncilRequest(message=message, context=context, phase=phase, brief=brief)


def build_clients(config: AppConfig) -> dict[str, ModelClient]:
    """Instantiate one client per endpoint used by a role.

    Raises:
        MissingCredentialError: If a used endpoint has no API key.
    """
    missing = config.missing_endpoints()
    if missing:
        envs = sorted(config.endpoints[name].api_key_env for name in missing)
        raise MissingCredentialError(f"Falta {', '.join(envs)} en el entorno")

    clients: dict[str, ModelClient] = {}
    for name in sorted({r.endpoint for r in config.roles.values()}):
        endpoint = config.endpoints[name]
        try:
            clients[name] = CLIENT_CLASSES[endpoint.sdk](endpoint)
        except ProviderError as exc:
            raise MissingCredentialError(str(exc)) from exc
    return clients


class CouncilService:
    """Wires config, clients, and the two phase controllers."""

    def __init__(self, config: AppConfig, clients: dict[str, ModelClient] | None = None) -> None:
        self.config = config
        clients = clients if clients is not None else build_clients(config)
        policy = RetryPolicy.from_config(config.retry)
        invokers = {name: ModelInvoker(client, policy) for name, client in clients.items()}
        self.caller = PersonaCaller(invokers, config.roles)
        self.intake = IntakeController(self.caller, config.limits)
        self.debate = DebateOrchestrator(self.caller, config.limits)

    async def run_debate_phase(self, request: CouncilRequest):
        """Normalize the caller's brief (or one built from the message) and debate it."""
        signals = extract_signals(request.message)
        partial = Brief.from_dict(request.brief) if request.brief else Brief(objetivo=request.message.strip())
        result = normalize(partial, signals, request.context)
        if result.needs_clarification:
            logger.warning("Debating a brief that still carries a no-profit contradiction")
        return await self.debate.run(result.brief, request.context)

    async def handle(self, payload: Any) -> ServiceResponse:
        try:
            request = parse_request(payload)
        except RequestError as exc:
            logger.info("Rejected request: %s", exc)
            return ServiceResponse(STATUS_BAD_REQUEST, {"error": str(exc)})

        try:
            if request.phase == PHASE_INTAKE:
                result = await self.intake.run_turn(request.message, request.context)
            else:
                result = await self.run_debate_phase(request)
        except ProviderError as exc:
            logger.error("Phase %s failed: %s", request.phase, exc)
            return ServiceResponse(STATUS_SERVER_ERROR, {"error": str(exc)})
        except Exception as exc:
            logger.exception("Unexpected failure in phase %s", request.phase)
            return ServiceResponse(STATUS_SERVER_ERROR, {"error": str(exc) or "Error interno del servidor"})

        return ServiceResponse(STATUS_OK, result.to_dict())


async def handle_request(payload: Any, config: AppConfig) -> ServiceResponse:
    """One-shot entry point for a transport: builds the service per request."""
    try:
        service = CouncilService(config)
    except MissingCredentialError as exc:
        logger.error("Misconfigured: %s", exc)
        return ServiceResponse(STATUS_MISCONFIGURED, {"error": str(exc)})
    return await service.handle(payload)
