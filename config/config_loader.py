"""Load settings.yaml into typed dataclasses. Checks API keys at startup."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

_SETTINGS_PATH = Path(__file__).parent / "settings.yaml"

SUPPORTED_SDKS = frozenset({"openai", "anthropic", "gemini"})


@dataclass
class EndpointConfig:
    name: str
    sdk: str               # "openai" (OpenAI-compatible), "anthropic", "gemini"
    api_key_env: str
    timeout_sec: int
    base_url: str | None = None
    temperature: float = 0.3
    top_p: float = 0.9


@dataclass
class RoleConfig:
    role: str              # "facilitator", "coach", "tech", "biz", "data", "guard"
    endpoint: str
    model: str
    fallback_model: str | None = None


@dataclass
class RetryConfig:
    attempts_per_model: int = 3
    base_delay_sec: float = 0.4
    linear_delay_sec: float = 0.25
    max_jitter_sec: float = 0.2


@dataclass
class LimitsConfig:
    facilitator_tokens: int = 450
    coach_tokens: int = 650
    round1_tokens: int = 550
    round2_tokens: int = 420
    fusion_tokens: int = 650
    guard_tokens: int = 200
    patch_tokens: int = 480
    guard_recheck_tokens: int = 180
    transcript_cap: int = 2000
    digest_cap: int = 500
    fusion_cap: int = 1100
    intake_question_limit: int = 2
    sequential_dispatch: bool = False


@dataclass
class DefaultsConfig:
    output_dir: Path


@dataclass
class AppConfig:
    defaults: DefaultsConfig
    endpoints: dict[str, EndpointConfig]
    roles: dict[str, RoleConfig]
    retry: RetryConfig = field(default_factory=RetryConfig)
    limits: LimitsConfig = field(default_factory=LimitsConfig)
    available_endpoints: set[str] = field(default_factory=set)

    def missing_endpoints(self) -> set[str]:
        """Endpoints referenced by a role but lacking an API key."""
        used = {r.endpoint for r in self.roles.values()}
        return used - self.available_endpoints


def _load_retry(raw: dict | None) -> RetryConfig:
    raw = raw or {}
    defaults = RetryConfig()
    return RetryConfig(
        attempts_per_model=int(raw.get("attempts_per_model", defaults.attempts_per_model)),
        base_delay_sec=float(raw.get("base_delay_sec", defaults.base_delay_sec)),
        linear_delay_sec=float(raw.get("linear_delay_sec", defaults.linear_delay_sec)),
        max_jitter_sec=float(raw.get("max_jitter_sec", defaults.max_jitter_sec)),
    )


def _load_limits(raw: dict | None) -> LimitsConfig:
    raw = raw or {}
    limits = LimitsConfig()
    for key, value in raw.items():
        if not hasattr(limits, key):
            logger.warning("Unknown limits key ignored: %s", key)
            continue
        current = getattr(limits, key)
        setattr(limits, key, bool(value) if isinstance(current, bool) else int(value))
    return limits


def load_config(settings_path: Path = _SETTINGS_PATH) -> AppConfig:
    """Load and validate configuration from settings.yaml.

    Raises FileNotFoundError if settings file missing, ValueError when a role
    points at an undeclared endpoint or an endpoint names an unknown SDK.
    Logs missing API keys but does not raise; callers check
    available_endpoints / missing_endpoints().
    """
    if not settings_path.exists():
        raise FileNotFoundError(f"Settings file not found: {settings_path}")

    with settings_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    defaults = DefaultsConfig(output_dir=Path(raw["defaults"]["output_dir"]))

    endpoints: dict[str, EndpointConfig] = {}
    available_endpoints: set[str] = set()

    for endpoint_name, endpoint_raw in raw["endpoints"].items():
        sdk = endpoint_raw["sdk"]
        if sdk not in SUPPORTED_SDKS:
            raise ValueError(f"Endpoint '{endpoint_name}' uses unsupported sdk '{sdk}'")
        endpoints[endpoint_name] = EndpointConfig(
            name=endpoint_name,
            sdk=sdk,
            api_key_env=endpoint_raw["api_key_env"],
            timeout_sec=int(endpoint_raw["timeout_sec"]),
            base_url=endpoint_raw.get("base_url"),
            temperature=float(endpoint_raw.get("temperature", 0.3)),
            top_p=float(endpoint_raw.get("top_p", 0.9)),
        )

        api_key = os.environ.get(endpoint_raw["api_key_env"], "").strip()
        if api_key:
            available_endpoints.add(endpoint_name)
            logger.info("Endpoint available: %s", endpoint_name)
        else:
            logger.info(
                "Endpoint skipped (no API key): %s (set %s in .env)",
                endpoint_name,
                endpoint_raw["api_key_env"],
            )

    roles: dict[str, RoleConfig] = {}
    for role_name, role_raw in raw["roles"].items():
        endpoint = role_raw["endpoint"]
        if endpoint not in endpoints:
            raise ValueError(f"Role '{role_name}' references unknown endpoint '{endpoint}'")
        roles[role_name] = RoleConfig(
            role=role_name,
            endpoint=endpoint,
            model=role_raw["model"],
            fallback_model=role_raw.get("fallback_model"),
        )

    return AppConfig(
        defaults=defaults,
        endpoints=endpoints,
        roles=roles,
        retry=_load_retry(raw.get("retry")),
        limits=_load_limits(raw.get("limits")),
        available_endpoints=available_endpoints,
    )
