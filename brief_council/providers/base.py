"""Abstract base for all model capability clients."""

from abc import ABC, abstractmethod


class ProviderError(Exception):
    """Raised when a model call fails.

    rate_limited marks 429-style failures; raw keeps the error body so the
    retry layer can read a "try again in N s" hint.
    """

    def __init__(
        self,
        provider_name: str,
        message: str,
        *,
        rate_limited: bool = False,
        raw: str = "",
    ) -> None:
        self.provider_name = provider_name
        self.rate_limited = rate_limited
        self.raw = raw or message
        super().__init__(f"[{provider_name}] {message}")


class ModelClient(ABC):
    """One model endpoint: persona + prompt + output budget in, text out."""

    @abstractmethod
    def name(self) -> str:
        """Return the endpoint name from settings (e.g. 'groq')."""
        ...

    @abstractmethod
    async def complete(self, model: str, system: str, user: str, max_tokens: int) -> str:
        """Generate text for a single system/user exchange.

        Args:
            model: Model identifier on this endpoint.
            system: The persona / system instruction.
            user: The user-facing prompt.
            max_tokens: Maximum output size.

        Returns:
            Generated text, never empty.

        Raises:
            ProviderError: On API failure, rate limit, timeout, or empty response.
        """
        ...
