"""
Abstract base classes defining interfaces for LLM providers.
All concrete implementations must inherit from these.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass
class ProviderConfig:
    """Explicit configuration for one chat-completion endpoint."""
    name: str
    api_key: Optional[str]
    endpoint: str
    model: str
    max_tokens: int = 1000
    temperature: float = 0.1
    timeout: float = 30.0

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.api_key.strip())


@dataclass
class LLMResponse:
    """Response from an LLM provider."""
    answer: str
    model: str = ""
    provider: str = ""
    latency_ms: float = 0.0


class LLMProvider(ABC):
    """Interface for chat-completion text generation (async)."""

    config: ProviderConfig

    @property
    def name(self) -> str:
        return self.config.name

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ) -> LLMResponse:
        """
        Generate a completion.

        Raises:
            GatewayError: On any non-success response, timeout or empty content
        """

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.config.name}', model='{self.config.model}')"
