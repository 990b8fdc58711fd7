"""
LLM providers behind the gateway.

Every supported service speaks the OpenAI-compatible chat-completion
protocol, so a provider is a ``ProviderConfig`` plus the shared client.
"""
from .base import LLMProvider, LLMResponse, ProviderConfig
from .chat_completion import ChatCompletionProvider

__all__ = [
    "LLMProvider",
    "LLMResponse",
    "ProviderConfig",
    "ChatCompletionProvider",
]
