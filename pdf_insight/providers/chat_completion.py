"""
OpenAI-compatible chat-completion provider.

Perplexity, OpenAI and most hosted LLM services accept the same
``/chat/completions`` request with bearer-token auth, so one implementation
covers them all; only the endpoint, key and model differ.
"""
import asyncio
import time
from typing import Any, Optional

from openai import APIError, APIStatusError, APITimeoutError, AsyncOpenAI

from .base import LLMProvider, LLMResponse, ProviderConfig
from ..errors import GatewayError, GatewayUnavailable


class ChatCompletionProvider(LLMProvider):
    """Chat-completion provider for any OpenAI-compatible endpoint."""

    def __init__(self, config: ProviderConfig, client: Optional[AsyncOpenAI] = None):
        if not config.is_configured:
            raise GatewayUnavailable(
                f"{config.name} API key not found. Set it in the environment or pass api_key."
            )
        self.config = config
        # Retries are left to the gateway, which moves on to the next provider
        self.client = client or AsyncOpenAI(
            api_key=config.api_key,
            base_url=config.endpoint,
            timeout=config.timeout,
            max_retries=0,
        )

    async def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ) -> LLMResponse:
        """Generate text response, bounded by the configured timeout."""
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        start_time = time.time()
        try:
            response = await asyncio.wait_for(
                self.client.chat.completions.create(
                    model=self.config.model,
                    messages=messages,
                    max_tokens=max_tokens or self.config.max_tokens,
                    temperature=self.config.temperature if temperature is None else temperature,
                ),
                timeout=self.config.timeout,
            )
        except (asyncio.TimeoutError, APITimeoutError) as e:
            raise GatewayError(
                f"{self.name} request timed out after {self.config.timeout:.0f}s",
                provider=self.name,
            ) from e
        except APIStatusError as e:
            raise GatewayError(
                f"{self.name} returned HTTP {e.status_code}: {e.message}",
                provider=self.name,
            ) from e
        except APIError as e:
            raise GatewayError(f"Failed to reach {self.name}: {e}", provider=self.name) from e

        content = self._extract_content(response)
        if not content:
            raise GatewayError(f"{self.name} returned an empty response", provider=self.name)

        return LLMResponse(
            answer=content,
            model=self.config.model,
            provider=self.name,
            latency_ms=(time.time() - start_time) * 1000,
        )

    def _extract_content(self, response: Any) -> str:
        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as e:
            raise GatewayError(
                f"{self.name} returned a malformed payload without choices",
                provider=self.name,
            ) from e
        return content.strip() if isinstance(content, str) else ""
