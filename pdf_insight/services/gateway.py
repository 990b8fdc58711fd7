"""
LLM gateway: provider-agnostic access to hosted chat-completion APIs.

Providers are tried in order. A failing provider is logged and the next one
is tried; when every provider fails the caller gets a typed error, never a
made-up answer.
"""
import re
from typing import List, Optional, Sequence

from ..config import Settings
from ..data_models import AnswerResult, ContentAnalysis, DocumentMetadata, DocumentStructure
from ..errors import GatewayError, GatewayUnavailable, InvalidRequest
from ..ingestion.cleaner import strip_markdown_emphasis
from ..logger import get_logger
from ..providers.base import LLMProvider, LLMResponse, ProviderConfig
from ..providers.chat_completion import ChatCompletionProvider
from .prompts import (
    QA_SYSTEM_PROMPT,
    RESTRUCTURE_SYSTEM_PROMPT,
    build_qa_prompt,
    build_restructure_prompt,
    build_summary_prompt,
)

logger = get_logger(__name__)

PAGE_CITATION = re.compile(r"Page (\d+)")


def provider_configs_from_settings(settings: Settings) -> List[ProviderConfig]:
    """Provider configurations in fallback order, including unconfigured ones."""
    common = {
        "max_tokens": settings.llm_max_tokens,
        "temperature": settings.llm_temperature,
        "timeout": settings.llm_timeout_seconds,
    }
    return [
        ProviderConfig(
            name="perplexity",
            api_key=settings.perplexity_api_key,
            endpoint=settings.perplexity_base_url,
            model=settings.perplexity_model,
            **common,
        ),
        ProviderConfig(
            name="openai",
            api_key=settings.openai_api_key,
            endpoint=settings.openai_base_url,
            model=settings.openai_model,
            **common,
        ),
    ]


def extract_citations(answer: str) -> List[str]:
    """Page numbers referenced as ``Page N``, in order of first appearance."""
    seen: List[str] = []
    for page in PAGE_CITATION.findall(answer):
        if page not in seen:
            seen.append(page)
    return seen


class LLMGateway:
    """
    Ordered fallback over LLM providers.

    Example:
        >>> gateway = LLMGateway.from_settings(settings)
        >>> result = await gateway.answer_question("Who signed?", document_text)
    """

    def __init__(
        self,
        providers: Sequence[LLMProvider],
        qa_context_chars: int = 100_000,
        restructure_context_chars: int = 45_000,
        restructure_max_tokens: int = 2000,
    ):
        self.providers = list(providers)
        self.qa_context_chars = qa_context_chars
        self.restructure_context_chars = restructure_context_chars
        self.restructure_max_tokens = restructure_max_tokens

    @classmethod
    def from_configs(cls, configs: Sequence[ProviderConfig], **kwargs) -> "LLMGateway":
        """Build providers for every config that has credentials; skip the rest."""
        providers = []
        for config in configs:
            if not config.is_configured:
                logger.debug(f"Skipping LLM provider '{config.name}': no API key configured")
                continue
            providers.append(ChatCompletionProvider(config))
        return cls(providers, **kwargs)

    @classmethod
    def from_settings(cls, settings: Settings) -> "LLMGateway":
        return cls.from_configs(
            provider_configs_from_settings(settings),
            qa_context_chars=settings.qa_context_chars,
            restructure_context_chars=settings.restructure_context_chars,
            restructure_max_tokens=settings.restructure_max_tokens,
        )

    @property
    def available(self) -> bool:
        return bool(self.providers)

    @property
    def provider_names(self) -> List[str]:
        return [p.name for p in self.providers]

    async def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        max_tokens: Optional[int] = None,
    ) -> LLMResponse:
        """
        Run the prompt against each provider until one succeeds.

        Raises:
            GatewayUnavailable: If no provider is configured
            GatewayError: If every provider failed
        """
        if not self.providers:
            raise GatewayUnavailable(
                "No LLM provider configured. Set PERPLEXITY_API_KEY or OPENAI_API_KEY."
            )

        failures = []
        for provider in self.providers:
            try:
                response = await provider.generate(
                    prompt, system_prompt=system_prompt, max_tokens=max_tokens
                )
                logger.info(f"LLM call succeeded via {provider.name} in {response.latency_ms:.0f}ms")
                return response
            except GatewayError as e:
                logger.warning(f"LLM provider '{provider.name}' failed: {e.message}")
                failures.append(f"{provider.name}: {e.message}")
            except Exception as e:
                error = GatewayError(f"{type(e).__name__}: {e}", provider=provider.name)
                logger.error(f"LLM provider '{provider.name}' raised unexpectedly: {error.message}")
                failures.append(f"{provider.name}: {error.message}")

        raise GatewayError("All LLM providers failed. " + "; ".join(failures))

    async def answer_question(self, question: str, document_text: str) -> AnswerResult:
        """Answer a question using the document text (truncated to the prompt budget) as context."""
        if not question or not question.strip():
            raise InvalidRequest("Question must not be empty.")
        if not document_text or not document_text.strip():
            raise InvalidRequest("No document content available. Upload a PDF first.")

        prompt = build_qa_prompt(question.strip(), document_text[:self.qa_context_chars])
        response = await self.generate(prompt, system_prompt=QA_SYSTEM_PROMPT)

        answer = strip_markdown_emphasis(response.answer)
        if not answer:
            raise GatewayError(f"{response.provider} returned an empty answer", provider=response.provider)

        return AnswerResult(
            answer=answer,
            citations=extract_citations(answer),
            provider=response.provider,
            model=response.model,
            latency_ms=response.latency_ms,
        )

    async def restructure(
        self,
        text: str,
        metadata: DocumentMetadata,
        structure: DocumentStructure,
        analysis: ContentAnalysis,
    ) -> str:
        """Ask the LLM to reorganize extracted text for question answering."""
        prompt = build_restructure_prompt(
            text[:self.restructure_context_chars], metadata, structure, analysis
        )
        response = await self.generate(
            prompt,
            system_prompt=RESTRUCTURE_SYSTEM_PROMPT,
            max_tokens=self.restructure_max_tokens,
        )
        return response.answer

    async def summarize(self, text: str) -> str:
        """Condense document text so follow-up prompts use fewer tokens."""
        response = await self.generate(build_summary_prompt(text[:self.qa_context_chars]))
        return response.answer
