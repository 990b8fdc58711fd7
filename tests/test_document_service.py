"""Tests for the document processing pipeline and question answering service."""

import base64
from unittest.mock import AsyncMock, MagicMock

import pytest

from pdf_insight.config import Settings
from pdf_insight.data_models import ExtractionMethod, PageExtractionResult
from pdf_insight.document_processing.pdf_extractor import ServerExtractor
from pdf_insight.errors import (
    ExtractionFailed,
    GatewayError,
    GatewayUnavailable,
    InvalidFormat,
    InvalidRequest,
)
from pdf_insight.ingestion.chunker import WordWindowChunker
from pdf_insight.providers.base import LLMProvider, LLMResponse, ProviderConfig
from pdf_insight.services.document_service import DocumentService
from pdf_insight.services.gateway import LLMGateway

CONTENT_STREAM_PDF = (
    b"%PDF-1.4\nBT /F1 12 Tf 72 712 Td (Invoice total due: 500 USD) Tj ET\n%%EOF"
)


class ScriptedProvider(LLMProvider):
    def __init__(self, answers=None, error: bool = False):
        self.config = ProviderConfig(name="perplexity", api_key="key", endpoint="http://fake", model="sonar")
        self.answers = list(answers or [])
        self.error = error
        self.prompts = []

    async def generate(self, prompt, system_prompt=None, max_tokens=None, temperature=None):
        self.prompts.append(prompt)
        if self.error:
            raise GatewayError("perplexity returned HTTP 503: unavailable", provider="perplexity")
        return LLMResponse(answer=self.answers.pop(0), model="sonar", provider="perplexity")


def _service(gateway=None, **kwargs) -> DocumentService:
    return DocumentService(
        extractor=ServerExtractor(use_primary_parser=False),
        gateway=gateway,
        **kwargs,
    )


class TestProcessBytes:
    @pytest.mark.asyncio
    async def test_server_extraction_without_gateway(self):
        document = await _service().process_bytes(CONTENT_STREAM_PDF)

        assert document.text == "Invoice total due: 500 USD"
        assert document.method == ExtractionMethod.CONTENT_STREAM
        assert document.restructured is False
        assert document.analysis.document_type.value == "Invoice/Bill"
        assert document.processing_time_ms >= 0

    @pytest.mark.asyncio
    async def test_client_text_preferred(self):
        document = await _service().process_bytes(
            CONTENT_STREAM_PDF, client_text="  SHIPPING MANIFEST\nContainer 42 left port  "
        )
        assert document.method == ExtractionMethod.CLIENT_SUPPLIED
        assert document.text == "SHIPPING MANIFEST Container 42 left port"
        assert document.structure.headings == ["SHIPPING MANIFEST"]

    @pytest.mark.asyncio
    async def test_client_text_still_requires_pdf(self):
        with pytest.raises(InvalidFormat):
            await _service().process_bytes(b"not a pdf", client_text="plenty of client text here")

    @pytest.mark.asyncio
    async def test_short_client_text_ignored(self):
        document = await _service().process_bytes(CONTENT_STREAM_PDF, client_text="  hi  ")
        assert document.method == ExtractionMethod.CONTENT_STREAM

    @pytest.mark.asyncio
    async def test_chunks_cover_text(self):
        client_text = " ".join(f"clause{i}" for i in range(300))
        service = _service(chunker=WordWindowChunker(chunk_size=100, chunk_overlap=20))
        document = await service.process_bytes(CONTENT_STREAM_PDF, client_text=client_text)

        assert document.chunk_count == 4
        assert document.chunks[-1].end_word == 300

    @pytest.mark.asyncio
    async def test_data_uri(self):
        uri = "data:application/pdf;base64," + base64.b64encode(CONTENT_STREAM_PDF).decode()
        document = await _service().process_data_uri(uri)
        assert document.text == "Invoice total due: 500 USD"


class TestRestructuring:
    @pytest.mark.asyncio
    async def test_restructured_text_used(self):
        provider = ScriptedProvider(answers=["INVOICE\n\nTotal due:   500 USD"])
        document = await _service(gateway=LLMGateway([provider])).process_bytes(CONTENT_STREAM_PDF)

        assert document.restructured is True
        assert document.text == "INVOICE Total due: 500 USD"
        assert "Invoice total due: 500 USD" in provider.prompts[0]

    @pytest.mark.asyncio
    async def test_gateway_failure_keeps_extracted_text(self):
        provider = ScriptedProvider(error=True)
        document = await _service(gateway=LLMGateway([provider])).process_bytes(CONTENT_STREAM_PDF)

        assert document.restructured is False
        assert document.text == "Invoice total due: 500 USD"

    @pytest.mark.asyncio
    async def test_too_short_restructuring_ignored(self):
        provider = ScriptedProvider(answers=["ok"])
        document = await _service(gateway=LLMGateway([provider])).process_bytes(CONTENT_STREAM_PDF)

        assert document.restructured is False
        assert document.text == "Invoice total due: 500 USD"

    @pytest.mark.asyncio
    async def test_restructuring_disabled(self):
        provider = ScriptedProvider(answers=["never used"])
        service = _service(gateway=LLMGateway([provider]), enable_restructuring=False)
        document = await service.process_bytes(CONTENT_STREAM_PDF)

        assert document.restructured is False
        assert provider.prompts == []


class TestOcrFallback:
    def _failing_extractor(self):
        extractor = MagicMock()
        extractor.extract = AsyncMock(side_effect=ExtractionFailed("only 0 characters"))
        return extractor

    @pytest.mark.asyncio
    async def test_page_extractor_used_when_enabled(self):
        page_extractor = MagicMock()
        page_extractor.extract_bytes = AsyncMock(return_value=PageExtractionResult(
            text="Recognized text from a scanned page", used_ocr=True, total_pages=2,
        ))
        service = DocumentService(
            extractor=self._failing_extractor(),
            page_extractor=page_extractor,
            enable_ocr_fallback=True,
        )
        document = await service.process_bytes(b"%PDF-1.4 scanned")

        assert document.method == ExtractionMethod.OCR
        assert document.used_ocr is True
        assert document.metadata.pages == 2
        page_extractor.extract_bytes.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failure_propagates_when_disabled(self):
        page_extractor = MagicMock()
        page_extractor.extract_bytes = AsyncMock()
        service = DocumentService(
            extractor=self._failing_extractor(),
            page_extractor=page_extractor,
            enable_ocr_fallback=False,
        )

        with pytest.raises(ExtractionFailed):
            await service.process_bytes(b"%PDF-1.4 scanned")
        page_extractor.extract_bytes.assert_not_awaited()


class TestAsk:
    @pytest.mark.asyncio
    async def test_answer(self):
        provider = ScriptedProvider(answers=["The total is 500 USD (Page 1)."])
        result = await _service(gateway=LLMGateway([provider])).ask(
            "What is the total?", "Invoice total due: 500 USD"
        )

        assert result.answer == "The total is 500 USD (Page 1)."
        assert result.citations == ["1"]

    @pytest.mark.asyncio
    async def test_summarize_first(self):
        provider = ScriptedProvider(answers=["Summary: invoice for 500 USD", "500 USD"])
        result = await _service(gateway=LLMGateway([provider])).ask(
            "Total?", "Invoice total due: 500 USD", summarize_first=True
        )

        assert result.answer == "500 USD"
        assert len(provider.prompts) == 2
        assert "Summary: invoice for 500 USD" in provider.prompts[1]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("question, text", [("", "doc text"), ("Total?", ""), ("Total?", "\x00 \n")])
    async def test_blank_input(self, question, text):
        with pytest.raises(InvalidRequest):
            await _service(gateway=LLMGateway([])).ask(question, text)

    @pytest.mark.asyncio
    async def test_no_gateway(self):
        with pytest.raises(GatewayUnavailable):
            await _service().ask("Total?", "Invoice total due")

    @pytest.mark.asyncio
    async def test_no_configured_provider(self):
        with pytest.raises(GatewayUnavailable):
            await _service(gateway=LLMGateway([])).ask("Total?", "Invoice total due")


def test_from_settings():
    config = Settings(CHUNK_SIZE=64, CHUNK_OVERLAP=16, ENABLE_OCR_FALLBACK=True)
    service = DocumentService.from_settings(config, gateway=LLMGateway([]))

    assert service.chunker.chunk_size == 64
    assert service.chunker.chunk_overlap == 16
    assert service.enable_ocr_fallback is True
    assert service.gateway.available is False
