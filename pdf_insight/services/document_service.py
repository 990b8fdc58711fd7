"""
Document service: the single processing pipeline for uploaded PDFs.

Orchestrates the full workflow:
1. Validate and extract text (client-supplied text, PyMuPDF, byte heuristics, OCR)
2. Analyze structure and content
3. Chunk into overlapping word windows
4. Optionally restructure the text through the LLM gateway
5. Answer questions against the stored text

Example usage:
    >>> service = DocumentService.from_settings(settings)
    >>> document = await service.process_bytes(pdf_bytes)
    >>> result = await service.ask("What is the total?", document.text)
"""

import time
from typing import Optional, Tuple

from ..config import Settings
from ..data_models import (
    AnswerResult,
    ContentAnalysis,
    DocumentMetadata,
    ExtractionMethod,
    ExtractionResult,
    ProcessedDocument,
)
from ..document_processing.page_extractor import PageTextExtractor, ProgressCallback
from ..document_processing.pdf_extractor import (
    EXTRACTION_FAILED_MESSAGE,
    ServerExtractor,
    decode_data_uri,
    validate_pdf_bytes,
)
from ..errors import ExtractionFailed, GatewayError, GatewayUnavailable, InvalidRequest
from ..ingestion.chunker import WordWindowChunker
from ..ingestion.cleaner import clean_text
from ..ingestion.structure import StructuralAnalyzer
from ..logger import logger
from .gateway import LLMGateway


class DocumentService:
    """
    Processes uploads and answers questions about them.

    Each call works on its own buffer; the service keeps no per-document state.
    """

    def __init__(
        self,
        extractor: Optional[ServerExtractor] = None,
        page_extractor: Optional[PageTextExtractor] = None,
        gateway: Optional[LLMGateway] = None,
        analyzer: Optional[StructuralAnalyzer] = None,
        chunker: Optional[WordWindowChunker] = None,
        min_text_chars: int = 10,
        enable_ocr_fallback: bool = False,
        enable_restructuring: bool = True,
    ):
        self.analyzer = analyzer or StructuralAnalyzer()
        self.extractor = extractor or ServerExtractor(
            min_text_chars=min_text_chars, analyzer=self.analyzer
        )
        self.page_extractor = page_extractor or PageTextExtractor()
        self.gateway = gateway
        self.chunker = chunker or WordWindowChunker()
        self.min_text_chars = min_text_chars
        self.enable_ocr_fallback = enable_ocr_fallback
        self.enable_restructuring = enable_restructuring

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        gateway: Optional[LLMGateway] = None,
    ) -> "DocumentService":
        return cls(
            extractor=ServerExtractor.from_settings(settings),
            page_extractor=PageTextExtractor.from_settings(settings),
            gateway=gateway or LLMGateway.from_settings(settings),
            chunker=WordWindowChunker(
                chunk_size=settings.chunk_size,
                chunk_overlap=settings.chunk_overlap,
                min_chunk_chars=settings.min_chunk_chars,
            ),
            min_text_chars=settings.min_text_chars,
            enable_ocr_fallback=settings.enable_ocr_fallback,
            enable_restructuring=settings.enable_restructuring,
        )

    async def process_data_uri(
        self,
        data_uri: str,
        client_text: Optional[str] = None,
    ) -> ProcessedDocument:
        return await self.process_bytes(decode_data_uri(data_uri), client_text=client_text)

    async def process_bytes(
        self,
        data: bytes,
        client_text: Optional[str] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> ProcessedDocument:
        """
        Run the full pipeline on one uploaded PDF.

        Args:
            data: Raw PDF bytes
            client_text: Text already extracted by the caller (e.g. browser OCR);
                used instead of server extraction when it is long enough
            on_progress: Page progress callback, used only if OCR fallback runs

        Raises:
            InvalidFormat, EmptyFile: If the bytes are not a PDF
            ExtractionFailed, OcrFailed: If no usable text could be extracted
        """
        start_time = time.time()

        extraction = await self._extract(data, client_text, on_progress)
        analysis = self.analyzer.analyze_content(
            extraction.raw_text or extraction.text, extraction.structure
        )
        chunks = self.chunker.chunk(extraction.text)
        logger.info(
            f"Document analysis: type={analysis.document_type.value}, "
            f"readability={analysis.readability_score:.0f}, chunks={len(chunks)}"
        )

        text, restructured = await self._restructure(extraction, analysis)
        final_text = clean_text(text)
        if len(final_text) < self.min_text_chars:
            raise ExtractionFailed(EXTRACTION_FAILED_MESSAGE.format(chars=len(final_text)))

        processing_time_ms = (time.time() - start_time) * 1000
        logger.info(f"Processed PDF into {len(final_text)} characters in {processing_time_ms:.0f}ms")

        return ProcessedDocument(
            text=final_text,
            metadata=extraction.metadata,
            structure=extraction.structure,
            analysis=analysis,
            chunks=chunks,
            method=extraction.method,
            used_ocr=extraction.used_ocr,
            restructured=restructured,
            processing_time_ms=processing_time_ms,
        )

    async def _extract(
        self,
        data: bytes,
        client_text: Optional[str],
        on_progress: Optional[ProgressCallback],
    ) -> ExtractionResult:
        supplied = clean_text(client_text or "")
        if len(supplied) >= self.min_text_chars:
            validate_pdf_bytes(data)
            logger.info(f"Using {len(supplied)} characters of client-extracted text")
            return ExtractionResult(
                text=supplied,
                raw_text=client_text,
                structure=self.analyzer.analyze_structure(client_text),
                method=ExtractionMethod.CLIENT_SUPPLIED,
            )

        try:
            return await self.extractor.extract(data)
        except ExtractionFailed as e:
            if not self.enable_ocr_fallback:
                raise
            logger.warning(f"Server extraction failed ({e.message}); trying text layer and OCR")

        page_result = await self.page_extractor.extract_bytes(data, on_progress=on_progress)
        return ExtractionResult(
            text=page_result.text,
            raw_text=page_result.text,
            metadata=DocumentMetadata(pages=page_result.total_pages),
            structure=self.analyzer.analyze_structure(page_result.text),
            method=ExtractionMethod.OCR if page_result.used_ocr else ExtractionMethod.TEXT_LAYER,
            used_ocr=page_result.used_ocr,
        )

    async def _restructure(
        self,
        extraction: ExtractionResult,
        analysis: ContentAnalysis,
    ) -> Tuple[str, bool]:
        """Restructured text when the gateway succeeds, else the extracted text."""
        if not self.enable_restructuring or self.gateway is None or not self.gateway.available:
            return extraction.text, False

        try:
            restructured = await self.gateway.restructure(
                extraction.text, extraction.metadata, extraction.structure, analysis
            )
        except (GatewayError, GatewayUnavailable) as e:
            logger.warning(f"AI restructuring failed, using extracted text: {e.message}")
            return extraction.text, False

        cleaned = clean_text(restructured)
        if len(cleaned) < self.min_text_chars:
            logger.warning("AI restructuring returned too little text, using extracted text")
            return extraction.text, False
        return cleaned, True

    async def ask(
        self,
        question: str,
        document_text: str,
        summarize_first: bool = False,
    ) -> AnswerResult:
        """
        Answer a question about previously processed document text.

        Raises:
            InvalidRequest: If the question or document text is blank
            GatewayUnavailable, GatewayError: If no provider could answer
        """
        if not question or not question.strip():
            raise InvalidRequest("Question must not be empty.")
        context = clean_text(document_text)
        if not context:
            raise InvalidRequest("No document content available. Upload a PDF first.")
        if self.gateway is None:
            raise GatewayUnavailable("No LLM gateway configured.")

        logger.info(f"Processing question against {len(context)} characters of document text")
        if summarize_first:
            summary = clean_text(await self.gateway.summarize(context))
            context = summary or context

        return await self.gateway.answer_question(question, context)
