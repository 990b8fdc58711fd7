"""
Page-oriented text extraction with OCR fallback.

Reads the embedded text layer page by page and only commits to OCR, which is
slow, when the whole text layer is clearly insufficient. Progress is reported
after every page so callers can show liveness, and an optional event lets
them cancel between pages.
"""

import asyncio
from typing import Any, Callable, Optional

import fitz  # PyMuPDF

from ..config import Settings
from ..data_models import ExtractionProgress, PageExtractionResult
from ..errors import ExtractionCancelled, ExtractionFailed, OcrFailed
from ..ingestion.cleaner import clean_text
from ..logger import get_logger
from .ocr import OcrEngine, TesseractOcrEngine
from .pdf_extractor import validate_pdf_bytes


logger = get_logger(__name__)

ProgressCallback = Callable[[ExtractionProgress], None]


class PageTextExtractor:
    """
    Extract text from a loaded PDF document, falling back to OCR.

    ``document`` is a PyMuPDF document, or any object supporting ``len()``
    and indexing whose pages offer ``get_text("words")`` and
    ``get_pixmap(matrix=...)``.

    Usage:
        ```python
        extractor = PageTextExtractor()
        with fitz.open("scan.pdf") as doc:
            result = await extractor.extract(doc, on_progress=print)
        ```
    """

    def __init__(
        self,
        ocr_trigger_chars: int = 120,
        ocr_scale: float = 2.0,
        ocr_engine_factory: Optional[Callable[[], OcrEngine]] = None,
        ocr_language: str = "eng",
    ):
        self.ocr_trigger_chars = ocr_trigger_chars
        self.ocr_scale = ocr_scale
        self.ocr_engine_factory = ocr_engine_factory or (
            lambda: TesseractOcrEngine(language=ocr_language)
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "PageTextExtractor":
        return cls(
            ocr_trigger_chars=settings.ocr_trigger_chars,
            ocr_scale=settings.ocr_scale,
            ocr_language=settings.ocr_language,
        )

    async def extract_bytes(
        self,
        data: bytes,
        on_progress: Optional[ProgressCallback] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> PageExtractionResult:
        """Open raw PDF bytes with PyMuPDF and run :meth:`extract` on them."""
        validate_pdf_bytes(data)
        try:
            doc = fitz.open(stream=data, filetype="pdf")
        except Exception as e:
            raise ExtractionFailed(f"PDF parsing failed: {e}") from e

        with doc:
            if doc.needs_pass:
                raise ExtractionFailed(
                    "PDF is password-protected. Remove password protection and try again."
                )
            return await self.extract(doc, on_progress=on_progress, cancel_event=cancel_event)

    async def extract(
        self,
        document: Any,
        on_progress: Optional[ProgressCallback] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> PageExtractionResult:
        """
        Extract the text layer, then OCR every page if it is too thin.

        Raises:
            OcrFailed: If OCR ran and recognized nothing, or a page failed to recognize
            ExtractionCancelled: If ``cancel_event`` was set between pages
        """
        total_pages = len(document)
        combined = []

        for page_number in range(1, total_pages + 1):
            self._check_cancelled(cancel_event)
            page = document[page_number - 1]
            words = await asyncio.to_thread(page.get_text, "words")
            combined.append(" ".join(word[4] for word in words) + "\n")
            self._report(on_progress, page_number, total_pages, "text")

        text = clean_text("".join(combined))
        if len(text) > self.ocr_trigger_chars:
            return PageExtractionResult(text=text, used_ocr=False, total_pages=total_pages)

        logger.info(
            f"Text layer yielded {len(text)} characters over {total_pages} pages, running OCR"
        )
        return await self._extract_with_ocr(document, total_pages, on_progress, cancel_event)

    async def _extract_with_ocr(
        self,
        document: Any,
        total_pages: int,
        on_progress: Optional[ProgressCallback],
        cancel_event: Optional[asyncio.Event],
    ) -> PageExtractionResult:
        recognized = []

        with self.ocr_engine_factory() as engine:
            for page_number in range(1, total_pages + 1):
                self._check_cancelled(cancel_event)
                page = document[page_number - 1]
                image_png = await asyncio.to_thread(self._render_page, page)
                try:
                    page_text = await engine.recognize(image_png)
                except Exception as e:
                    logger.error(f"OCR failed on page {page_number}: {e}")
                    raise OcrFailed(f"OCR failed on page {page_number}: {e}") from e
                recognized.append(f"{page_text}\n")
                self._report(on_progress, page_number, total_pages, "ocr")

        text = clean_text("".join(recognized))
        if not text:
            raise OcrFailed("OCR produced no readable text.")

        logger.info(f"OCR recognized {len(text)} characters")
        return PageExtractionResult(text=text, used_ocr=True, total_pages=total_pages)

    def _render_page(self, page: Any) -> bytes:
        """Rasterize a page at the configured upscaling factor, PNG-encoded."""
        pixmap = page.get_pixmap(matrix=fitz.Matrix(self.ocr_scale, self.ocr_scale))
        return pixmap.tobytes("png")

    @staticmethod
    def _check_cancelled(cancel_event: Optional[asyncio.Event]) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise ExtractionCancelled("PDF extraction was cancelled")

    @staticmethod
    def _report(
        on_progress: Optional[ProgressCallback],
        page: int,
        total_pages: int,
        mode: str,
    ) -> None:
        if on_progress is None:
            return
        try:
            on_progress(ExtractionProgress(page=page, total_pages=total_pages, mode=mode))
        except Exception as e:
            logger.warning(f"Progress callback failed on page {page}/{total_pages}: {e}")
