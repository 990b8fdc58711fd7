"""
Server-side PDF text extraction.

Works on raw bytes (or a ``data:application/pdf;base64,`` URI) using:
1. PyMuPDF (primary - page-aware text plus document metadata)
2. Byte-pattern heuristics (fallback ladder, see ``heuristics``)

The ladder only runs when the primary parser is disabled or returns too
little text; a parser exception is reported as a failure straight away.
"""

import asyncio
import base64
import binascii
from typing import Optional, Tuple

import fitz  # PyMuPDF

from ..config import Settings
from ..data_models import DocumentMetadata, ExtractionMethod, ExtractionResult
from ..errors import EmptyFile, ExtractionFailed, InvalidFormat
from ..ingestion.cleaner import clean_text
from ..ingestion.structure import StructuralAnalyzer
from ..logger import logger
from .heuristics import FALLBACK_LADDER


PDF_SIGNATURE = b"%PDF"

EXTRACTION_FAILED_MESSAGE = (
    "PDF text extraction failed: {chars} characters extracted, which is not enough to "
    "process. The PDF may be image-based (requiring OCR), password-protected, or contain "
    "corrupted or compressed text streams. Try a text-based PDF or enable OCR."
)


def decode_data_uri(data_uri: str) -> bytes:
    """
    Decode a ``data:<mime>;base64,<payload>`` URI.

    Raises:
        InvalidFormat: If the URI has no base64 marker, no payload, or invalid base64
        EmptyFile: If the payload decodes to zero bytes
    """
    if not data_uri or not data_uri.startswith("data:"):
        raise InvalidFormat("Invalid PDF data URI format: expected a data: URI")

    header, sep, payload = data_uri.partition(",")
    if not sep or ";base64" not in header:
        raise InvalidFormat("Invalid PDF data URI format: expected a base64 payload after ','")
    if not payload.strip():
        raise InvalidFormat("Invalid PDF data URI format: no base64 payload after ','")

    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidFormat(f"Invalid PDF data URI format: {e}") from e

    if not data:
        raise EmptyFile("Empty PDF file")
    return data


def validate_pdf_bytes(data: bytes) -> None:
    """Reject empty buffers and buffers without the ``%PDF`` signature."""
    if not data:
        raise EmptyFile("Empty PDF file")
    if data[:4] != PDF_SIGNATURE:
        raise InvalidFormat("Invalid PDF file format: missing %PDF header")


class ServerExtractor:
    """
    Extract text, metadata and structure from PDF bytes.

    Usage:
        ```python
        extractor = ServerExtractor()
        result = await extractor.extract(pdf_bytes)
        print(result.method, result.metadata.pages)
        ```
    """

    def __init__(
        self,
        min_text_chars: int = 10,
        use_primary_parser: bool = True,
        analyzer: Optional[StructuralAnalyzer] = None,
    ):
        self.min_text_chars = min_text_chars
        self.use_primary_parser = use_primary_parser
        self.analyzer = analyzer or StructuralAnalyzer()

    @classmethod
    def from_settings(cls, settings: Settings) -> "ServerExtractor":
        return cls(
            min_text_chars=settings.min_text_chars,
            use_primary_parser=settings.use_primary_parser,
        )

    async def extract_data_uri(self, data_uri: str) -> ExtractionResult:
        return await self.extract(decode_data_uri(data_uri))

    async def extract(self, data: bytes) -> ExtractionResult:
        """
        Extract text from raw PDF bytes.

        This method:
        1. Validates the buffer (non-empty, %PDF signature)
        2. Runs PyMuPDF when enabled
        3. Falls back to the heuristic ladder if that produced too little text
        4. Cleans the text and enforces the minimum length

        Raises:
            EmptyFile, InvalidFormat: On invalid input
            ExtractionFailed: If the parser errors or no method yields enough text
        """
        validate_pdf_bytes(data)
        logger.info(f"Extracting text from PDF ({len(data)} bytes)")

        raw_text = ""
        metadata = DocumentMetadata()
        method = ExtractionMethod.PYMUPDF

        if self.use_primary_parser:
            raw_text, metadata = await asyncio.to_thread(self._extract_with_pymupdf, data)

        if len(clean_text(raw_text)) < self.min_text_chars:
            if self.use_primary_parser:
                logger.warning("PyMuPDF returned too little text, trying byte heuristics")
            raw_text, method = await asyncio.to_thread(self._extract_with_heuristics, data)

        text = clean_text(raw_text)
        if len(text) < self.min_text_chars:
            raise ExtractionFailed(EXTRACTION_FAILED_MESSAGE.format(chars=len(text)))

        logger.info(f"Extracted {len(text)} characters via {method.value} from {metadata.pages or '?'} pages")
        return ExtractionResult(
            text=text,
            raw_text=raw_text,
            metadata=metadata,
            structure=self.analyzer.analyze_structure(raw_text),
            method=method,
        )

    def _extract_with_pymupdf(self, data: bytes) -> Tuple[str, DocumentMetadata]:
        """Extract with PyMuPDF (page by page)."""
        try:
            with fitz.open(stream=data, filetype="pdf") as doc:
                if doc.needs_pass:
                    raise ExtractionFailed(
                        "PDF is password-protected. Remove password protection and try again."
                    )
                pages = [page.get_text("text") for page in doc]
                metadata = self._read_metadata(doc)
        except ExtractionFailed:
            raise
        except Exception as e:
            logger.error(f"PyMuPDF extraction failed: {e}")
            raise ExtractionFailed(f"PDF parsing failed: {e}") from e

        return "\n".join(pages), metadata

    def _read_metadata(self, doc: "fitz.Document") -> DocumentMetadata:
        info = doc.metadata or {}

        def _field(key: str) -> Optional[str]:
            value = info.get(key)
            if not isinstance(value, str):
                return None
            return value.strip() or None

        return DocumentMetadata(
            pages=doc.page_count,
            title=_field("title"),
            author=_field("author"),
            subject=_field("subject"),
            creator=_field("creator"),
            producer=_field("producer"),
            creation_date=_field("creationDate"),
            modification_date=_field("modDate"),
        )

    def _extract_with_heuristics(self, data: bytes) -> Tuple[str, ExtractionMethod]:
        """Run the fallback ladder, stopping at the first rung with enough text."""
        source = data.decode("latin-1")
        text = ""
        method = FALLBACK_LADDER[-1][0]

        for method, rule in FALLBACK_LADDER:
            text = rule(source)
            if len(clean_text(text)) >= self.min_text_chars:
                logger.info(f"Heuristic '{method.value}' recovered {len(text)} characters")
                break
            logger.debug(f"Heuristic '{method.value}' found too little text")

        return text, method
