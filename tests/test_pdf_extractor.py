"""Tests for data URI decoding, PDF validation and server-side extraction."""

import asyncio
import base64
import time
from unittest.mock import patch

import fitz
import pytest

from pdf_insight.data_models import ExtractionMethod
from pdf_insight.document_processing.heuristics import (
    from_content_streams,
    from_parenthesized_runs,
    from_readable_lines,
    text_blocks,
    unescape_literal,
)
from pdf_insight.document_processing.pdf_extractor import (
    ServerExtractor,
    decode_data_uri,
    validate_pdf_bytes,
)
from pdf_insight.errors import EmptyFile, ExtractionFailed, InvalidFormat

CONTENT_STREAM_PDF = (
    b"%PDF-1.4\n1 0 obj\n<< /Length 44 >>\nstream\n"
    b"BT /F1 12 Tf 72 712 Td (Company: TechCorp) Tj ET\n"
    b"endstream\nendobj\n%%EOF"
)


def _data_uri(data: bytes) -> str:
    return "data:application/pdf;base64," + base64.b64encode(data).decode("ascii")


def _generated_pdf(**save_options) -> bytes:
    doc = fitz.open()
    page = doc.new_page()
    page.insert_text((72, 72), "QUARTERLY REPORT", fontsize=14)
    page.insert_text((72, 100), "Revenue grew by twelve percent over the prior quarter.")
    doc.set_metadata({"title": "Q3 Report", "author": "Finance Team"})
    data = doc.tobytes(**save_options)
    doc.close()
    return data


class TestDecodeDataUri:
    def test_roundtrip(self):
        assert decode_data_uri(_data_uri(b"%PDF-1.4 body")) == b"%PDF-1.4 body"

    @pytest.mark.parametrize(
        "uri",
        [
            "not a data uri",
            "data:application/pdf;base64",
            "data:application/pdf,JVBERi0=",
            "data:application/pdf;base64,@@@not-base64@@@",
        ],
    )
    def test_invalid_format(self, uri):
        with pytest.raises(InvalidFormat):
            decode_data_uri(uri)

    @pytest.mark.parametrize("uri", ["data:application/pdf;base64,", "data:application/pdf;base64,   "])
    def test_blank_payload_is_invalid_format(self, uri):
        with pytest.raises(InvalidFormat) as exc_info:
            decode_data_uri(uri)
        assert exc_info.value.message.startswith("Invalid PDF data URI format")


class TestValidatePdfBytes:
    def test_empty_checked_before_signature(self):
        with pytest.raises(EmptyFile):
            validate_pdf_bytes(b"")

    def test_missing_signature(self):
        with pytest.raises(InvalidFormat):
            validate_pdf_bytes(b"<html>not a pdf</html>")

    def test_valid_signature(self):
        validate_pdf_bytes(b"%PDF-1.7\n")


class TestHeuristics:
    def test_unescape_literal(self):
        assert unescape_literal(r"Total \(net\)\n\101") == "Total (net)\nA"

    def test_readable_lines(self):
        source = "q 1 0 0 1 0 0 cm\n[(Hello) (world)] TJ\n(12 34) Td"
        assert from_readable_lines(source) == "Hello world"

    def test_text_blocks_skip_unclosed_block(self):
        assert list(text_blocks("BT x ET BT y")) == [" x "]

    def test_literal_with_escaped_parentheses(self):
        source = r"BT /F1 12 Tf 72 712 Td (Total \(net\)) Tj ET"
        assert from_content_streams(source) == "Total (net)"

    def test_unclosed_tokens_scan_quickly(self):
        source = "(abc " * 30000 + "BT 1 0 0 1 " * 20000

        started = time.perf_counter()
        assert from_content_streams(source) == ""
        assert from_parenthesized_runs(source) == ""
        assert time.perf_counter() - started < 2.0


class TestServerExtractorLadder:
    @pytest.fixture
    def extractor(self):
        return ServerExtractor(min_text_chars=10, use_primary_parser=False)

    @pytest.mark.asyncio
    async def test_content_stream(self, extractor):
        result = await extractor.extract(CONTENT_STREAM_PDF)
        assert result.method == ExtractionMethod.CONTENT_STREAM
        assert "Company: TechCorp" in result.text

    @pytest.mark.asyncio
    async def test_parenthesized_runs(self, extractor):
        data = b"%PDF-1.4\n(Quarterly revenue grew) (12 34 56)\n%%EOF"
        result = await extractor.extract(data)
        assert result.method == ExtractionMethod.PARENTHESIZED
        assert result.text == "Quarterly revenue grew"

    @pytest.mark.asyncio
    async def test_text_objects(self, extractor):
        result = await extractor.extract(b"%PDF-1.4\n/Text (2024 12 31 0800)\n%%EOF")
        assert result.method == ExtractionMethod.TEXT_OBJECT
        assert result.text == "2024 12 31 0800"

    @pytest.mark.asyncio
    async def test_alnum_runs(self, extractor):
        data = b"%PDF-1.4\nplain words without any operators here\n%%EOF"
        result = await extractor.extract(data)
        assert result.method == ExtractionMethod.ALNUM_RUNS
        assert "plain words without any operators here" in result.text

    @pytest.mark.asyncio
    async def test_all_methods_fail(self, extractor):
        with pytest.raises(ExtractionFailed) as exc_info:
            await extractor.extract(b"%PDF-1.4\n%%EOF")
        assert "OCR" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_invalid_input(self, extractor):
        with pytest.raises(EmptyFile):
            await extractor.extract(b"")
        with pytest.raises(InvalidFormat):
            await extractor.extract(b"GIF89a")

    @pytest.mark.asyncio
    async def test_data_uri(self, extractor):
        result = await extractor.extract_data_uri(_data_uri(CONTENT_STREAM_PDF))
        assert result.method == ExtractionMethod.CONTENT_STREAM

    @pytest.mark.asyncio
    async def test_unclosed_literals_and_blocks(self, extractor):
        data = b"%PDF-1.4\n" + b"(abc " * 30000 + b"BT 1 0 0 1 " * 20000

        started = time.perf_counter()
        result = await extractor.extract(data)

        assert time.perf_counter() - started < 2.0
        assert result.method == ExtractionMethod.ALNUM_RUNS
        assert "BT 1 0 0 1" in result.text

    @pytest.mark.asyncio
    async def test_ladder_runs_off_the_event_loop(self, extractor):
        def slow_ladder(data):
            time.sleep(0.5)
            return "", ExtractionMethod.ALNUM_RUNS

        with patch.object(ServerExtractor, "_extract_with_heuristics", side_effect=slow_ladder):
            with pytest.raises(asyncio.TimeoutError):
                await asyncio.wait_for(extractor.extract(b"%PDF-1.4 x"), timeout=0.05)


class TestServerExtractorPrimary:
    @pytest.mark.asyncio
    async def test_pymupdf_text_and_metadata(self):
        result = await ServerExtractor().extract(_generated_pdf())

        assert result.method == ExtractionMethod.PYMUPDF
        assert "QUARTERLY REPORT" in result.text
        assert "Revenue grew by twelve percent" in result.text
        assert result.metadata.pages == 1
        assert result.metadata.title == "Q3 Report"
        assert result.metadata.author == "Finance Team"
        assert "QUARTERLY REPORT" in result.structure.headings

    @pytest.mark.asyncio
    async def test_cleaned_text_has_no_control_characters(self):
        result = await ServerExtractor().extract(_generated_pdf())
        assert "\n" not in result.text
        assert "  " not in result.text

    @pytest.mark.asyncio
    async def test_password_protected(self):
        data = _generated_pdf(
            encryption=fitz.PDF_ENCRYPT_AES_256, owner_pw="owner", user_pw="secret"
        )
        with pytest.raises(ExtractionFailed) as exc_info:
            await ServerExtractor().extract(data)
        assert "password" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_unparseable_pdf(self):
        with pytest.raises(ExtractionFailed):
            await ServerExtractor().extract(b"%PDF-1.4\n%%EOF")
