"""Tests for text cleaning and markdown emphasis stripping."""

import pytest

from pdf_insight.ingestion.cleaner import clean_text, strip_markdown_emphasis


class TestCleanText:
    def test_collapses_whitespace_and_trims(self):
        assert clean_text("  Hello\n\n\tWorld  ") == "Hello World"

    def test_non_printable_becomes_space(self):
        assert clean_text("A\x00B") == "A B"
        assert clean_text("Caf\u00e9menu") == "Caf menu"

    @pytest.mark.parametrize("value", ["", None, "   \n\t "])
    def test_empty_inputs(self, value):
        assert clean_text(value) == ""

    def test_output_is_printable_ascii_without_double_spaces(self):
        raw = "Invoice\u2014#42\x07\r\n  Total: $1,200.00 \ufeff"
        cleaned = clean_text(raw)
        assert all(0x20 <= ord(ch) <= 0x7E for ch in cleaned)
        assert "  " not in cleaned
        assert cleaned == cleaned.strip()

    def test_idempotent(self):
        raw = "\x01Page 1\n\nSummary\u2026  of   results\x7f"
        once = clean_text(raw)
        assert clean_text(once) == once


class TestStripMarkdownEmphasis:
    def test_removes_bold_and_italic(self):
        assert strip_markdown_emphasis("The **total** is *due* on ***Friday***") == (
            "The total is due on Friday"
        )

    def test_plain_text_unchanged(self):
        assert strip_markdown_emphasis("  Page 3 lists the fees. ") == "Page 3 lists the fees."
