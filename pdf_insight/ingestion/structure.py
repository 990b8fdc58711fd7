"""
Heuristic structural analysis of extracted document text.

Lines are classified into headings, paragraphs, list items and table-like
rows, and the whole text is summarized into a coarse document type, key
topics, important sections and a readability score. A line may land in
more than one category.
"""

import re
from typing import Optional

from ..data_models import ContentAnalysis, DocumentStructure, DocumentType


class StructuralAnalyzer:
    """
    Classify lines and summarize a document.

    Example usage:
        >>> analyzer = StructuralAnalyzer()
        >>> structure = analyzer.analyze_structure(raw_text)
        >>> analysis = analyzer.analyze_content(raw_text, structure)
        >>> analysis.document_type
        <DocumentType.REPORT: 'Report/Analysis'>
    """

    HEADING_PATTERNS = [
        re.compile(r"^[A-Z][A-Z\s]+$"),        # ALL CAPS
        re.compile(r"^\d+\.?\s+[A-Z]"),         # 1. Introduction
        re.compile(r"^[A-Z][a-z]+.*:$"),        # Terms and conditions:
    ]
    BARE_NUMBER = re.compile(r"^\d+\.?\s*$")
    LIST_MARKER = re.compile(r"^\s*(?:[•\-*]|\d+\.|[a-z]\.)\s")
    COLUMN_GAP = re.compile(r"\s{2,}")
    SENTENCE_END = re.compile(r"[.!?]+")

    # Checked in order; the first pair found in the text wins
    DOCUMENT_TYPE_KEYWORDS = [
        (DocumentType.CONTRACT, ("contract", "agreement")),
        (DocumentType.RESUME, ("resume", "cv")),
        (DocumentType.INVOICE, ("invoice", "bill")),
        (DocumentType.REPORT, ("report", "analysis")),
        (DocumentType.MANUAL, ("manual", "guide")),
    ]

    MAX_HEADING_LENGTH = 100
    MIN_PARAGRAPH_LENGTH = 100
    MIN_TABLE_ROW_LENGTH = 50

    def analyze_structure(self, text: str) -> DocumentStructure:
        """Classify the non-empty trimmed lines of ``text``."""
        lines = [line.strip() for line in (text or "").split("\n")]
        lines = [line for line in lines if line]

        return DocumentStructure(
            headings=[line for line in lines if self.is_heading(line)],
            paragraphs=[line for line in lines if self.is_paragraph(line)],
            lists=[line for line in lines if self.is_list_item(line)],
            tables=[line for line in lines if self.is_table_row(line)],
        )

    def is_heading(self, line: str) -> bool:
        if len(line) >= self.MAX_HEADING_LENGTH:
            return False
        return any(p.match(line) for p in self.HEADING_PATTERNS)

    def is_paragraph(self, line: str) -> bool:
        return (
            len(line) > self.MIN_PARAGRAPH_LENGTH
            and "." in line
            and not self.BARE_NUMBER.match(line)
        )

    def is_list_item(self, line: str) -> bool:
        return bool(self.LIST_MARKER.match(line))

    def is_table_row(self, line: str) -> bool:
        return (
            "  " in line
            and len(self.COLUMN_GAP.split(line)) > 2
            and len(line) > self.MIN_TABLE_ROW_LENGTH
        )

    def analyze_content(
        self,
        text: str,
        structure: Optional[DocumentStructure] = None,
    ) -> ContentAnalysis:
        """
        Summarize a document.

        Args:
            text: Document text; line breaks are used for key topic detection
            structure: Result of ``analyze_structure``; computed when omitted

        Returns:
            ContentAnalysis with type, topics, sections and readability score
        """
        text = text or ""
        if structure is None:
            structure = self.analyze_structure(text)

        mid_length_lines = [
            line for line in text.split("\n") if 20 < len(line) < 100
        ][:5]
        key_topics = [
            topic for topic in structure.headings[:10] + mid_length_lines
            if topic and topic.strip()
        ]
        important_sections = [
            section for section in structure.headings[:5] + structure.paragraphs[:3]
            if section and section.strip()
        ]

        return ContentAnalysis(
            document_type=self.detect_document_type(text),
            key_topics=key_topics,
            important_sections=important_sections,
            readability_score=self.readability_score(text),
        )

    def detect_document_type(self, text: str) -> DocumentType:
        lowered = text.lower()
        for document_type, keywords in self.DOCUMENT_TYPE_KEYWORDS:
            if any(keyword in lowered for keyword in keywords):
                return document_type
        return DocumentType.GENERAL

    def readability_score(self, text: str) -> float:
        """100 - (avg words per sentence - 10) * 2, clamped to [0, 100]."""
        sentences = [s for s in self.SENTENCE_END.split(text) if s.strip()]
        if not sentences:
            return 0.0
        words = text.split()
        avg_words_per_sentence = len(words) / len(sentences)
        return max(0.0, min(100.0, 100 - (avg_words_per_sentence - 10) * 2))


_default_analyzer = StructuralAnalyzer()


def analyze_structure(text: str) -> DocumentStructure:
    return _default_analyzer.analyze_structure(text)


def analyze_content(text: str, structure: Optional[DocumentStructure] = None) -> ContentAnalysis:
    return _default_analyzer.analyze_content(text, structure)
