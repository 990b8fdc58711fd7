"""
Text preparation for extracted PDF content.

This module provides:
- clean_text: Normalize extracted text to printable ASCII with single spaces
- StructuralAnalyzer: Classify lines and summarize document content
- WordWindowChunker: Split text into overlapping word windows

Example usage:
    >>> from pdf_insight.ingestion import clean_text, chunk_text
    >>> chunks = chunk_text(clean_text(raw), size=512, overlap=128)
"""

from .cleaner import clean_text, strip_markdown_emphasis
from .chunker import WordWindowChunker, ChunkingStats, chunk_text
from .structure import StructuralAnalyzer, analyze_structure, analyze_content

__all__ = [
    "clean_text",
    "strip_markdown_emphasis",
    "WordWindowChunker",
    "ChunkingStats",
    "chunk_text",
    "StructuralAnalyzer",
    "analyze_structure",
    "analyze_content",
]
