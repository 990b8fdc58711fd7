"""
Text cleaning for extracted PDF content.

Every character outside printable ASCII plus tab/newline/carriage return is
replaced by a space, whitespace runs collapse to a single space, and the
result is trimmed.

The output contains only characters in 0x20-0x7E and never two spaces in a
row, so cleaning is idempotent.
"""

import re

# Anything that is not tab, LF, CR or printable ASCII
NON_PRINTABLE = re.compile(r"[^\x09\x0A\x0D\x20-\x7E]")
WHITESPACE_RUN = re.compile(r"\s+")

MARKDOWN_EMPHASIS = [
    re.compile(r"\*\*\*(.*?)\*\*\*"),
    re.compile(r"\*\*(.*?)\*\*"),
    re.compile(r"\*(.*?)\*"),
]


def clean_text(text: str) -> str:
    """
    Normalize raw extracted text.

    Example:
        >>> clean_text("  Caf\\u00e9\\x00menu\\n\\n  prices ")
        'Caf menu prices'
    """
    if not text:
        return ""
    text = NON_PRINTABLE.sub(" ", text)
    text = WHITESPACE_RUN.sub(" ", text)
    return text.strip()


def strip_markdown_emphasis(text: str) -> str:
    """Remove ***bold italic***, **bold** and *italic* markers from LLM output."""
    for pattern in MARKDOWN_EMPHASIS:
        text = pattern.sub(r"\1", text)
    return text.strip()
