"""
Byte-pattern text recovery for PDFs the primary parser cannot read.

The raw buffer is decoded as latin-1 (one character per byte) and searched
with progressively cruder patterns. These rules only see uncompressed content
streams; text drawn with CID-keyed fonts or inside Flate-compressed streams is
invisible to them.
"""

import re
from typing import Callable, Iterator, List, Tuple

from ..data_models import ExtractionMethod

# Literals are capped at MAX_LITERAL characters and never span an opening
# parenthesis, so an unclosed "(" costs at most one bounded scan.
MAX_LITERAL = 512

# A PDF string literal: parentheses with backslash escapes inside
LITERAL = re.compile(r"\(((?:\\.|[^\\()]){0,%d})\)" % MAX_LITERAL, re.DOTALL)
SIMPLE_LITERAL = re.compile(r"\(([^()\n]{1,%d})\)" % MAX_LITERAL)
BLOCK_START = re.compile(r"\bBT\b")
BLOCK_END = re.compile(r"\bET\b")
FONT_OPERATOR = re.compile(r"\bTf\b")
POSITION_OPERATOR = re.compile(r"\bT[dD]\b")
TEXT_OBJECT = re.compile(r"/Text\s{0,16}\(([^()\n]{1,%d})\)" % MAX_LITERAL)
COORDINATES = re.compile(r"^[\d\s-]+$")
LETTER_RUN = re.compile(r"[a-zA-Z]{3,}")
ALNUM_RUN = re.compile(r"[a-zA-Z][a-zA-Z0-9\s]{10,}")
WHITESPACE_RUN = re.compile(r"\s+")

ESCAPES = {"n": "\n", "r": "\r", "t": "\t", "b": "\b", "f": "\f", "(": "(", ")": ")", "\\": "\\"}
ESCAPE_SEQUENCE = re.compile(r"\\([nrtbf()\\]|[0-7]{1,3})")


def unescape_literal(literal: str) -> str:
    """Resolve PDF string escapes such as ``\\(``, ``\\n`` and octal ``\\101``."""
    def _replace(match: "re.Match[str]") -> str:
        token = match.group(1)
        if token in ESCAPES:
            return ESCAPES[token]
        return chr(int(token, 8) & 0xFF)

    return ESCAPE_SEQUENCE.sub(_replace, literal)


def _join(parts: List[str]) -> str:
    return WHITESPACE_RUN.sub(" ", " ".join(parts)).strip()


def text_blocks(source: str) -> Iterator[str]:
    """Bodies of ``BT ... ET`` text objects, in order, in one left-to-right pass."""
    position = 0
    while True:
        start = BLOCK_START.search(source, position)
        if start is None:
            return
        end = BLOCK_END.search(source, start.end())
        if end is None:
            # No later BT can be closed either
            return
        yield source[start.end():end.start()]
        position = end.end()


def from_content_streams(source: str) -> str:
    """Literals shown inside ``BT ... ET`` blocks that set a font and a position."""
    parts = []
    for block in text_blocks(source):
        if not (FONT_OPERATOR.search(block) and POSITION_OPERATOR.search(block)):
            continue
        parts.extend(unescape_literal(m) for m in LITERAL.findall(block))
    return _join([p for p in parts if p])


def from_parenthesized_runs(source: str) -> str:
    """Any parenthesized run that is not purely numeric coordinate data."""
    parts = [
        m for m in SIMPLE_LITERAL.findall(source)
        if len(m) > 1 and not COORDINATES.match(m)
    ]
    return _join(parts)


def from_text_objects(source: str) -> str:
    return _join([m for m in TEXT_OBJECT.findall(source) if m])


def from_readable_lines(source: str) -> str:
    """Parenthesized alphabetic content on lines that also carry a 3+ letter word."""
    parts = []
    for line in source.split("\n"):
        if not (LETTER_RUN.search(line) and "(" in line and ")" in line):
            continue
        found = [
            m for m in SIMPLE_LITERAL.findall(line)
            if len(m) > 1 and re.search(r"[a-zA-Z]", m)
        ]
        if found:
            parts.append(" ".join(found))
    return _join(parts)


def from_alnum_runs(source: str) -> str:
    """Last resort: every run of 10+ alphanumerics/spaces that starts with a letter."""
    return _join(ALNUM_RUN.findall(source))


# Tried strictly in this order; the first rung that clears the threshold wins
FALLBACK_LADDER: List[Tuple[ExtractionMethod, Callable[[str], str]]] = [
    (ExtractionMethod.CONTENT_STREAM, from_content_streams),
    (ExtractionMethod.PARENTHESIZED, from_parenthesized_runs),
    (ExtractionMethod.TEXT_OBJECT, from_text_objects),
    (ExtractionMethod.READABLE_LINES, from_readable_lines),
    (ExtractionMethod.ALNUM_RUNS, from_alnum_runs),
]
