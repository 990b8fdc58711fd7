"""
Word-window chunker for retrieval-style consumption of document text.

Text is split on whitespace and cut into windows of ``chunk_size`` words that
start every ``chunk_size - chunk_overlap`` words, so neighbouring chunks share
``chunk_overlap`` words of context. Windowing stops once a window reaches the
end of the text; windows whose content is too short to be useful are dropped.

Example usage:
    >>> chunker = WordWindowChunker(chunk_size=512, chunk_overlap=128)
    >>> chunks = chunker.chunk(cleaned_text)
    >>> stats = chunker.get_stats(chunks)
"""

from dataclasses import dataclass
from typing import List

from ..data_models import VectorChunk
from ..errors import InvalidConfiguration


@dataclass
class ChunkingStats:
    """Statistics from the chunking process."""

    total_chunks: int = 0
    words_covered: int = 0
    avg_chunk_size: float = 0.0
    min_chunk_size: int = 0
    max_chunk_size: int = 0


class WordWindowChunker:
    """
    Overlapping fixed-size word windows.

    The chunker holds only its configuration; ``chunk`` is a pure function of
    the text, so the same text always yields the same sequence.
    """

    def __init__(
        self,
        chunk_size: int = 512,
        chunk_overlap: int = 128,
        min_chunk_chars: int = 50,
    ):
        """
        Initialize the chunker.

        Args:
            chunk_size: Words per window (default 512)
            chunk_overlap: Words shared by consecutive windows (default 128)
            min_chunk_chars: Windows with trimmed length at or below this are discarded

        Raises:
            InvalidConfiguration: If the stride ``chunk_size - chunk_overlap`` is not positive
        """
        if chunk_size <= 0:
            raise InvalidConfiguration(f"chunk_size must be positive, got {chunk_size}")
        if chunk_overlap < 0:
            raise InvalidConfiguration(f"chunk_overlap must not be negative, got {chunk_overlap}")
        if chunk_overlap >= chunk_size:
            raise InvalidConfiguration(
                f"chunk_overlap ({chunk_overlap}) must be smaller than chunk_size ({chunk_size})"
            )
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.min_chunk_chars = min_chunk_chars

    @property
    def stride(self) -> int:
        return self.chunk_size - self.chunk_overlap

    def chunk(self, text: str) -> List[VectorChunk]:
        """Split text into overlapping word windows, in text order."""
        words = text.split() if text else []
        chunks: List[VectorChunk] = []

        start = 0
        while start < len(words):
            window = words[start:start + self.chunk_size]
            content = " ".join(window).strip()
            if len(content) > self.min_chunk_chars:
                chunks.append(VectorChunk(
                    content=content,
                    index=len(chunks),
                    start_word=start,
                    word_count=len(window),
                ))
            if start + self.chunk_size >= len(words):
                break
            start += self.stride

        return chunks

    def get_stats(self, chunks: List[VectorChunk]) -> ChunkingStats:
        """Calculate statistics for a list of chunks."""
        if not chunks:
            return ChunkingStats()

        sizes = [c.length for c in chunks]
        return ChunkingStats(
            total_chunks=len(chunks),
            words_covered=chunks[-1].end_word,
            avg_chunk_size=sum(sizes) / len(sizes),
            min_chunk_size=min(sizes),
            max_chunk_size=max(sizes),
        )


def chunk_text(
    text: str,
    size: int = 512,
    overlap: int = 128,
    min_chars: int = 50,
) -> List[VectorChunk]:
    """Convenience wrapper around :class:`WordWindowChunker`."""
    return WordWindowChunker(size, overlap, min_chars).chunk(text)
