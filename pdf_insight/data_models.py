"""
Data models for extracted documents, structural analysis, chunks and answers.
Used throughout the application for type safety and validation.
"""
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field


class ExtractionMethod(str, Enum):
    """Which extraction technique produced the document text."""
    PYMUPDF = "pymupdf"
    CONTENT_STREAM = "content_stream"
    PARENTHESIZED = "parenthesized"
    TEXT_OBJECT = "text_object"
    READABLE_LINES = "readable_lines"
    ALNUM_RUNS = "alnum_runs"
    TEXT_LAYER = "text_layer"
    OCR = "ocr"
    CLIENT_SUPPLIED = "client_supplied"


class DocumentType(str, Enum):
    CONTRACT = "Contract/Agreement"
    RESUME = "Resume/CV"
    INVOICE = "Invoice/Bill"
    REPORT = "Report/Analysis"
    MANUAL = "Manual/Guide"
    GENERAL = "General Document"


class DocumentMetadata(BaseModel):
    """Descriptive attributes found by the primary parser. Every field is optional."""
    pages: Optional[int] = None
    title: Optional[str] = None
    author: Optional[str] = None
    subject: Optional[str] = None
    creator: Optional[str] = None
    producer: Optional[str] = None
    creation_date: Optional[str] = None
    modification_date: Optional[str] = None


class DocumentStructure(BaseModel):
    """Lines classified by the structural analyzer."""
    headings: List[str] = Field(default_factory=list)
    paragraphs: List[str] = Field(default_factory=list)
    lists: List[str] = Field(default_factory=list)
    tables: List[str] = Field(default_factory=list)


class ContentAnalysis(BaseModel):
    document_type: DocumentType = DocumentType.GENERAL
    key_topics: List[str] = Field(default_factory=list)
    important_sections: List[str] = Field(default_factory=list)
    readability_score: float = Field(default=0.0, ge=0.0, le=100.0)


class ExtractionResult(BaseModel):
    """Terminal output of the extraction pipeline for one document."""
    text: str = Field(..., min_length=1, description="Cleaned document text")
    raw_text: str = Field(default="", description="Line-preserving text used for structural analysis")
    metadata: DocumentMetadata = Field(default_factory=DocumentMetadata)
    structure: DocumentStructure = Field(default_factory=DocumentStructure)
    method: ExtractionMethod
    used_ocr: bool = False


class ExtractionProgress(BaseModel):
    page: int = Field(..., ge=1)
    total_pages: int = Field(..., ge=1)
    mode: str = Field(..., pattern="^(text|ocr)$")

    class Config:
        frozen = True


class PageExtractionResult(BaseModel):
    text: str
    used_ocr: bool
    total_pages: int = 0


@dataclass(frozen=True)
class VectorChunk:
    """
    A contiguous word window of the document text.

    Attributes:
        content: Window words joined with single spaces
        index: Position of the chunk in the output sequence
        start_word: Offset of the first word in the source text
        word_count: Number of words in the window
    """

    content: str
    index: int
    start_word: int
    word_count: int

    @property
    def length(self) -> int:
        """Character length of the chunk."""
        return len(self.content)

    @property
    def end_word(self) -> int:
        return self.start_word + self.word_count


class ProcessedDocument(BaseModel):
    """A fully processed upload, ready for question answering."""
    text: str
    metadata: DocumentMetadata = Field(default_factory=DocumentMetadata)
    structure: DocumentStructure = Field(default_factory=DocumentStructure)
    analysis: ContentAnalysis = Field(default_factory=ContentAnalysis)
    chunks: List[VectorChunk] = Field(default_factory=list)
    method: ExtractionMethod
    used_ocr: bool = False
    restructured: bool = False
    processing_time_ms: float = Field(default=0.0, ge=0)

    @property
    def chunk_count(self) -> int:
        return len(self.chunks)


class AnswerResult(BaseModel):
    """Answer to a question about a document, with the pages it cites."""
    answer: str = Field(..., min_length=1)
    citations: List[str] = Field(default_factory=list)
    provider: str = ""
    model: str = ""
    latency_ms: float = Field(default=0.0, ge=0)
