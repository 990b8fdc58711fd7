"""
API request and response schemas.
"""
from typing import Dict, List, Optional
from pydantic import BaseModel, Field

from ..data_models import ProcessedDocument


class DataUriRequest(BaseModel):
    pdf_data_uri: str = Field(..., min_length=1)
    client_extracted_text: Optional[str] = None


class AskRequest(BaseModel):
    question: str = Field(..., min_length=1, max_length=2000)
    pdf_content: str = Field(..., min_length=1)
    summarize_first: bool = False


class DocumentResponse(BaseModel):
    text: str
    document_type: str
    pages: Optional[int] = None
    title: Optional[str] = None
    used_ocr: bool = False
    method: str
    restructured: bool = False
    chunk_count: int = 0
    processing_time_ms: float = 0.0

    @classmethod
    def from_document(cls, document: ProcessedDocument) -> "DocumentResponse":
        return cls(
            text=document.text,
            document_type=document.analysis.document_type.value,
            pages=document.metadata.pages,
            title=document.metadata.title,
            used_ocr=document.used_ocr,
            method=document.method.value,
            restructured=document.restructured,
            chunk_count=document.chunk_count,
            processing_time_ms=document.processing_time_ms,
        )


class AskResponse(BaseModel):
    answer: str
    citations: List[str] = Field(default_factory=list)
    provider: str = ""
    model: str = ""


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str = "healthy"
    version: str
    providers: List[str] = Field(default_factory=list)
    services: Dict[str, bool] = Field(default_factory=dict)
