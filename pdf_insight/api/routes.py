"""
API route handlers.

Typed processing errors propagate to the application's exception handler,
which answers ``{"error": message}`` with the error's status code.
"""
import asyncio
from typing import Awaitable, Optional, TypeVar

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from ..config import Settings
from ..services.document_service import DocumentService
from .dependencies import get_document_service, get_settings
from .schemas import AskRequest, AskResponse, DataUriRequest, DocumentResponse, ErrorResponse

router = APIRouter(prefix="/api/v1", tags=["documents"])

T = TypeVar("T")

PDF_CONTENT_TYPES = {"application/pdf", "application/x-pdf"}

ERROR_RESPONSES = {
    status: {"model": ErrorResponse}
    for status in (400, 413, 422, 499, 502, 503, 504)
}


async def _bounded(operation: Awaitable[T], timeout: float) -> T:
    try:
        return await asyncio.wait_for(operation, timeout=timeout)
    except asyncio.TimeoutError:
        raise HTTPException(
            status_code=504,
            detail=f"Processing did not finish within {timeout:.0f} seconds.",
        )


@router.post("/documents", response_model=DocumentResponse, responses=ERROR_RESPONSES)
async def upload_document(
    file: UploadFile = File(...),
    client_extracted_text: Optional[str] = Form(default=None),
    service: DocumentService = Depends(get_document_service),
    config: Settings = Depends(get_settings),
) -> DocumentResponse:
    if file.content_type and file.content_type not in PDF_CONTENT_TYPES:
        raise HTTPException(
            status_code=400,
            detail="Unsupported file type. Please upload a PDF document.",
        )

    data = await file.read()
    if len(data) > config.max_upload_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"PDF exceeds the {config.max_upload_mb} MB upload limit.",
        )

    document = await _bounded(
        service.process_bytes(data, client_text=client_extracted_text),
        config.request_timeout_seconds,
    )
    return DocumentResponse.from_document(document)


@router.post("/documents/data-uri", response_model=DocumentResponse, responses=ERROR_RESPONSES)
async def upload_data_uri(
    request: DataUriRequest,
    service: DocumentService = Depends(get_document_service),
    config: Settings = Depends(get_settings),
) -> DocumentResponse:
    document = await _bounded(
        service.process_data_uri(request.pdf_data_uri, client_text=request.client_extracted_text),
        config.request_timeout_seconds,
    )
    return DocumentResponse.from_document(document)


@router.post("/ask", response_model=AskResponse, responses=ERROR_RESPONSES)
async def ask_question(
    request: AskRequest,
    service: DocumentService = Depends(get_document_service),
    config: Settings = Depends(get_settings),
) -> AskResponse:
    result = await _bounded(
        service.ask(request.question, request.pdf_content, summarize_first=request.summarize_first),
        config.request_timeout_seconds,
    )
    return AskResponse(
        answer=result.answer,
        citations=result.citations,
        provider=result.provider,
        model=result.model,
    )
