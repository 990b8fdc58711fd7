"""
Core services: the document pipeline and the LLM gateway.
"""
from .document_service import DocumentService
from .gateway import LLMGateway, extract_citations, provider_configs_from_settings

__all__ = [
    "DocumentService",
    "LLMGateway",
    "extract_citations",
    "provider_configs_from_settings",
]
