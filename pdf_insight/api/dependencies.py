"""
FastAPI dependency injection.
"""
from functools import lru_cache

from ..config import Settings, settings
from ..services.document_service import DocumentService


def get_settings() -> Settings:
    return settings


@lru_cache()
def get_document_service() -> DocumentService:
    """Creates and caches the document service instance."""
    return DocumentService.from_settings(settings)


def check_services_health(service: DocumentService) -> dict:
    """Reports which collaborators are usable."""
    gateway = service.gateway
    return {
        "extraction": True,
        "llm_gateway": bool(gateway is not None and gateway.available),
    }
