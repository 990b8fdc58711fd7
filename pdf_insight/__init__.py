"""
PDF Insight: PDF text extraction and document question answering.

USAGE:
======
```python
from pdf_insight import DocumentService
from pdf_insight.config import settings

service = DocumentService.from_settings(settings)
document = await service.process_bytes(pdf_bytes)
result = await service.ask("Who is the vendor?", document.text)
print(result.answer, result.citations)
```

MODULAR USAGE (no LLM or web dependencies):
===========================================
```python
from pdf_insight.ingestion import clean_text, chunk_text, StructuralAnalyzer
from pdf_insight.document_processing import ServerExtractor, PageTextExtractor
```
"""
__version__ = "1.0.0"

# Lazy imports keep `import pdf_insight.ingestion` free of the service stack

__all__ = [
    "DocumentService",
    "LLMGateway",
    "ServerExtractor",
    "PageTextExtractor",
    "clean_text",
    "chunk_text",
    "StructuralAnalyzer",
]


def __getattr__(name: str):
    """Lazy import to avoid loading the service stack unless needed."""
    if name in ("DocumentService", "LLMGateway"):
        from .services import DocumentService, LLMGateway
        return locals()[name]

    if name in ("ServerExtractor", "PageTextExtractor"):
        from .document_processing import ServerExtractor, PageTextExtractor
        return locals()[name]

    if name in ("clean_text", "chunk_text", "StructuralAnalyzer"):
        from .ingestion import clean_text, chunk_text, StructuralAnalyzer
        return locals()[name]

    raise AttributeError(f"module 'pdf_insight' has no attribute '{name}'")
