"""
Document Processing Module.
Turns PDF bytes or loaded PDF documents into extracted text.
"""

from .ocr import OcrEngine, TesseractOcrEngine
from .page_extractor import PageTextExtractor, ProgressCallback
from .pdf_extractor import ServerExtractor, decode_data_uri, validate_pdf_bytes

__all__ = [
    "OcrEngine",
    "TesseractOcrEngine",
    "PageTextExtractor",
    "ProgressCallback",
    "ServerExtractor",
    "decode_data_uri",
    "validate_pdf_bytes",
]
