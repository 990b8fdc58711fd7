"""
OCR engines used when a PDF has no usable text layer.

An engine is a scoped resource: acquire it with ``with``, and it is released
when the block exits, whether recognition succeeded or raised.
"""

import asyncio
import io
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor

import pytesseract
from PIL import Image


class OcrEngine(ABC):
    """Interface for page-image text recognition."""

    @abstractmethod
    async def recognize(self, image_png: bytes) -> str:
        """Return the text recognized in a PNG-encoded page image."""

    @abstractmethod
    def close(self) -> None:
        """Release the engine's worker resources."""

    def __enter__(self) -> "OcrEngine":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class TesseractOcrEngine(OcrEngine):
    """
    Tesseract OCR through pytesseract.

    Recognition runs on a dedicated single-thread worker so the event loop
    stays responsive; ``close`` shuts the worker down.
    """

    def __init__(self, language: str = "eng", config: str = "--psm 3"):
        self.language = language
        self.config = config
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="tesseract")
        self._closed = False

    async def recognize(self, image_png: bytes) -> str:
        if self._closed:
            raise RuntimeError("OCR engine has already been closed")
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, self._recognize_sync, image_png)

    def _recognize_sync(self, image_png: bytes) -> str:
        with Image.open(io.BytesIO(image_png)) as image:
            return pytesseract.image_to_string(image, lang=self.language, config=self.config)

    def close(self) -> None:
        if self._closed:
            return
        self._executor.shutdown(wait=True)
        self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed
