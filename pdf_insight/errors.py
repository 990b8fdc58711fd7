"""
Typed failures raised by extraction, chunking and the LLM gateway.

Every error carries the HTTP status the API layer answers with, so route
handlers never need to inspect messages.
"""


class PDFInsightError(Exception):
    """Base class for all expected processing failures."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidFormat(PDFInsightError):
    """Input is not a PDF (bad signature) or the data URI is malformed."""

    status_code = 400


class EmptyFile(PDFInsightError):
    status_code = 400


class InvalidRequest(PDFInsightError):
    """A question or document payload is blank."""

    status_code = 400


class InvalidConfiguration(PDFInsightError):
    """Chunker or pipeline parameters that cannot work (e.g. overlap >= size)."""

    status_code = 400


class ExtractionFailed(PDFInsightError):
    """Every extraction method ran without reaching the minimum text length."""

    status_code = 422


class ExtractionCancelled(PDFInsightError):
    status_code = 499


class OcrFailed(PDFInsightError):
    status_code = 422


class GatewayUnavailable(PDFInsightError):
    """No LLM provider has credentials configured."""

    status_code = 503


class GatewayError(PDFInsightError):
    """An LLM call failed: non-2xx status, timeout, or unusable payload."""

    status_code = 502

    def __init__(self, message: str, provider: str = ""):
        super().__init__(message)
        self.provider = provider
