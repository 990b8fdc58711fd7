"""
Application configuration.
Loads settings from environment variables and .env file.
"""
from pathlib import Path
from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):

    # Perplexity is tried first, OpenAI second. A provider without a key is skipped.
    perplexity_api_key: Optional[str] = Field(default=None, alias="PERPLEXITY_API_KEY")
    perplexity_base_url: str = Field(default="https://api.perplexity.ai", alias="PERPLEXITY_BASE_URL")
    perplexity_model: str = Field(default="sonar", alias="PERPLEXITY_MODEL")

    openai_api_key: Optional[str] = Field(default=None, alias="OPENAI_API_KEY")
    openai_base_url: str = Field(default="https://api.openai.com/v1", alias="OPENAI_BASE_URL")
    openai_model: str = Field(default="gpt-4o-mini", alias="OPENAI_MODEL")

    llm_max_tokens: int = Field(default=1000, alias="LLM_MAX_TOKENS")
    llm_temperature: float = Field(default=0.1, alias="LLM_TEMPERATURE")
    llm_timeout_seconds: float = Field(default=30.0, alias="LLM_TIMEOUT_SECONDS")

    # Prompt budgets, in characters of document text
    qa_context_chars: int = Field(default=100_000, alias="QA_CONTEXT_CHARS")
    restructure_context_chars: int = Field(default=45_000, alias="RESTRUCTURE_CONTEXT_CHARS")
    restructure_max_tokens: int = Field(default=2000, alias="RESTRUCTURE_MAX_TOKENS")
    enable_restructuring: bool = Field(default=True, alias="ENABLE_RESTRUCTURING")

    # Chunking settings - word windows
    chunk_size: int = Field(default=512, alias="CHUNK_SIZE")
    chunk_overlap: int = Field(default=128, alias="CHUNK_OVERLAP")
    min_chunk_chars: int = Field(default=50, alias="MIN_CHUNK_CHARS")

    # Extraction thresholds; the page path runs OCR unless its text layer exceeds ocr_trigger_chars
    min_text_chars: int = Field(default=10, alias="MIN_TEXT_CHARS")
    ocr_trigger_chars: int = Field(default=120, alias="OCR_TRIGGER_CHARS")
    use_primary_parser: bool = Field(default=True, alias="USE_PRIMARY_PARSER")
    # Opt-in: OCR needs the tesseract binary and takes seconds per page
    enable_ocr_fallback: bool = Field(default=False, alias="ENABLE_OCR_FALLBACK")
    ocr_scale: float = Field(default=2.0, alias="OCR_SCALE")
    ocr_language: str = Field(default="eng", alias="OCR_LANGUAGE")

    api_host: str = Field(default="0.0.0.0", alias="API_HOST")
    api_port: int = Field(default=8000, alias="API_PORT")
    request_timeout_seconds: float = Field(default=60.0, alias="REQUEST_TIMEOUT_SECONDS")
    max_upload_mb: int = Field(default=50, alias="MAX_UPLOAD_MB")

    log_dir: Optional[Path] = Field(default=None, alias="LOG_DIR")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024

    @property
    def logs_dir(self) -> Path:
        return self.log_dir or Path.cwd() / "logs"

    def ensure_directories(self) -> None:
        self.logs_dir.mkdir(parents=True, exist_ok=True)


settings = Settings()
