"""
FastAPI application factory.
"""
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .. import __version__
from ..config import settings
from ..errors import PDFInsightError
from ..logger import logger
from ..services.document_service import DocumentService
from .dependencies import check_services_health, get_document_service
from .routes import router
from .schemas import HealthResponse


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings.ensure_directories()
    logger.info("PDF Insight API starting...")
    logger.info(f"Log directory: {settings.logs_dir}")
    yield
    logger.info("PDF Insight API shutting down...")


def create_app() -> FastAPI:
    """Creates and configures FastAPI application."""
    application = FastAPI(
        title="PDF Insight API",
        description="PDF text extraction and document question answering API",
        version=__version__,
        lifespan=lifespan
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        # Wildcard origin with credentials is invalid in browsers.
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(router)

    @application.exception_handler(PDFInsightError)
    async def processing_error_handler(request: Request, exc: PDFInsightError) -> JSONResponse:
        logger.warning(f"{request.url.path} failed with {type(exc).__name__}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @application.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

    @application.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        messages = "; ".join(str(error.get("msg", "")) for error in exc.errors())
        return JSONResponse(status_code=400, content={"error": f"Invalid request: {messages}"})

    @application.get("/health", response_model=HealthResponse)
    async def health_check(
        service: DocumentService = Depends(get_document_service),
    ) -> HealthResponse:
        services = check_services_health(service)
        return HealthResponse(
            status="healthy" if all(services.values()) else "degraded",
            version=__version__,
            providers=service.gateway.provider_names if service.gateway else [],
            services=services,
        )

    @application.get("/")
    async def root():
        return {
            "name": "PDF Insight API",
            "version": __version__,
            "endpoints": {
                "health": "/health",
                "upload": "/api/v1/documents",
                "upload_data_uri": "/api/v1/documents/data-uri",
                "ask": "/api/v1/ask",
            },
            "docs": "/docs"
        }

    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "pdf_insight.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True
    )
