import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api import applications, callback
from .config import Settings, get_settings
from .database import create_db_engine, create_session_factory, init_db
from .exceptions import IntakeError
from .services.external.automation_client import AutomationClient
from .services.extraction.ocr_client import OcrClient
from .services.extraction.resume_text import ResumeTextExtractor
from .services.storage.file_storage import StorageClient

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Connect once, reuse for every request, close on shutdown.
    """
    settings: Settings = app.state.settings

    engine = create_db_engine(settings.DATABASE_URL)
    # This creates the tables. For production, use Alembic migrations.
    init_db(engine)
    app.state.session_factory = create_session_factory(engine)

    http = httpx.AsyncClient(timeout=30)
    app.state.storage = StorageClient(
        http,
        api_key=settings.STORAGE_API_KEY,
        base_url=settings.STORAGE_API_URL,
        upload_path=settings.STORAGE_UPLOAD_PATH,
        delete_path=settings.STORAGE_DELETE_PATH,
    )
    app.state.extractor = ResumeTextExtractor(
        OcrClient(http, api_key=settings.OCR_API_KEY, api_url=settings.OCR_API_URL),
        min_length=settings.MIN_RESUME_TEXT_LENGTH,
    )
    app.state.automation = AutomationClient(
        http,
        webhook_url=settings.AUTOMATION_WEBHOOK_URL,
        api_token=settings.AUTOMATION_API_TOKEN,
        timeout=settings.AUTOMATION_TIMEOUT_SECONDS,
    )
    logger.info("Resume intake API started")
    try:
        yield
    finally:
        await http.aclose()
        engine.dispose()
        logger.info("Resume intake API stopped")


async def intake_error_handler(request: Request, exc: IntakeError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content={"success": False, "error": str(exc)})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    # Missing credentials stop the process here, before any request is served.
    settings = settings or get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    app = FastAPI(
        title="Resume Intake API",
        description="API for ingesting PDF resumes and tracking their AI analysis.",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(IntakeError, intake_error_handler)

    # --- Mount Routers ---
    api_prefix = "/api/v1"
    app.include_router(applications.router, prefix=api_prefix, tags=["Applications"])
    app.include_router(callback.router, prefix=api_prefix, tags=["Integrations"])

    @app.get("/health", tags=["System"])
    def health_check():
        return {"status": "ok", "message": "API is running"}

    return app


app = create_app()
