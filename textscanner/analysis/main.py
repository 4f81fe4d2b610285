"""FastAPI application entry point for the file-analysis service."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from textscanner.analysis.client import StorageClient
from textscanner.analysis.routes import router as analysis_router
from textscanner.analysis.service import AnalysisService
from textscanner.api import install_error_handlers
from textscanner.config import Settings, get_settings
from textscanner.log import setup_logging

log = logging.getLogger(__name__)

SERVICE_NAME = "file-analysis-service"


def create_app(
    settings: Optional[Settings] = None,
    client: Optional[StorageClient] = None,
) -> FastAPI:
    """Build the analysis app. ``client`` overrides the storage client (tests)."""
    settings = settings or get_settings()
    setup_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        log.info("Startup: storage service at %s", settings.storage_service_url)
        app.state.analysis_service = AnalysisService(settings, client=client)
        yield
        log.info("Shutdown")

    app = FastAPI(title="Text Scanner File Analysis", version="0.1.0", lifespan=lifespan)
    install_error_handlers(app)
    app.include_router(analysis_router)

    @app.get("/health")
    async def health(request: Request) -> JSONResponse:
        """Health check; also reports whether the storage service answers."""
        service: AnalysisService = request.app.state.analysis_service
        storage_ok = await service.client.is_healthy()
        return JSONResponse(
            content={
                "status": "ok",
                "service": SERVICE_NAME,
                "storage": "ok" if storage_ok else "error",
            }
        )

    return app


app = create_app()
