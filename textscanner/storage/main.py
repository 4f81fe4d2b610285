"""FastAPI application entry point for the file-storing service."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from textscanner.api import install_error_handlers
from textscanner.config import Settings, get_settings
from textscanner.log import setup_logging
from textscanner.storage.routes import router as files_router
from textscanner.storage.service import FileService

log = logging.getLogger(__name__)

SERVICE_NAME = "file-storing-service"


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the storage app. Settings are read from the environment unless given."""
    settings = settings or get_settings()
    setup_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Load file metadata on startup; release the store on shutdown."""
        log.info("Startup: loading file metadata")
        service = FileService(settings)
        await service.start()
        app.state.file_service = service
        log.info("Startup complete")
        yield
        await service.stop()
        log.info("Shutdown")

    app = FastAPI(title="Text Scanner File Storage", version="0.1.0", lifespan=lifespan)
    install_error_handlers(app)
    app.include_router(files_router)

    @app.get("/health")
    def health() -> JSONResponse:
        """Health check."""
        return JSONResponse(content={"status": "ok", "service": SERVICE_NAME})

    return app


app = create_app()
