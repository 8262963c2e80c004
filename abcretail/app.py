"""
Application factory for the ABC Retail storage console.

Author: ABC Retail Platform Team
Date: 2025
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import Response

from . import __version__
from .core.config_manager import AppConfig, ConfigManager
from .core.middleware import CorrelationMiddleware, register_exception_handlers
from .core.templating import render_template
from .services.blob.api import router as blob_router
from .services.files.api import router as files_router
from .services.queue.api import router as queue_router
from .services.storage import StorageService
from .services.table.api import router as table_router

logger = logging.getLogger(__name__)


def create_app(
    config: Optional[AppConfig] = None,
    storage: Optional[StorageService] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Application configuration; loaded from the file named by
            ABCRETAIL_CONFIG and the environment when omitted
        storage: Pre-built storage service; built from config at startup
            and closed at shutdown when omitted

    Returns:
        Configured FastAPI application with all section routers.
    """
    if config is None:
        config = ConfigManager().load(config_file=os.getenv("ABCRETAIL_CONFIG"))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = app.state.storage is None
        if owned:
            app.state.storage = StorageService.from_config(config)
        try:
            yield
        finally:
            if owned:
                await app.state.storage.close()
                app.state.storage = None

    app = FastAPI(
        title="ABC Retail Storage Console",
        description="Customer profiles, product images, contracts and order events on Azure Storage",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.storage = storage

    app.add_middleware(CorrelationMiddleware)
    register_exception_handlers(app)

    app.include_router(table_router)
    app.include_router(blob_router)
    app.include_router(files_router)
    app.include_router(queue_router)

    @app.get("/", name="home", include_in_schema=False)
    async def home(request: Request) -> Response:
        """Landing page linking the four sections."""
        return render_template(request, "home.html", nav_active="home", storage=config.azure_storage)

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "version": __version__,
            "resources": {
                "table": config.azure_storage.table_name,
                "blob_container": config.azure_storage.blob_container,
                "file_share": config.azure_storage.file_share,
                "queue": config.azure_storage.queue_name,
            },
        }

    return app
