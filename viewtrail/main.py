from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from viewtrail.application.dtos.common_dto import HealthResponse, RootResponse
from viewtrail.config import Settings, configure_logging
from viewtrail.infrastructure.api.middlewares import add_default_middlewares, add_exception_handlers
from viewtrail.infrastructure.api.routes.page_routes import router as page_router
from viewtrail.infrastructure.api.routes.tracking_routes import router as tracking_router
from viewtrail.infrastructure.database.factory import build_store

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    app.state.store = build_store(settings)
    logger.info("viewtrail started (env=%s, store=%s)", settings.env, settings.store_backend)
    try:
        yield
    finally:
        app.state.store.close()
        logger.info("viewtrail stopped")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)
    # StaticFiles checks its directory when mounted, so create them up front
    settings.upload_dir.mkdir(parents=True, exist_ok=True)
    settings.data_dir.mkdir(parents=True, exist_ok=True)

    app = FastAPI(
        title="viewtrail",
        version="0.1.0",
        description="""
        ## viewtrail API

        Share an image through a tracking link and see when, where and with
        which browser the link was opened.

        ### Flow
        - **Upload**: `POST /api/upload` stores the image and returns `/view/{id}`
        - **Track**: the view page calls `POST /api/track/{id}` when opened
        - **Inspect**: `GET /api/image/{id}` and `GET /api/images` return entries with their views

        ### Error Responses
        Errors use the body `{"error": "..."}`:
        - **400 Bad Request**: No image file in the upload form
        - **404 Not Found**: Unknown image id
        - **422 Unprocessable Entity**: Malformed request body
        - **503 Service Unavailable**: The backing store cannot be read or written
        """,
        lifespan=lifespan,
    )
    app.state.settings = settings
    add_default_middlewares(app)
    add_exception_handlers(app)

    @app.get(
        "/health",
        response_model=HealthResponse,
        summary="Health Check",
        description="Check if the API service is running",
    )
    def health():
        return {"status": "healthy"}

    @app.get(
        "/api",
        response_model=RootResponse,
        summary="API Root",
        description="Basic information about the viewtrail API",
    )
    def root():
        return {"status": "ok", "service": "viewtrail", "version": app.version}

    app.include_router(tracking_router)
    app.include_router(page_router)
    app.mount("/uploads", StaticFiles(directory=str(settings.upload_dir)), name="uploads")
    # front-end assets last: the mount at "/" catches every remaining path
    if settings.public_dir.is_dir():
        app.mount("/", StaticFiles(directory=str(settings.public_dir), html=True), name="public")
    else:
        logger.warning("Public asset directory %s not found; front-end pages disabled", settings.public_dir)
    return app


app = create_app()
