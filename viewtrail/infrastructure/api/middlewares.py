from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.cors import CORSMiddleware

from viewtrail.domain.errors import DuplicateId, EntryNotFound, StoreUnavailable, TrackingError

logger = logging.getLogger(__name__)


def add_default_middlewares(app: FastAPI) -> None:
    # Tracking links are opened from anywhere, so every origin is allowed.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )


async def tracking_error_handler(request: Request, exc: TrackingError) -> JSONResponse:
    if isinstance(exc, StoreUnavailable):
        logger.error("Store unavailable during %s %s", request.method, request.url.path, exc_info=exc)
    elif isinstance(exc, DuplicateId):
        logger.error("Id generation collided repeatedly: %s", exc.message)
    elif not isinstance(exc, EntryNotFound):
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


def add_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TrackingError, tracking_error_handler)
