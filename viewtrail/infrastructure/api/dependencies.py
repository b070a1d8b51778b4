from __future__ import annotations

import json
from typing import Annotated

from fastapi import Depends, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from viewtrail.application.dtos.entry_dto import TrackViewRequest
from viewtrail.application.use_cases.upload_image import UploadImageUseCase
from viewtrail.config import Settings
from viewtrail.domain.services.store import EntryStore
from viewtrail.domain.services.tracking_service import TrackingService
from viewtrail.infrastructure.storage.upload_storage import LocalUploadStorage


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> EntryStore:
    # created once in the app lifespan, shared by every request
    return request.app.state.store


def get_upload_storage(settings: Annotated[Settings, Depends(get_settings)]) -> LocalUploadStorage:
    return LocalUploadStorage(settings.upload_dir)


def get_tracking_service(store: Annotated[EntryStore, Depends(get_store)]) -> TrackingService:
    return TrackingService(store=store)


def get_upload_use_case(
    storage: Annotated[LocalUploadStorage, Depends(get_upload_storage)],
    tracking: Annotated[TrackingService, Depends(get_tracking_service)],
) -> UploadImageUseCase:
    return UploadImageUseCase(storage=storage, tracking=tracking)


async def get_track_payload(request: Request) -> TrackViewRequest:
    """Parse the optional track body.

    Only ``application/json`` bodies are read; anything else (a ``text/plain``
    beacon, an empty POST) records the view with the header agent alone.
    """
    if "application/json" not in request.headers.get("content-type", ""):
        return TrackViewRequest()
    body = await request.body()
    if not body.strip():
        return TrackViewRequest()
    try:
        data = json.loads(body)
    except ValueError as exc:
        raise RequestValidationError(
            [{"type": "json_invalid", "loc": ("body",), "msg": f"JSON decode error: {exc}", "input": {}}]
        ) from exc
    if data is None:
        return TrackViewRequest()
    try:
        return TrackViewRequest.model_validate(data)
    except ValidationError as exc:
        raise RequestValidationError(exc.errors(include_url=False)) from exc
