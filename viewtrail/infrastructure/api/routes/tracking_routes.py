from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status

from viewtrail.application.dtos.common_dto import ErrorResponse
from viewtrail.application.dtos.entry_dto import (
    ImageEntryModel,
    TrackViewRequest,
    TrackViewResponse,
    UploadResponse,
)
from viewtrail.application.use_cases.upload_image import UploadImageUseCase
from viewtrail.domain.errors import EntryNotFound
from viewtrail.domain.services.tracking_service import TrackingService
from viewtrail.infrastructure.api.dependencies import (
    get_track_payload,
    get_tracking_service,
    get_upload_use_case,
)

router = APIRouter(
    prefix="/api",
    tags=["Tracking"],
    responses={
        503: {"model": ErrorResponse, "description": "Store Unavailable - the backing store cannot be read or written"},
    },
)


@router.post(
    "/upload",
    response_model=UploadResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload Image",
    description="""
    Upload an image and receive a shareable tracking link.

    The file is stored as-is; no format checks or processing are applied.
    `senderName` is optional and defaults to `Anonymous`.
    """,
    responses={400: {"model": ErrorResponse, "description": "Bad Request - no image file in the form"}},
)
def upload_image(
    image: UploadFile | None = File(None, description="Image file to share"),
    sender_name: str | None = Form(None, alias="senderName", description="Name shown to the recipient"),
    uc: UploadImageUseCase = Depends(get_upload_use_case),
):
    """Store the upload and create a tracked entry."""
    stream = image.file if image is not None else None
    filename = image.filename if image is not None else None
    result = uc.execute(stream, filename, sender_name=sender_name)
    return UploadResponse(id=result.id, link=result.link)


@router.post(
    "/track/{image_id}",
    response_model=TrackViewResponse,
    summary="Track View",
    description="""
    Record one open of a tracking link.

    Geolocation is optional and stored unvalidated. When `userAgent` is not
    given, the request's `User-Agent` header is recorded instead. Bodies
    that are not `application/json` are ignored, as `sendBeacon` posts
    `text/plain`.
    """,
    responses={404: {"model": ErrorResponse, "description": "Not Found - unknown image id"}},
    # the body is parsed by get_track_payload, so document its schema here
    openapi_extra={
        "requestBody": {
            "required": False,
            "content": {"application/json": {"schema": TrackViewRequest.model_json_schema()}},
        }
    },
)
def track_view(
    image_id: str,
    request: Request,
    payload: TrackViewRequest = Depends(get_track_payload),
    tracking: TrackingService = Depends(get_tracking_service),
):
    """Append a view record to the entry."""
    found = tracking.handle_track_view(
        image_id,
        latitude=payload.latitude,
        longitude=payload.longitude,
        user_agent=payload.user_agent,
        fallback_user_agent=request.headers.get("user-agent"),
    )
    if not found:
        raise EntryNotFound("Image not found")
    return TrackViewResponse(success=True)


@router.get(
    "/image/{image_id}",
    response_model=ImageEntryModel,
    summary="Get Image Entry",
    description="Metadata and full view history of one entry, used by the view page.",
    responses={404: {"model": ErrorResponse, "description": "Not Found - unknown image id"}},
)
def get_image(image_id: str, tracking: TrackingService = Depends(get_tracking_service)):
    entry = tracking.get_entry(image_id)
    if entry is None:
        raise EntryNotFound("Not found")
    return ImageEntryModel.from_entity(entry)


@router.get(
    "/images",
    response_model=list[ImageEntryModel],
    summary="List All Entries",
    description="""
    Every entry with its view history, for the admin dashboard.

    The whole collection is returned on each call; there is no paging.
    """,
)
def list_images(tracking: TrackingService = Depends(get_tracking_service)):
    return [ImageEntryModel.from_entity(entry) for entry in tracking.list_all()]
