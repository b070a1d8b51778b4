from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from viewtrail.domain.entities.entry import ImageEntry, ViewRecord


class ViewRecordModel(BaseModel):
    """One recorded open of a tracking link."""
    model_config = ConfigDict(populate_by_name=True)

    timestamp: datetime = Field(..., description="UTC time the view was recorded")
    latitude: float | None = Field(None, description="Client supplied latitude", example=1.5)
    longitude: float | None = Field(None, description="Client supplied longitude", example=2.5)
    user_agent: str | None = Field(None, alias="userAgent", description="Client agent string")

    @classmethod
    def from_entity(cls, view: ViewRecord) -> ViewRecordModel:
        return cls(
            timestamp=view.timestamp,
            latitude=view.latitude,
            longitude=view.longitude,
            user_agent=view.user_agent,
        )


class ImageEntryModel(BaseModel):
    """Uploaded image metadata together with its view history."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Public identifier used in tracking links", example="3f2b9c0e5d7a4e1b9a8c6d5e4f3a2b1c")
    filename: str = Field(..., description="Stored file name inside /uploads", example="9d1c0b4e.png")
    original_name: str = Field(..., alias="originalName", description="File name as uploaded", example="photo.png")
    sender_name: str = Field(..., alias="senderName", description="Sender name or 'Anonymous'", example="Alice")
    uploaded_at: datetime = Field(..., alias="uploadedAt", description="UTC upload time")
    file_size: int | None = Field(None, alias="fileSize", description="Size of the uploaded file in bytes", ge=0)
    views: list[ViewRecordModel] = Field(default_factory=list, description="Views in the order they were recorded")

    @classmethod
    def from_entity(cls, entry: ImageEntry) -> ImageEntryModel:
        return cls(
            id=entry.id,
            filename=entry.stored_file_name,
            original_name=entry.original_file_name,
            sender_name=entry.sender_name,
            uploaded_at=entry.uploaded_at,
            file_size=entry.file_size,
            views=[ViewRecordModel.from_entity(v) for v in entry.views],
        )


class UploadResponse(BaseModel):
    """Response model for a successful upload."""
    message: str = Field("Upload successful", description="Human readable status")
    id: str = Field(..., description="Identifier of the new entry")
    link: str = Field(..., description="Relative tracking link", example="/view/3f2b9c0e5d7a4e1b9a8c6d5e4f3a2b1c")


class TrackViewRequest(BaseModel):
    """Optional client data sent when a tracking link is opened."""
    # JSON has no Infinity or NaN, so they could not be stored
    model_config = ConfigDict(populate_by_name=True, allow_inf_nan=False)

    latitude: float | None = Field(None, description="Latitude reported by the browser")
    longitude: float | None = Field(None, description="Longitude reported by the browser")
    user_agent: str | None = Field(None, alias="userAgent", description="Overrides the User-Agent header")


class TrackViewResponse(BaseModel):
    success: bool = Field(True, description="True once the view is stored")
