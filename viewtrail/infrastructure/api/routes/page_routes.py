from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from viewtrail.config import Settings
from viewtrail.domain.errors import EntryNotFound
from viewtrail.infrastructure.api.dependencies import get_settings

router = APIRouter(tags=["Pages"])


@router.get(
    "/view/{image_id}",
    summary="View Page",
    description="Static page that loads the entry through the API and reports the view.",
    response_class=FileResponse,
)
def view_page(image_id: str, settings: Settings = Depends(get_settings)):
    # same page for every id; the page itself reads the id from the URL
    page = settings.public_dir / "view.html"
    if not page.is_file():
        raise EntryNotFound("View page not available")
    return FileResponse(page, media_type="text/html")
