"""
Snapgram Backend — Uploaded Image Route
=========================================

GET /uploads/{path} serves stored post images read-only. Paths come from a
post's `image_url`; anything resolving outside the storage root is refused.
No auth, so the URLs can be used directly in <img> tags.
"""

from fastapi import APIRouter
from fastapi.responses import FileResponse

from app.exceptions import NotFoundError
from app.services.file_service import file_service

router = APIRouter(tags=["Files"])


@router.get("/uploads/{file_path:path}", response_class=FileResponse, summary="Serve a stored image")
async def get_upload(file_path: str) -> FileResponse:
    full_path = file_service.resolve(file_path)
    if not full_path.is_file():
        raise NotFoundError(resource="file", resource_id=file_path)
    return FileResponse(full_path)
