"""
Foodbabes Backend: Stored Image Route
=======================================

What:  GET /files/{path}: serves images written by LocalImageStorage.
How:   The path is resolved under the storage root; anything outside it,
       or missing, is a 404. With the MinIO backend images are served by
       the bucket and this route always answers 404.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from foodbabes.dependencies import get_image_storage
from foodbabes.exceptions import NotFoundError
from foodbabes.schemas.common import ErrorResponse
from foodbabes.services.image_storage import ImageStorage
from foodbabes.services.local_storage import LocalImageStorage

router = APIRouter(tags=["Files"])


@router.get(
    "/files/{file_path:path}",
    responses={
        200: {"description": "Image file"},
        404: {"description": "File not found", "model": ErrorResponse},
    },
    summary="Serve an uploaded food image",
)
async def serve_file(
    file_path: str,
    storage: ImageStorage = Depends(get_image_storage),
) -> FileResponse:
    if not isinstance(storage, LocalImageStorage):
        raise NotFoundError(resource="Image", resource_id=file_path)

    path = storage.resolve_path(file_path)
    # Stored images are immutable: a new upload always gets a new name
    return FileResponse(
        path=str(path),
        headers={"Cache-Control": "public, max-age=86400"},
    )
