"""
Screen routes - image upload by the operator and image serving to devices
"""

import posixpath

from fastapi import APIRouter, Depends, Request, Response

from trmnl_byos.dependencies import get_image_store
from trmnl_byos.image_store import MEDIA_TYPES, ImageStore
from trmnl_byos.models import ImageUploadResponse
from trmnl_byos.store import normalize_screen_id

router = APIRouter(tags=["Screens"])


@router.post("/api/screens/{screen_id}/image", response_model=ImageUploadResponse)
async def upload_image(
    screen_id: str,
    request: Request,
    image_store: ImageStore = Depends(get_image_store),
) -> ImageUploadResponse:
    """
    Upload the image for a screen.

    The raw request body is the image. Content-Type picks the stored
    format: image/png is stored as .png, any other image/* as .jpg.
    Uploading one format removes a previously stored file of the other.
    """
    content = await request.body()
    path = await image_store.store(
        screen_id, request.headers.get("content-type"), content
    )
    return ImageUploadResponse(id=normalize_screen_id(screen_id), path=path)


@router.get("/screens/{filename}")
async def get_screen_image(
    filename: str,
    image_store: ImageStore = Depends(get_image_store),
) -> Response:
    """
    Serve a stored screen image.

    /screens/{id}.jpg and /screens/{id}.png return only that file.
    /screens/{id} without an extension returns the jpg, or else the png.
    """
    stem, ext = posixpath.splitext(filename)
    extension = ext[1:].lower()
    if extension in MEDIA_TYPES:
        content, media_type = await image_store.serve(stem, extension)
    else:
        content, media_type = await image_store.serve(filename)

    return Response(content=content, media_type=media_type)
