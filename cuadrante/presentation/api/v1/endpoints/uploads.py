"""Image upload endpoint — stores the file and returns its URL."""

import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from cuadrante.application.schemas import UploadResponse
from cuadrante.config import get_settings
from cuadrante.infrastructure.dependencies import get_file_storage
from cuadrante.infrastructure.storage.local_file_storage import LocalFileStorage

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Uploads"])


@router.post("/upload", response_model=UploadResponse)
async def upload_image(
    image: UploadFile | None = File(None),
    storage: LocalFileStorage = Depends(get_file_storage),
) -> UploadResponse:
    """Accept one file in the ``image`` form field."""
    if image is None or not image.filename:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded"
        )

    content = await image.read()
    if not content:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Uploaded file is empty"
        )

    settings = get_settings()
    if len(content) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"File exceeds {settings.max_upload_size_mb} MB limit",
        )

    stored = await storage.store_file(content, image.filename)
    return UploadResponse(image_url=stored.url)
