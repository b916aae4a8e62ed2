# backend/routes/uploads.py

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from config.env import CLOUDINARY_UPLOAD_FOLDER, MAX_UPLOAD_BYTES
from utils.cloudinary import MediaHost, get_media_host

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/upload", tags=["Uploads"])


@router.get("")
async def upload_ready():
    return {"status": "ready", "method": "POST required"}


# =========================
# UPLOAD IMAGE
# =========================
@router.post("")
@router.post("/", include_in_schema=False)
async def upload_image(
    image: Optional[UploadFile] = File(None),
    file: Optional[UploadFile] = File(None),
    media_host: MediaHost = Depends(get_media_host),
):
    upload = image or file
    if upload is None or not upload.filename:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No file uploaded",
        )

    # validate file type
    if not upload.content_type or not upload.content_type.startswith("image/"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only image files are allowed",
        )

    size = upload.size
    if size is None:
        size = len(await upload.read())
    await upload.seek(0)

    if size > MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": "File upload error",
                "details": f"File too large (limit {MAX_UPLOAD_BYTES} bytes)",
            },
        )

    # upload to cloudinary
    try:
        url = await media_host.upload(upload.file, folder=CLOUDINARY_UPLOAD_FOLDER)
    except Exception as e:
        logger.exception("UPLOAD_ERROR filename=%s", upload.filename)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "Upload failed", "details": str(e) or type(e).__name__},
        )

    # DO NOT save anything in DB here
    # frontend will collect URLs and send them with the listing / profile
    return {"url": url}
