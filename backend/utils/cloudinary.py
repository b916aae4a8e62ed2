import asyncio
import logging
import re
from abc import ABC, abstractmethod
from urllib.parse import unquote, urlparse

import cloudinary
import cloudinary.uploader

from config.constants import CLOUDINARY_PATH_MARKER
from config.env import (
    CLOUDINARY_CLOUD_NAME,
    CLOUDINARY_API_KEY,
    CLOUDINARY_API_SECRET,
    MEDIA_TIMEOUT_SECONDS,
)

logger = logging.getLogger(__name__)

VERSION_SEGMENT = re.compile(r"^v\d+$")

cloudinary.config(
    cloud_name=CLOUDINARY_CLOUD_NAME,
    api_key=CLOUDINARY_API_KEY,
    api_secret=CLOUDINARY_API_SECRET,
    secure=True,
)


# =========================
# MEDIA HOST
# =========================

class MediaHost(ABC):
    """Stores uploaded bytes and deletes them again by public id."""

    @abstractmethod
    async def upload(self, file, folder: str) -> str:
        """Store `file` and return its public URL"""

    @abstractmethod
    async def destroy(self, public_id: str) -> dict:
        """Delete the object behind `public_id`"""


class CloudinaryMediaHost(MediaHost):

    def __init__(self, timeout: float = MEDIA_TIMEOUT_SECONDS):
        self.timeout = timeout

    async def upload(self, file, folder: str) -> str:
        result = await asyncio.wait_for(
            asyncio.to_thread(
                cloudinary.uploader.upload,
                file,
                folder=folder,
                resource_type="auto",
            ),
            timeout=self.timeout,
        )

        url = result.get("secure_url")
        if not url:
            raise RuntimeError("Cloudinary returned no secure_url")
        return url

    async def destroy(self, public_id: str) -> dict:
        return await asyncio.wait_for(
            asyncio.to_thread(
                cloudinary.uploader.destroy,
                public_id,
                invalidate=True,
            ),
            timeout=self.timeout,
        )


_media_host: MediaHost | None = None


def get_media_host() -> MediaHost:
    global _media_host
    if _media_host is None:
        _media_host = CloudinaryMediaHost()
    return _media_host


# =========================
# URL -> PUBLIC ID
# =========================

def public_id_from_url(url: str | None) -> str | None:
    """
    Best-effort inverse of a Cloudinary delivery URL.

    .../image/upload/c_fill,w_300/v1712345678/buymesho/abc123.jpg
    -> buymesho/abc123

    Transformation segments (anything with a comma) and the version
    segment are skipped. URLs without the /upload/ marker give None.
    """
    if not url or not isinstance(url, str):
        return None

    path = urlparse(url.strip()).path
    marker = path.find(CLOUDINARY_PATH_MARKER)
    if marker == -1:
        return None

    segments = [s for s in path[marker + len(CLOUDINARY_PATH_MARKER):].split("/") if s]

    while segments and "," in segments[0]:
        segments.pop(0)

    if segments and VERSION_SEGMENT.match(segments[0]):
        segments.pop(0)

    if not segments:
        return None

    stem, dot, _ext = segments[-1].rpartition(".")
    if dot and stem:
        segments[-1] = stem

    return unquote("/".join(segments))


def collect_public_ids(urls) -> list[str]:
    """Unique public ids for `urls`, in first-seen order."""
    public_ids = (public_id_from_url(url) for url in urls)
    return list(dict.fromkeys(pid for pid in public_ids if pid))


async def destroy_many(media_host: MediaHost, public_ids: list[str]) -> list[dict]:
    """
    Delete every id concurrently. Never raises: each outcome is
    returned as {"public_id", "ok", "result" | "error"}.
    """

    async def _destroy(public_id: str) -> dict:
        try:
            result = await media_host.destroy(public_id)
        except asyncio.TimeoutError:
            logger.warning("MEDIA_DELETE_TIMEOUT public_id=%s", public_id)
            return {"public_id": public_id, "ok": False, "error": "timed out"}
        except Exception as e:
            logger.warning("MEDIA_DELETE_ERROR public_id=%s error=%s", public_id, e)
            return {"public_id": public_id, "ok": False, "error": str(e) or type(e).__name__}

        outcome = (result or {}).get("result") if isinstance(result, dict) else result
        return {"public_id": public_id, "ok": outcome in ("ok", "not found"), "result": outcome}

    return list(await asyncio.gather(*(_destroy(pid) for pid in public_ids)))
