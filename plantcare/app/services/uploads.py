"""Image upload storage with a fixed size ceiling."""
from __future__ import annotations

import logging
import mimetypes
import uuid
from pathlib import Path
from typing import Optional

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from ..config import Settings
from ..errors import UnsupportedUploadError, UploadTooLargeError

logger = logging.getLogger(__name__)

UPLOAD_URL_PREFIX = "/uploads"
CHUNK_SIZE = 64 * 1024
ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}


def _extension(filename: Optional[str], content_type: str) -> str:
    suffix = Path(filename or "").suffix.lower()
    if suffix in ALLOWED_EXTENSIONS:
        return suffix
    return mimetypes.guess_extension(content_type) or ""


def _write(directory: Path, name: str, data: bytes) -> None:
    directory.mkdir(parents=True, exist_ok=True)
    (directory / name).write_bytes(data)


async def store_image(upload: UploadFile, settings: Settings) -> str:
    """
    Validate and persist an uploaded image, returning its public URL.

    The size ceiling is enforced while reading, so an oversized upload is
    rejected before anything is written to disk.
    """
    content_type = upload.content_type or ""
    if not content_type.startswith("image/"):
        raise UnsupportedUploadError()

    data = bytearray()
    while True:
        chunk = await upload.read(CHUNK_SIZE)
        if not chunk:
            break
        data.extend(chunk)
        if len(data) > settings.max_upload_bytes:
            logger.warning("Rejected upload %r: over %d bytes", upload.filename, settings.max_upload_bytes)
            raise UploadTooLargeError(f"Uploaded file exceeds {settings.max_upload_bytes} bytes")

    name = uuid.uuid4().hex + _extension(upload.filename, content_type)
    await run_in_threadpool(_write, Path(settings.upload_dir), name, bytes(data))
    logger.info("Stored upload %s (%d bytes)", name, len(data))
    return f"{UPLOAD_URL_PREFIX}/{name}"


def discard_image(image_url: str, settings: Settings) -> None:
    """Remove a stored upload by its public URL; missing files are ignored."""
    name = image_url.rsplit("/", 1)[-1]
    path = Path(settings.upload_dir) / name
    path.unlink(missing_ok=True)
    logger.info("Discarded upload %s", name)
