"""
Multipart upload helpers: persist an incoming UploadFile to the temp
directory so it can be handed to the media uploader by path.
"""
import os
import tempfile

import aiofiles
from fastapi import UploadFile, status

from vidhub.config import settings
from vidhub.core.errors import ApiError
from vidhub.services.cloudinary import remove_local_file

CHUNK_SIZE = 64 * 1024  # 64KB chunks


def has_file(upload: UploadFile | None) -> bool:
    # Browsers send an empty part with filename="" when no file is chosen
    return upload is not None and bool(upload.filename)


async def save_upload_to_temp(upload: UploadFile | None) -> str | None:
    """
    Write the upload to UPLOAD_TEMP_DIR in chunks and return the local path
    (the caller hands it to the media uploader, which removes it). Returns
    None when no file was sent.

    Raises:
        ApiError (413): File exceeds MAX_UPLOAD_SIZE_MB; the partial file is removed
    """
    if not has_file(upload):
        return None

    os.makedirs(settings.upload_temp_dir, exist_ok=True)
    suffix = os.path.splitext(upload.filename)[1]
    fd, path = tempfile.mkstemp(suffix=suffix, dir=settings.upload_temp_dir)
    os.close(fd)

    max_bytes = settings.max_upload_size_mb * 1024 * 1024
    total_size = 0
    try:
        async with aiofiles.open(path, "wb") as f:
            while True:
                chunk = await upload.read(CHUNK_SIZE)
                if not chunk:
                    break
                total_size += len(chunk)
                if total_size > max_bytes:
                    raise ApiError(
                        status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                        f"File too large. Maximum size: {settings.max_upload_size_mb}MB",
                    )
                await f.write(chunk)
    except BaseException:
        remove_local_file(path)
        raise

    return path
