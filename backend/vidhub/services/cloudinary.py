import os
import time
import hashlib
import logging

import httpx

from vidhub.config import settings

logger = logging.getLogger("uvicorn.error")


def _sign(params: dict, api_secret: str) -> str:
    """
    Cloudinary request signature: SHA-1 over the alphabetically sorted
    ``key=value`` pairs joined by ``&``, followed by the API secret.
    """
    to_sign = "&".join(f"{k}={params[k]}" for k in sorted(params))
    return hashlib.sha1(f"{to_sign}{api_secret}".encode("utf-8")).hexdigest()


def remove_local_file(path: str) -> None:
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning("[cloudinary] could not remove temp file %s: %s", path, e)


async def upload_on_cloudinary(
    local_file_path: str | None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict | None:
    """
    Upload a local file to Cloudinary (resource type auto-detected).

    Parameters:
    - local_file_path: File written by the request handler; removed after the
      upload attempt whatever the outcome
    - transport: Optional httpx transport (tests inject a MockTransport)

    Returns the Cloudinary upload result (contains ``url`` and ``secure_url``),
    or None when there is nothing to upload or the upload fails.

    Configuration source: vidhub.config.settings
    - cloudinary_cloud_name / cloudinary_api_key / cloudinary_api_secret
    - cloudinary_api_base: API base URL
    """
    if not local_file_path:
        return None

    try:
        if not (settings.cloudinary_cloud_name and settings.cloudinary_api_key and settings.cloudinary_api_secret):
            logger.error("[cloudinary] CLOUDINARY_* credentials are missing")
            return None

        url = f"{settings.cloudinary_api_base}/{settings.cloudinary_cloud_name}/auto/upload"
        params = {"timestamp": str(int(time.time()))}
        data = {
            **params,
            "api_key": settings.cloudinary_api_key,
            "signature": _sign(params, settings.cloudinary_api_secret),
        }

        with open(local_file_path, "rb") as fh:
            files = {"file": (os.path.basename(local_file_path), fh.read())}

        async with httpx.AsyncClient(timeout=settings.upload_timeout_seconds, transport=transport) as client:
            resp = await client.post(url, data=data, files=files)
            resp.raise_for_status()
            result = resp.json()

        if not isinstance(result, dict) or not result.get("url"):
            logger.error("[cloudinary] unexpected upload reply for %s: %r", local_file_path, result)
            return None

        logger.info("[cloudinary] uploaded %s -> %s", local_file_path, result.get("url"))
        return result
    except (httpx.HTTPError, OSError, ValueError, TypeError, AttributeError) as e:
        logger.error("[cloudinary] upload failed for %s: %s", local_file_path, e)
        return None
    finally:
        remove_local_file(local_file_path)
