"""
Product image upload to the asset host (unsigned preset).
"""

import mimetypes
import os
from typing import Optional

import httpx

from api.errors import ApiError
from utils import config
from utils.logger import get_logger

_logger = get_logger(__name__)


async def upload_image(
    path: str,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    """Upload a local image file and return its public `secure_url`."""
    if not os.path.isfile(path):
        raise ApiError(f"File not found: {path}")

    mime = mimetypes.guess_type(path)[0] or "image/jpeg"
    with open(path, "rb") as f:
        content = f.read()

    async with httpx.AsyncClient(timeout=config.API_TIMEOUT, transport=transport) as client:
        try:
            resp = await client.post(
                config.CLOUDINARY_UPLOAD_URL,
                data={"upload_preset": config.CLOUDINARY_UPLOAD_PRESET},
                files={"file": (os.path.basename(path), content, mime)},
            )
        except httpx.HTTPError as e:
            _logger.warning(f"Image upload failed: {e!r}")
            raise ApiError(str(e) or None) from e

    try:
        data = resp.json()
    except ValueError:
        data = {}

    url = data.get("secure_url") if isinstance(data, dict) else None
    if not url:
        raise ApiError(None, resp.status_code, data)
    _logger.info(f"Uploaded {os.path.basename(path)}")
    return url
