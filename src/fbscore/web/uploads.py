"""
Image uploads for profile pictures, team logos and post images.

Only JPEG and PNG files are accepted, and both the file extension and the
declared MIME type must agree. Depending on ``upload_storage`` the image is
written under ``upload_dir/<kind>/`` (served at /uploads) or stored inline
as a base64 data URI.
"""

from __future__ import annotations

import base64
import logging
import time
from pathlib import Path
from typing import Optional

from fastapi import UploadFile

from fbscore.config import Settings, settings as default_settings
from fbscore.errors import ValidationFailed

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".jpeg", ".jpg", ".png"}
ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/jpg", "image/png"}

KIND_PROFILE = "profile"
KIND_TEAM_LOGO = "teamlogo"
KIND_POST = "post"


def validate_image(filename: str, content_type: Optional[str]) -> str:
    """Return the lower-cased extension, or raise if this is not an allowed image."""
    extension = Path(filename).suffix.lower()
    if extension not in ALLOWED_EXTENSIONS or (content_type or "").lower() not in ALLOWED_CONTENT_TYPES:
        raise ValidationFailed("Images only!")
    return extension


def save_image(
    data: bytes,
    extension: str,
    content_type: str,
    kind: str,
    config: Optional[Settings] = None,
) -> str:
    """
    Persist image bytes and return the stored reference.

    Disk storage returns a path relative to upload_dir ("post/1700000000000.png");
    inline storage returns a data URI.
    """
    config = config or default_settings
    if len(data) > config.upload_max_bytes:
        raise ValidationFailed("File too large")

    if config.upload_storage == "inline":
        encoded = base64.b64encode(data).decode("ascii")
        return f"data:{content_type.lower()};base64,{encoded}"

    target_dir = Path(config.upload_dir) / kind
    target_dir.mkdir(parents=True, exist_ok=True)
    name = f"{int(time.time() * 1000)}{extension}"
    target = target_dir / name
    # Two uploads in the same millisecond get a numeric suffix
    counter = 1
    while target.exists():
        name = f"{int(time.time() * 1000)}-{counter}{extension}"
        target = target_dir / name
        counter += 1
    target.write_bytes(data)
    logger.debug("Saved %d byte upload to %s", len(data), target)
    return f"{kind}/{name}"


async def store_upload(
    upload: Optional[UploadFile],
    kind: str,
    config: Optional[Settings] = None,
) -> Optional[str]:
    """Validate and store an optional multipart image. Returns None if absent."""
    if upload is None or not upload.filename:
        return None
    extension = validate_image(upload.filename, upload.content_type)
    config = config or default_settings
    # Read one byte past the limit so oversized files are detected without
    # loading them whole
    data = await upload.read(config.upload_max_bytes + 1)
    return save_image(data, extension, upload.content_type, kind, config)
