import logging
import os
import time

from fastapi import UploadFile

from app.core.config import settings
from app.core.errors import AppError


logger = logging.getLogger(__name__)


def ensure_image(upload: UploadFile) -> None:
    if not (upload.content_type or "").startswith("image"):
        raise AppError(400, "BAD_REQUEST", "Not an image! Please upload only images.", {"content_type": upload.content_type})


def save_user_image(content: bytes, user_id: int) -> str:
    """Store profile image bytes and return their path relative to the public dir."""
    relative = f"images/users/user-{user_id}-{int(time.time() * 1000)}.jpeg"
    target = os.path.join(settings.public_dir, relative)
    os.makedirs(os.path.dirname(target), exist_ok=True)
    with open(target, "wb") as fh:
        fh.write(content)
    logger.info("Saved profile image for user_id=%s at %s", user_id, relative)
    return relative
