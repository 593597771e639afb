"""Photo uploads (cleaning evidence, vehicles, profile images)."""

import logging
import os
import uuid
from typing import BinaryIO

from botocore.exceptions import BotoCoreError, ClientError

from stowline.core.config import settings
from stowline.services import storage_client

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/webp": "webp",
    "image/heic": "heic",
}

UPLOAD_FOLDERS = {"cleaning", "vehicles", "profiles", "general"}


class UploadError(Exception):
    """Storage backend failed to accept the file."""


def validate_photo(content_type: str | None, file_size: int) -> None:
    """
    Raises:
        ValueError: unsupported type, empty file or too large
    """
    if content_type not in ALLOWED_IMAGE_TYPES:
        raise ValueError(f"Content type '{content_type}' not allowed")
    if file_size <= 0:
        raise ValueError("File is empty")
    if file_size > settings.UPLOAD_MAX_BYTES:
        max_mb = settings.UPLOAD_MAX_BYTES / (1024 * 1024)
        raise ValueError(f"File size exceeds {max_mb:.0f} MB limit")


def build_storage_key(folder: str, content_type: str) -> str:
    if folder not in UPLOAD_FOLDERS:
        raise ValueError(f"Unknown upload folder '{folder}'")
    return f"{folder}/{uuid.uuid4().hex}.{ALLOWED_IMAGE_TYPES[content_type]}"


def _local_path(storage_key: str) -> str:
    path = os.path.join(settings.LOCAL_STORAGE_PATH, storage_key)
    os.makedirs(os.path.dirname(path), exist_ok=True)
    return path


def store_photo(storage_key: str, file: BinaryIO, content_type: str) -> str:
    """
    Store to the configured backend and return the hosted URL.

    Raises:
        UploadError: backend failure
    """
    file.seek(0)
    if settings.STORAGE_BACKEND == "s3":
        s3 = storage_client.get_s3_client()
        try:
            s3.upload_fileobj(
                file,
                settings.S3_BUCKET,
                storage_key,
                ExtraArgs={"ContentType": content_type},
            )
        except (BotoCoreError, ClientError) as e:
            logger.error("S3 upload failed for %s: %s", storage_key, e)
            raise UploadError("Failed to upload file") from e
        return storage_client.public_url(storage_key)

    with open(_local_path(storage_key), "wb") as f:
        f.write(file.read())
    return f"{settings.LOCAL_STORAGE_BASE_URL.rstrip('/')}/{storage_key}"


def get_file_size(file: BinaryIO) -> int:
    """Size of a seekable stream without reading it into memory."""
    original = file.tell()
    try:
        file.seek(0, os.SEEK_END)
        return file.tell()
    finally:
        file.seek(original)
