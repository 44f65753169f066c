"""
Local file storage for uploaded media.
Supports images, videos, audio clips and PDFs.
"""
import os
import uuid
from pathlib import Path
from typing import Optional

import config
from utils.logger import setup_api_logger

logger = setup_api_logger()

FILES_URL_PREFIX = "/api/v1/media/files"

ALLOWED_TYPES = {
    "image/jpeg": "image",
    "image/jpg": "image",
    "image/png": "image",
    "image/gif": "image",
    "image/webp": "image",
    "video/mp4": "video",
    "video/quicktime": "video",
    "video/webm": "video",
    "audio/mpeg": "audio",
    "audio/wav": "audio",
    "audio/ogg": "audio",
    "application/pdf": "document",
}

EXTENSION_TYPES = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "webp": "image/webp",
    "mp4": "video/mp4",
    "mov": "video/quicktime",
    "webm": "video/webm",
    "mp3": "audio/mpeg",
    "wav": "audio/wav",
    "ogg": "audio/ogg",
    "pdf": "application/pdf",
}


class UnsupportedMediaType(ValueError):
    pass


def media_root() -> Path:
    root = Path(config.UPLOAD_DIR) / "media"
    root.mkdir(parents=True, exist_ok=True)
    return root


def max_upload_bytes() -> int:
    return int(config.MAX_UPLOAD_MB * 1024 * 1024)


def resolve_content_type(content_type: Optional[str], filename: Optional[str]) -> str:
    """Content type of an upload, falling back to the file extension."""
    if content_type in ALLOWED_TYPES:
        return content_type
    if filename and "." in filename:
        guessed = EXTENSION_TYPES.get(filename.lower().rsplit(".", 1)[-1])
        if guessed and (not content_type or content_type == "application/octet-stream"):
            return guessed
    raise UnsupportedMediaType(
        f"File type not allowed: {content_type or 'unknown'}. "
        "Allowed: images (jpg, png, gif, webp), videos (mp4, mov, webm), audio (mp3, wav, ogg) and PDFs."
    )


def media_type_for(content_type: str) -> str:
    return ALLOWED_TYPES[content_type]


def file_url(filename: str) -> str:
    return f"{FILES_URL_PREFIX}/{filename}"


def save_bytes(content: bytes, original_filename: Optional[str]) -> str:
    """Store `content` under a fresh unique name and return that name."""
    ext = Path(original_filename or "").suffix.lower() or ".bin"
    filename = f"{uuid.uuid4()}{ext}"
    with open(media_root() / filename, "wb") as buffer:
        buffer.write(content)
    logger.info("Stored upload %s (%d bytes)", filename, len(content))
    return filename


def file_path(filename: str) -> Optional[Path]:
    """Path of a stored file, or None when missing or outside the media root."""
    root = media_root().resolve()
    path = (root / filename).resolve()
    if path.parent != root or not path.is_file():
        return None
    return path


def delete_file(filename: Optional[str]) -> bool:
    if not filename:
        return False
    path = file_path(filename)
    if path is None:
        return False
    os.remove(path)
    logger.info("Deleted stored file %s", filename)
    return True
