"""
Local file storage for memory media.

Files land in ``UPLOAD_DIR/<user_id>/<memory_id or "temp">/`` and are served
back through the media route under ``MEDIA_BASE_URL``.
"""
import logging
import mimetypes
import time
import uuid
from pathlib import Path
from typing import Optional, Tuple

from fastapi import HTTPException, UploadFile

from relive.config import settings
from relive.models.media import MEDIA_TYPES

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024
ALLOWED_EXTENSIONS = {
    "image": {"jpg", "jpeg", "png", "gif", "webp", "heic", "heif", "avif"},
    "video": {"mp4", "webm", "mov", "m4v", "ogv"},
    "audio": {"mp3", "m4a", "wav", "ogg", "oga", "webm", "aac", "flac"},
}


def get_upload_dir() -> Path:
    upload_dir = Path(settings.UPLOAD_DIR)
    upload_dir.mkdir(parents=True, exist_ok=True)
    return upload_dir


def media_type_for(content_type: Optional[str]) -> Optional[str]:
    """Map a MIME type to a Media.type value, or None for anything that is not image, video or audio."""
    family = (content_type or "").split("/", 1)[0].strip().lower()
    return family if family in MEDIA_TYPES else None


def _extension(filename: Optional[str], content_type: str) -> Optional[str]:
    if filename and "." in filename:
        return filename.rsplit(".", 1)[-1].lower()
    guessed = mimetypes.guess_extension(content_type)
    return guessed.lstrip(".") if guessed else None


def public_url(relative_path: str) -> str:
    return f"{settings.MEDIA_BASE_URL.rstrip('/')}/{relative_path}"


def save_upload(file: UploadFile, user_id: int, memory_id: Optional[int] = None) -> Tuple[str, str]:
    """
    Store an uploaded file and return ``(relative_path, public_url)``.

    The stored extension must belong to the declared MIME family, so a file
    is always served back with an image, video or audio content type.

    Raises:
        HTTPException: 400 for unsupported content types or extensions, or files over MAX_UPLOAD_SIZE
    """
    media_type = media_type_for(file.content_type)
    if media_type is None:
        raise HTTPException(status_code=400, detail="File must be an image, video or audio file")

    extension = _extension(file.filename, file.content_type)
    if extension not in ALLOWED_EXTENSIONS[media_type]:
        logger.warning(f"Rejected upload {file.filename!r} declared as {file.content_type}")
        raise HTTPException(status_code=400, detail=f"File extension is not allowed for {media_type} uploads")

    filename = f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:7]}.{extension}"
    relative_path = f"{user_id}/{memory_id or 'temp'}/{filename}"
    file_path = get_upload_dir() / relative_path
    file_path.parent.mkdir(parents=True, exist_ok=True)

    written = 0
    with open(file_path, "wb") as buffer:
        while True:
            chunk = file.file.read(CHUNK_SIZE)
            if not chunk:
                break
            written += len(chunk)
            if written > settings.MAX_UPLOAD_SIZE:
                break
            buffer.write(chunk)

    if written > settings.MAX_UPLOAD_SIZE:
        file_path.unlink()
        raise HTTPException(status_code=400, detail="File is too large")

    logger.info(f"Stored upload {relative_path} ({written} bytes)")
    return relative_path, public_url(relative_path)


def resolve_media_path(relative_path: str) -> Path:
    """
    Resolve a stored file path, refusing anything outside the upload directory.

    Raises:
        HTTPException: 403 on traversal, 404 when the file does not exist
    """
    upload_dir = get_upload_dir().resolve()
    file_path = (upload_dir / relative_path).resolve()
    try:
        file_path.relative_to(upload_dir)
    except ValueError:
        raise HTTPException(status_code=403, detail="Access denied")

    if not file_path.exists() or not file_path.is_file():
        raise HTTPException(status_code=404, detail="File not found")
    return file_path
