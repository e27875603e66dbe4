from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session
from typing import Optional
import mimetypes

from relive.database import get_db
from relive.models.user import User
from relive.routers.auth import get_current_user_required
from relive.schemas.media import UploadOut
from relive.services import memory_service
from relive.services.media_service import build_media
from relive.services.stats_service import invalidate_stats
from relive.services.storage_service import save_upload, media_type_for, resolve_media_path
from relive.relive_logger import logger

router = APIRouter(prefix="/api/v1", tags=["Media"])


@router.post("/upload", response_model=UploadOut)
async def upload_file(
    file: UploadFile = File(...),
    memory_id: Optional[int] = Form(None),
    current_user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db)
):
    """
    Upload a photo, video or audio file.

    When ``memory_id`` is given the file is attached to that memory right away;
    otherwise only the stored URL is returned for the editor to embed.
    """
    memory = None
    if memory_id is not None:
        # 404 before anything is written for a memory the user does not own
        memory = memory_service.get_user_memory(db, current_user.id, memory_id)

    path, url = save_upload(file, current_user.id, memory_id)

    if memory is None:
        return {"success": True, "url": url, "path": path}

    media = build_media(memory.id, url, media_type_for(file.content_type))
    db.add(media)
    db.commit()
    db.refresh(media)
    await invalidate_stats(current_user.id)
    logger.info(f"Attached {media.type} {media.id} to memory {memory.id}")

    return {"success": True, "url": url, "path": path, "media": media}


@router.get("/media/{file_path:path}")
async def get_media_file(file_path: str):
    """Serve stored media files"""
    resolved = resolve_media_path(file_path)

    mime_type, _ = mimetypes.guess_type(str(resolved))
    if mime_type is None:
        mime_type = "application/octet-stream"

    return FileResponse(
        path=str(resolved),
        media_type=mime_type,
        filename=resolved.name,
        headers={"X-Content-Type-Options": "nosniff"}
    )
