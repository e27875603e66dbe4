from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional
import datetime as dt

from relive.database import get_db
from relive.models.user import User
from relive.routers.auth import get_current_user_required
from relive.schemas.memory import MemoryCreate, MemoryUpdate, MemoryList, MemoryDetail, MemoryCreated
from relive.services import memory_service
from relive.services.stats_service import invalidate_stats

router = APIRouter(prefix="/api/v1/memories", tags=["Memories"])


@router.get("/", response_model=MemoryList)
def list_memories(
    tag: Optional[str] = Query(None, description="Only memories with this tag"),
    mood: Optional[str] = Query(None, description="Only memories with this mood emoji"),
    q: Optional[str] = Query(None, description="Search title, content and location"),
    date_from: Optional[dt.date] = Query(None),
    date_to: Optional[dt.date] = Query(None),
    current_user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db)
):
    """List the current user's memories, newest first, with media and tag names."""
    memories = memory_service.list_memories(
        db, current_user.id, tag=tag, mood=mood, query=q, date_from=date_from, date_to=date_to
    )
    return {"memories": memories}


@router.post("/", response_model=MemoryCreated, status_code=status.HTTP_201_CREATED)
async def create_memory(
    memory: MemoryCreate,
    current_user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db)
):
    """
    Create a memory.

    Tags are created on first use. Images, videos and audio embedded in the
    content are recorded as media of the memory.
    """
    created = memory_service.create_memory(db, current_user.id, memory)
    await invalidate_stats(current_user.id)
    return {"success": True, "memory": created}


@router.get("/{memory_id}", response_model=MemoryDetail)
def get_memory(
    memory_id: int,
    current_user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db)
):
    return {"memory": memory_service.get_user_memory(db, current_user.id, memory_id)}


@router.put("/{memory_id}", response_model=MemoryDetail)
async def update_memory(
    memory_id: int,
    updates: MemoryUpdate,
    current_user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db)
):
    """Update the given fields. Saving new content replaces the memory's media list."""
    memory = memory_service.update_memory(db, current_user.id, memory_id, updates)
    await invalidate_stats(current_user.id)
    return {"memory": memory}


@router.delete("/{memory_id}")
async def delete_memory(
    memory_id: int,
    current_user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db)
):
    memory_service.delete_memory(db, current_user.id, memory_id)
    await invalidate_stats(current_user.id)
    return {"message": "Memory deleted successfully"}
