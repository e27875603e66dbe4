"""
Memory persistence: ownership checks, tag resolution and media syncing.
"""
import logging
from typing import List, Optional, Iterable
import datetime as dt

from fastapi import HTTPException
from sqlalchemy import desc, func
from sqlalchemy.orm import Session, selectinload

from relive.models.memory import Memory
from relive.models.tag import Tag
from relive.schemas.memory import MemoryCreate, MemoryUpdate
from relive.services.media_service import extract_and_store_media, sanitize_html
from relive.services.timeline_service import filter_memories

logger = logging.getLogger(__name__)

MAX_TAG_LENGTH = 50


def clean_tag_names(names: Optional[Iterable[str]]) -> List[str]:
    """Trim names, drop blanks and repeats (case-insensitive), keep first spelling."""
    cleaned = []
    seen = set()
    for name in names or []:
        name = (name or "").strip()[:MAX_TAG_LENGTH]
        if not name or name.lower() in seen:
            continue
        seen.add(name.lower())
        cleaned.append(name)
    return cleaned


def find_tag(db: Session, user_id: int, name: str) -> Optional[Tag]:
    """Look up one of the user's tags by name, ignoring case."""
    return db.query(Tag).filter(
        Tag.user_id == user_id,
        func.lower(Tag.name) == name.strip().lower(),
    ).first()


def get_or_create_tags(db: Session, user_id: int, names: Optional[Iterable[str]]) -> List[Tag]:
    tags = []
    for name in clean_tag_names(names):
        tag = find_tag(db, user_id, name)
        if tag is None:
            tag = Tag(user_id=user_id, name=name)
            db.add(tag)
            db.flush()
        tags.append(tag)
    return tags


def _memory_query(db: Session, user_id: int):
    return db.query(Memory).options(
        selectinload(Memory.media),
        selectinload(Memory.tags),
    ).filter(Memory.user_id == user_id)


def list_memories(
    db: Session,
    user_id: int,
    tag: Optional[str] = None,
    mood: Optional[str] = None,
    query: Optional[str] = None,
    date_from: Optional[dt.date] = None,
    date_to: Optional[dt.date] = None,
) -> List[Memory]:
    """Newest-first memories of one user, narrowed by ``filter_memories``."""
    memories = _memory_query(db, user_id).order_by(
        desc(Memory.date), desc(Memory.created_at), desc(Memory.id)
    ).all()
    return filter_memories(
        memories, tag=tag, mood=mood, query=query, date_from=date_from, date_to=date_to,
    )


def get_user_memory(db: Session, user_id: int, memory_id: int) -> Memory:
    """Raises a 404 when the memory does not exist or belongs to someone else."""
    memory = _memory_query(db, user_id).filter(Memory.id == memory_id).first()
    if not memory:
        raise HTTPException(status_code=404, detail="Memory not found")
    return memory


def create_memory(db: Session, user_id: int, data: MemoryCreate) -> Memory:
    if not data.title or not data.title.strip() or not data.content or not data.date:
        raise HTTPException(status_code=400, detail="Missing required fields: title, content, date")

    memory = Memory(
        user_id=user_id,
        title=data.title.strip(),
        content=sanitize_html(data.content),
        date=data.date,
        location=data.location or None,
        mood=data.mood or None,
    )
    memory.tags = get_or_create_tags(db, user_id, data.tags)
    db.add(memory)
    db.flush()

    media_count = extract_and_store_media(db, memory, memory.content, update_mode=True)
    db.commit()
    db.refresh(memory)

    logger.info(f"Created memory {memory.id} for user {user_id} with {media_count} media items")
    return memory


def update_memory(db: Session, user_id: int, memory_id: int, data: MemoryUpdate) -> Memory:
    memory = get_user_memory(db, user_id, memory_id)
    updates = data.model_dump(exclude_unset=True)

    if "title" in updates:
        if not updates["title"] or not updates["title"].strip():
            raise HTTPException(status_code=400, detail="Title cannot be empty")
        memory.title = updates["title"].strip()
    if "content" in updates:
        if not updates["content"]:
            raise HTTPException(status_code=400, detail="Content cannot be empty")
        memory.content = sanitize_html(updates["content"])
    if "date" in updates:
        if updates["date"] is None:
            raise HTTPException(status_code=400, detail="Date cannot be empty")
        memory.date = updates["date"]
    if "location" in updates:
        memory.location = updates["location"] or None
    if "mood" in updates:
        memory.mood = updates["mood"] or None
    if "tags" in updates:
        memory.tags = get_or_create_tags(db, user_id, updates["tags"])

    memory.updated_at = dt.datetime.utcnow()
    db.flush()

    if "content" in updates:
        extract_and_store_media(db, memory, memory.content, update_mode=True)

    db.commit()
    db.refresh(memory)
    logger.info(f"Updated memory {memory.id} ({', '.join(sorted(updates)) or 'no fields'})")
    return memory


def delete_memory(db: Session, user_id: int, memory_id: int) -> None:
    memory = get_user_memory(db, user_id, memory_id)
    db.delete(memory)
    db.commit()
    logger.info(f"Deleted memory {memory_id} for user {user_id}")
