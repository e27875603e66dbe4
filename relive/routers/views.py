"""
Read-only endpoints backing the timeline, gallery and dashboard pages.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Literal, Optional
import datetime as dt

from relive.database import get_db
from relive.models.user import User
from relive.routers.auth import get_current_user_required
from relive.schemas.views import TimelineOut, GalleryOut, OnThisDayOut, MoodBreakdownOut
from relive.services import memory_service, timeline_service

router = APIRouter(prefix="/api/v1", tags=["Views"])


def _pagination(page: dict) -> dict:
    return {key: value for key, value in page.items() if key != "items"}


@router.get("/timeline", response_model=TimelineOut)
def timeline(
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
    tag: Optional[str] = Query(None),
    mood: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db)
):
    """Memories newest first, paginated, then grouped by year and month."""
    memories = memory_service.list_memories(db, current_user.id, tag=tag, mood=mood)
    paged = timeline_service.paginate(timeline_service.sort_by_date(memories), page, per_page)
    return {
        "groups": timeline_service.group_by_year_month(paged["items"]),
        "pagination": _pagination(paged),
    }


@router.get("/gallery", response_model=GalleryOut)
def gallery(
    page: int = Query(1, ge=1),
    per_page: int = Query(24, ge=1, le=100),
    type: Optional[Literal["image", "video"]] = Query(None),
    current_user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db)
):
    memories = memory_service.list_memories(db, current_user.id)
    paged = timeline_service.paginate(timeline_service.gallery_items(memories, type), page, per_page)
    return {"items": paged["items"], "pagination": _pagination(paged)}


@router.get("/dashboard/on-this-day", response_model=OnThisDayOut)
def on_this_day(
    current_user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db)
):
    memories = memory_service.list_memories(db, current_user.id)
    return timeline_service.on_this_day(memories, dt.date.today())


@router.get("/dashboard/moods", response_model=MoodBreakdownOut)
def moods(
    period: Literal["month", "year"] = Query("month"),
    current_user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db)
):
    memories = memory_service.list_memories(db, current_user.id)
    return timeline_service.mood_breakdown(memories, period, dt.date.today())
