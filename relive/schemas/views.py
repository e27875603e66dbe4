from pydantic import BaseModel
from typing import List, Optional
import datetime as dt

from relive.schemas.memory import MemoryOut


class Pagination(BaseModel):
    page: int
    per_page: int
    total: int
    total_pages: int
    has_next: bool
    has_previous: bool


class MonthGroup(BaseModel):
    month: int
    month_name: str
    memories: List[MemoryOut]


class YearGroup(BaseModel):
    year: int
    months: List[MonthGroup]


class TimelineOut(BaseModel):
    groups: List[YearGroup]
    pagination: Pagination


class GalleryItem(BaseModel):
    media_id: int
    url: str
    type: str
    thumbnail_url: Optional[str] = None
    memory_id: int
    title: str
    mood: Optional[str] = None
    mood_label: Optional[str] = None
    color: Optional[str] = None
    tags: List[str] = []
    date: dt.date
    location: Optional[str] = None
    excerpt: str = ""


class GalleryOut(BaseModel):
    items: List[GalleryItem]
    pagination: Pagination


class OnThisDayOut(BaseModel):
    context: str
    memories: List[MemoryOut]


class MoodCount(BaseModel):
    emoji: str
    label: str
    color: str
    count: int


class MoodBreakdownOut(BaseModel):
    period: str
    moods: List[MoodCount]
    total: int
