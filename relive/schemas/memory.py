from pydantic import BaseModel, field_validator
from typing import Optional, List
import datetime as dt

from relive.schemas.media import MediaOut


class MemoryCreate(BaseModel):
    # Optional so missing fields are reported with a 400, not a validation 422
    title: Optional[str] = None
    content: Optional[str] = None
    date: Optional[dt.date] = None
    location: Optional[str] = None
    mood: Optional[str] = None
    tags: Optional[List[str]] = None


class MemoryUpdate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    date: Optional[dt.date] = None
    location: Optional[str] = None
    mood: Optional[str] = None
    tags: Optional[List[str]] = None


class MemoryOut(BaseModel):
    id: int
    user_id: int
    title: str
    content: str
    date: dt.date
    location: Optional[str] = None
    mood: Optional[str] = None
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None
    media: List[MediaOut] = []
    tags: List[str] = []

    @field_validator("tags", mode="before")
    @classmethod
    def tag_names(cls, value):
        return [getattr(tag, "name", tag) for tag in value or []]

    class Config:
        from_attributes = True


class MemoryList(BaseModel):
    memories: List[MemoryOut]


class MemoryDetail(BaseModel):
    memory: MemoryOut


class MemoryCreated(BaseModel):
    success: bool = True
    memory: MemoryOut
