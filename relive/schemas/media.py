from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class MediaOut(BaseModel):
    id: int
    memory_id: int
    url: str
    type: str
    cloudinary_id: Optional[str] = None
    thumbnail_url: Optional[str] = None
    uploaded_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UploadOut(BaseModel):
    success: bool = True
    url: str
    path: str
    media: Optional[MediaOut] = None
