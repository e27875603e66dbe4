from pydantic import BaseModel
from typing import List, Optional


class TagCreate(BaseModel):
    name: Optional[str] = None


class TagOut(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class TagList(BaseModel):
    tags: List[TagOut]


class TagCreated(BaseModel):
    tag: TagOut
