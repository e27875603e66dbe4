from pydantic import BaseModel
from typing import Dict


class Stats(BaseModel):
    total_memories: int = 0
    recent_memories: int = 0
    total_photos: int = 0
    mood_distribution: Dict[str, int] = {}


class StatsOut(BaseModel):
    stats: Stats
