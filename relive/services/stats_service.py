"""
Dashboard statistics with per-user caching.
"""
import json
import logging
from datetime import datetime, timedelta
from typing import Dict

from redis.exceptions import RedisError
from sqlalchemy import func
from sqlalchemy.orm import Session

from relive.config import settings
from relive.models.media import Media
from relive.models.memory import Memory
from relive.utils.redis import cache_get, cache_set, cache_delete

logger = logging.getLogger(__name__)

STATS_KEY = "stats:user"
RECENT_DAYS = 7


def stats_cache_key(user_id: int) -> str:
    return f"{STATS_KEY}:{user_id}"


def compute_stats(db: Session, user_id: int) -> Dict:
    total_memories = db.query(func.count(Memory.id)).filter(Memory.user_id == user_id).scalar() or 0

    since = datetime.utcnow() - timedelta(days=RECENT_DAYS)
    recent_memories = db.query(func.count(Memory.id)).filter(
        Memory.user_id == user_id,
        Memory.created_at >= since,
    ).scalar() or 0

    total_photos = db.query(func.count(Media.id)).select_from(Media).join(Memory, Media.memory_id == Memory.id).filter(
        Memory.user_id == user_id,
        Media.type == "image",
    ).scalar() or 0

    mood_rows = db.query(Memory.mood, func.count(Memory.id)).filter(
        Memory.user_id == user_id,
        Memory.mood.isnot(None),
    ).group_by(Memory.mood).all()

    return {
        "total_memories": total_memories,
        "recent_memories": recent_memories,
        "total_photos": total_photos,
        "mood_distribution": {mood: count for mood, count in mood_rows},
    }


async def get_stats(db: Session, user_id: int) -> Dict:
    """
    Get dashboard stats for a user, served from cache when possible.

    Args:
        db: Database session
        user_id: Owner of the memories

    Returns:
        Dict with total_memories, recent_memories, total_photos and mood_distribution
    """
    cache_key = stats_cache_key(user_id)
    try:
        cached = await cache_get(cache_key)
        if cached:
            return json.loads(cached)
    except RedisError as e:
        logger.warning(f"Stats cache unavailable: {e}")
    except json.JSONDecodeError:
        logger.warning(f"Discarding corrupt stats cache entry {cache_key}")

    stats = compute_stats(db, user_id)

    try:
        await cache_set(cache_key, json.dumps(stats), ex=settings.STATS_CACHE_TTL)
    except RedisError as e:
        logger.warning(f"Could not cache stats for user {user_id}: {e}")

    return stats


async def invalidate_stats(user_id: int) -> None:
    try:
        await cache_delete(stats_cache_key(user_id))
    except RedisError as e:
        logger.warning(f"Could not invalidate stats for user {user_id}: {e}")
