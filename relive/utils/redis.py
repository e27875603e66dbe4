import os
import redis.asyncio as redis
from dotenv import load_dotenv

load_dotenv()

redis_client = redis.Redis(
    host=os.getenv("REDIS_HOST", "localhost"),
    port=int(os.getenv("REDIS_PORT", 6379)),
    db=int(os.getenv("REDIS_DB", 0)),
    username=os.getenv("REDIS_USERNAME"),
    password=os.getenv("REDIS_PASSWORD"),
    decode_responses=True,
)

async def cache_set(key: str, value: str, ex: int = None):
    return await redis_client.set(key, value, ex=ex)

async def cache_get(key: str):
    return await redis_client.get(key)

async def cache_delete(key: str):
    return await redis_client.delete(key)
