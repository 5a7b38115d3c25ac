from typing import Optional
from aiocache import Cache, BaseCache
from school_backend.settings import settings

_cache: Optional[BaseCache] = None

def build_cache() -> BaseCache:
    # Without a configured redis host the process keeps its own memory cache
    if settings.REDIS_HOST:
        return Cache(
            Cache.REDIS,
            endpoint=settings.REDIS_HOST,
            port=settings.REDIS_PORT,
            password=settings.REDIS_PASSWORD if settings.REDIS_PASSWORD else None,
            pool_max_size=10,
            db=0
        )
    return Cache(Cache.MEMORY)

async def get_redis_client() -> BaseCache:
    global _cache
    if _cache is None:
        _cache = build_cache()
    return _cache

async def close_redis_client():
    global _cache
    if _cache is not None:
        await _cache.close()
        _cache = None
