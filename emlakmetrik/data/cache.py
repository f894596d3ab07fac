"""Redis cache for async lookups that return pydantic models.

A cache failure never fails the lookup: reads fall through to the wrapped
call and writes are dropped, both with a warning.
"""

import functools
import hashlib
import logging
from typing import Any, Awaitable, Callable, TypeVar

import redis.asyncio as redis
from pydantic import BaseModel

from emlakmetrik.config import settings

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

_redis_client: redis.Redis | None = None


async def get_redis() -> redis.Redis:
    global _redis_client
    if _redis_client is None:
        _redis_client = redis.from_url(settings.redis_url, decode_responses=True)
    return _redis_client


def cache_key(prefix: str, *parts: Any) -> str:
    """emlakmetrik:<prefix>:<digest of the positional parts>. None and "" hash alike."""
    joined = "|".join("" if p is None else str(p) for p in parts)
    digest = hashlib.sha256(joined.encode()).hexdigest()[:16]
    return f"emlakmetrik:{prefix}:{digest}"


async def _read(key: str, model: type[M]) -> M | None:
    try:
        r = await get_redis()
        raw = await r.get(key)
    except Exception as e:
        logger.warning("Cache read failed for %s: %s", key, e)
        return None
    if raw is None:
        return None
    logger.debug("Cache hit: %s", key)
    return model.model_validate_json(raw)


async def _write(key: str, value: BaseModel, ttl_seconds: int) -> None:
    try:
        r = await get_redis()
        await r.setex(key, ttl_seconds, value.model_dump_json())
    except Exception as e:
        logger.warning("Cache write failed for %s: %s", key, e)


def cached(prefix: str, model: type[M], ttl_seconds: int | None = None):
    """Cache an async method's `model` result, keyed on its positional arguments.

    An exception from the method propagates and nothing is written.

    Args:
        prefix: Cache key prefix (e.g., "regional:defaults")
        model: Pydantic model the cached JSON is validated back into
        ttl_seconds: Time-to-live; defaults to settings.regional_cache_ttl_seconds
    """
    def decorator(method: Callable[..., Awaitable[M]]) -> Callable[..., Awaitable[M]]:
        @functools.wraps(method)
        async def wrapper(self, *args: Any) -> M:
            if not settings.cache_enabled:
                return await method(self, *args)

            key = cache_key(prefix, *args)
            hit = await _read(key, model)
            if hit is not None:
                return hit

            result = await method(self, *args)
            await _write(key, result, ttl_seconds or settings.regional_cache_ttl_seconds)
            return result
        return wrapper
    return decorator
