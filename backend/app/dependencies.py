"""Application-level dependencies.

Provides the Redis connection, the loaded tool catalog, and rate limiting
as FastAPI dependencies for injection into route handlers.
"""

from __future__ import annotations

import time
from typing import AsyncGenerator, Optional

import redis.asyncio as aioredis

from app.config import get_settings
from app.exceptions import RateLimitError
from app.logging_config import get_logger
from app.metrics import RATE_LIMIT_HITS
from services.models import ToolProfile
from services.tool_catalog import load_catalog

logger = get_logger(__name__)

# Global Redis connection pool
_redis_pool: Optional[aioredis.Redis] = None

# Tool catalog loaded once per process
_catalog: Optional[list[ToolProfile]] = None


async def init_redis() -> None:
    """Initialize Redis connection pool."""
    global _redis_pool
    settings = get_settings()
    _redis_pool = aioredis.from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
        max_connections=20,
    )
    # Test connection
    await _redis_pool.ping()


async def close_redis() -> None:
    """Close Redis connection pool."""
    global _redis_pool
    if _redis_pool:
        await _redis_pool.aclose()
        _redis_pool = None


async def get_redis() -> AsyncGenerator[aioredis.Redis, None]:
    """Get Redis connection as a FastAPI dependency."""
    if _redis_pool is None:
        raise RuntimeError("Redis not initialized. Call init_redis() first.")
    yield _redis_pool


def init_catalog() -> list[ToolProfile]:
    """Load the tool catalog from the configured path."""
    global _catalog
    _catalog = load_catalog(get_settings().catalog_path)
    return _catalog


def get_catalog() -> list[ToolProfile]:
    """Get the tool catalog as a FastAPI dependency, loading it on first use."""
    if _catalog is None:
        return init_catalog()
    return _catalog


class RateLimiter:
    """Redis-backed rate limiter using sliding window."""

    def __init__(
        self,
        key_prefix: str,
        max_requests: int,
        window_seconds: int,
    ) -> None:
        self.key_prefix = key_prefix
        self.max_requests = max_requests
        self.window_seconds = window_seconds

    async def check(self, identifier: str, redis: aioredis.Redis) -> None:
        """Check rate limit. Raises RateLimitError if exceeded."""
        key = f"ratelimit:{self.key_prefix}:{identifier}"
        now = time.time()
        window_start = now - self.window_seconds

        pipe = redis.pipeline()
        pipe.zremrangebyscore(key, 0, window_start)
        pipe.zadd(key, {str(now): now})
        pipe.zcard(key)
        pipe.expire(key, self.window_seconds)
        results = await pipe.execute()

        request_count = results[2]
        if request_count > self.max_requests:
            RATE_LIMIT_HITS.labels(
                endpoint=self.key_prefix, limit_type="sliding_window"
            ).inc()
            raise RateLimitError(
                limit_type=self.key_prefix,
                retry_after=self.window_seconds,
            )


generate_rate_limiter = RateLimiter(
    key_prefix="generate",
    max_requests=get_settings().rate_limit_generate_per_minute,
    window_seconds=60,
)
