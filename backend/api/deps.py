"""Shared API dependencies.

Provides per-client rate limiting as injectable FastAPI dependencies.
"""

from __future__ import annotations

import hashlib

import redis.asyncio as aioredis
from fastapi import Depends, Request

from app.dependencies import generate_rate_limiter, get_redis
from app.logging_config import get_logger

logger = get_logger(__name__)


def _client_hash(request: Request) -> str:
    """Anonymized client identifier for rate limiting keys."""
    client_ip = request.client.host if request.client else "unknown"
    return hashlib.sha256(client_ip.encode()).hexdigest()[:16]


async def rate_limit_generate(
    request: Request,
    redis: aioredis.Redis = Depends(get_redis),
) -> None:
    """Apply per-IP rate limiting for the blueprint generation endpoint."""
    await generate_rate_limiter.check(_client_hash(request), redis)
