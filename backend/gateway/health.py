"""Health monitoring.

Provides readiness checks for application dependencies:
Redis and the tool catalog.
"""

from __future__ import annotations

from typing import Any

import redis.asyncio as aioredis

from app.dependencies import get_catalog
from app.exceptions import CatalogError
from app.logging_config import get_logger
from services.models import ToolProfile

logger = get_logger(__name__)


class HealthMonitor:
    """Monitors health of all application components."""

    def __init__(self, redis: aioredis.Redis, catalog: list[ToolProfile] | None) -> None:
        self.redis = redis
        self.catalog = catalog

    async def check_all(self) -> dict[str, Any]:
        """Run all health checks and return status."""
        redis_ok = await self._check_redis()
        catalog_size = self._check_catalog()
        catalog_ok = catalog_size > 0

        return {
            "status": "healthy" if redis_ok and catalog_ok else "degraded",
            "checks": {
                "redis": {"status": "ok" if redis_ok else "error"},
                "catalog": {"status": "ok" if catalog_ok else "error", "tools": catalog_size},
            },
        }

    async def _check_redis(self) -> bool:
        """Check Redis connectivity."""
        try:
            await self.redis.ping()
            return True
        except Exception:
            logger.error("health_check_redis_failed")
            return False

    def _check_catalog(self) -> int:
        """Number of tools available to the recommender."""
        if not self.catalog:
            logger.error("health_check_catalog_empty")
            return 0
        return len(self.catalog)


async def readiness_catalog() -> list[ToolProfile] | None:
    """Catalog dependency for readiness checks that reports instead of raising."""
    try:
        return get_catalog()
    except CatalogError as e:
        logger.error("health_check_catalog_failed", error=e.message)
        return None
