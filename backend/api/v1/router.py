"""API v1 router aggregation.

Combines all v1 route modules into a single router.
"""

from __future__ import annotations

from fastapi import APIRouter

from api.v1.routes.blueprints import router as blueprints_router
from api.v1.routes.costs import router as costs_router
from api.v1.routes.tools import router as tools_router

api_v1_router = APIRouter()

api_v1_router.include_router(blueprints_router, prefix="/blueprints", tags=["Blueprints"])
api_v1_router.include_router(costs_router, prefix="/costs", tags=["Cost Projection"])
api_v1_router.include_router(tools_router, prefix="/tools", tags=["Tool Catalog"])
