"""Tool catalog endpoint.

GET /api/v1/tools - List catalog tools, optionally by category
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from app.dependencies import get_catalog
from services.models import ToolCategory, ToolProfile

router = APIRouter()


class ToolListResponse(BaseModel):
    tools: list[ToolProfile]
    total: int


@router.get("", response_model=ToolListResponse)
async def list_tools(
    category: ToolCategory | None = Query(None, description="Filter by category"),
    catalog: list[ToolProfile] = Depends(get_catalog),
) -> ToolListResponse:
    """List the tools the recommender chooses from."""
    tools = [t for t in catalog if category is None or t.category == category.value]
    return ToolListResponse(tools=tools, total=len(tools))
