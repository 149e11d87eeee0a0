"""Cost projection endpoint.

POST /api/v1/costs/projection - Project monthly and yearly cost of a stack
"""

from __future__ import annotations

from fastapi import APIRouter
from pydantic import Field

from app.logging_config import get_logger
from services.cost_projection import calculate_cost_projection
from services.models import CamelModel, CostProjection, ProjectScale, StackItem

logger = get_logger(__name__)
router = APIRouter()


class CostProjectionRequest(CamelModel):
    """Stack and scale assumptions to price."""

    stack: list[StackItem] = Field(..., max_length=50)
    project_scale: ProjectScale


@router.post("/projection", response_model=CostProjection)
async def project_costs(request: CostProjectionRequest) -> CostProjection:
    """Project the cost of an arbitrary stack.

    Tools without a cost model are listed at zero cost with a note rather
    than rejected.
    """
    projection = calculate_cost_projection(request.stack, request.project_scale)
    logger.info(
        "cost_projection_served",
        tools=len(request.stack),
        confidence=projection.confidence,
    )
    return projection
