"""Blueprint endpoints.

POST /api/v1/blueprints/generate - Recommend a stack and project its cost
POST /api/v1/blueprints/analyze  - Classify a project description
"""

from __future__ import annotations

import hashlib
import json

import redis.asyncio as aioredis
from fastapi import APIRouter, Depends, Response
from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from api.deps import rate_limit_generate
from app.config import get_settings
from app.dependencies import get_catalog, get_redis
from app.logging_config import get_logger
from app.metrics import RECOMMENDATION_CACHE_HITS, RECOMMENDATION_CACHE_MISSES
from services.models import (
    CamelModel,
    ProjectAnalysis,
    ProjectScale,
    Recommendation,
    SkillProfile,
    ToolProfile,
)
from services.project_analyzer import analyze_project, analyze_project_scale
from services.stack_recommender import generate_recommendation

logger = get_logger(__name__)
router = APIRouter()


class RequestModel(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class SkillProfileInput(RequestModel):
    """Self-reported effort tolerance, 0 (none) to 10 (expert)."""

    setup: int = Field(..., ge=0, le=10)
    daily: int = Field(..., ge=0, le=10)

    def to_profile(self) -> SkillProfile:
        return SkillProfile(setup=self.setup, daily=self.daily)


class GenerateRequest(RequestModel):
    """Stack recommendation request."""

    project_idea: str = Field(..., min_length=1, max_length=2000)
    skill_profile: SkillProfileInput
    preferred_tool_ids: list[str] = Field(default_factory=list, max_length=20)


class AnalyzeRequest(RequestModel):
    """Project classification request."""

    project_idea: str = Field(..., max_length=2000)
    skill_profile: SkillProfileInput | None = None


class AnalyzeResponse(CamelModel):
    analysis: ProjectAnalysis
    project_scale: ProjectScale | None = None


def _cache_key(request: GenerateRequest, catalog: list[ToolProfile]) -> str:
    """Key covering every input that influences the recommendation."""
    catalog_digest = hashlib.sha256()
    for tool in catalog:
        catalog_digest.update(tool.model_dump_json().encode())

    payload = json.dumps(
        {
            "request": request.model_dump(),
            "catalog": catalog_digest.hexdigest(),
        },
        sort_keys=True,
    )
    return f"recommendation:{hashlib.sha256(payload.encode()).hexdigest()}"


@router.post("/generate", response_model=Recommendation)
async def generate_blueprint(
    request: GenerateRequest,
    response: Response,
    redis: aioredis.Redis = Depends(get_redis),
    catalog: list[ToolProfile] = Depends(get_catalog),
    _rate_limit: None = Depends(rate_limit_generate),
) -> Recommendation:
    """Recommend a technology stack for a project idea.

    Analyzes the description, scores the catalog against the skill
    profile, selects one tool per category (preferred tools first) and
    attaches a cost projection.

    Results are deterministic for a given request and catalog, so they
    are cached in Redis (TTL: 24 h by default).
    """
    settings = get_settings()

    cache_key = _cache_key(request, catalog)
    cached = await redis.get(cache_key)
    if cached:
        RECOMMENDATION_CACHE_HITS.inc()
        logger.info("recommendation_cache_hit")
        response.headers["X-Cache"] = "HIT"
        return Recommendation.model_validate_json(cached)

    RECOMMENDATION_CACHE_MISSES.inc()
    recommendation = generate_recommendation(
        request.project_idea,
        request.skill_profile.to_profile(),
        request.preferred_tool_ids,
        catalog,
    )

    await redis.setex(
        cache_key,
        settings.recommendation_cache_ttl,
        recommendation.model_dump_json(by_alias=True),
    )

    response.headers["X-Cache"] = "MISS"
    return recommendation


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze_blueprint(request: AnalyzeRequest) -> AnalyzeResponse:
    """Classify a project description.

    The project scale used for cost projection is included when a skill
    profile is supplied, since the timeline depends on it.
    """
    analysis = analyze_project(request.project_idea)
    project_scale = None
    if request.skill_profile is not None:
        project_scale = analyze_project_scale(
            request.project_idea, request.skill_profile.to_profile()
        )

    return AnalyzeResponse(analysis=analysis, project_scale=project_scale)
