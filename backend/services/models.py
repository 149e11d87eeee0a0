"""Domain models for stack recommendation and cost projection.

Catalog records keep the snake_case keys used by the tool database.
Everything the service produces serializes with camelCase keys
(``recommendedStack``, ``totalMonthlyMin``) and accepts either spelling
on input.
"""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Complexity = Literal["simple", "medium", "complex"]
ProjectType = Literal["web-app", "mobile-app", "api", "dashboard"]
ScalingLevel = Literal["low", "medium", "high"]
DatabaseKind = Literal["relational", "nosql", "vector"]
Traffic = Literal["low", "medium", "high"]
Timeline = Literal["prototype", "mvp", "production"]
Confidence = Literal["low", "medium", "high"]


class ToolCategory(str, Enum):
    """Fixed set of catalog categories."""

    FRONTEND = "frontend"
    BACKEND = "backend"
    DATABASE = "database"
    API = "api"
    TESTING = "testing"
    DEPLOYMENT = "deployment"
    MONITORING = "monitoring"
    ANALYTICS = "analytics"
    SECURITY = "security"
    DEVOPS = "devops"
    MOBILE = "mobile"
    DESKTOP = "desktop"
    AI_ML = "ai_ml"
    BLOCKCHAIN = "blockchain"
    IOT = "iot"
    GAME_DEVELOPMENT = "game_development"
    DATA_SCIENCE = "data_science"
    DESIGN = "design"
    PRODUCTIVITY = "productivity"


class CamelModel(BaseModel):
    """Base for records exchanged with API clients."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Catalog ---


class SkillCost(BaseModel):
    """Effort a tool demands, 1 (trivial) to 10 (expert)."""

    setup: int
    daily: int


class ConflictRule(BaseModel):
    """Declared incompatibility with categories already in a stack."""

    kind: str
    targets: list[str] = Field(default_factory=list)
    reason: str | None = None


class CostModel(BaseModel):
    """Structured pricing for cost projection.

    ``type`` is one of Free, Subscription, Pay-as-you-go or Custom. It is
    kept as a plain string so unknown pricing types degrade to a zero-cost
    line instead of rejecting the whole stack.
    """

    type: str
    base_cost_monthly: float = 0.0
    unit_cost: float | None = None
    unit_type: str | None = None
    free_tier_details: str | None = None
    link: str | None = None


class ToolProfile(BaseModel):
    """A tool catalog entry."""

    model_config = ConfigDict(use_enum_values=True, populate_by_name=True)

    id: str = Field(..., min_length=1)
    name: str
    category: ToolCategory
    skills: SkillCost
    pricing_model: str = "free"
    baseline_cost: float = 0.0
    cost_per_unit: float | None = None
    unit_type: str | None = None
    community_sentiment: str = "neutral"
    popularity_score: float = 0.0
    compatible_with: list[str] = Field(default_factory=list)
    rules: list[ConflictRule] = Field(default_factory=list)
    cost_model: CostModel | None = Field(None, alias="costModel")


class ScoredTool(ToolProfile):
    """Catalog entry with its compatibility score for one request."""

    compatibility_score: int = 0
    raw_score: float = 0.0


# --- Analysis ---


class SkillProfile(CamelModel):
    """Caller's effort tolerance on the same scale as ``SkillCost``."""

    setup: int
    daily: int


class ProjectAnalysis(CamelModel):
    """Structured requirements derived from a project description."""

    project_type: ProjectType = "web-app"
    complexity: Complexity = "simple"
    features: list[str] = Field(default_factory=list)
    scaling_requirements: ScalingLevel = "low"
    real_time_needs: bool = False
    auth_needs: bool = False
    ai_ml_needs: bool = False
    database_needs: DatabaseKind = "relational"


class ProjectScale(CamelModel):
    """Size and maturity assumptions used for cost projection."""

    complexity: Complexity = "simple"
    expected_users: int = 100
    expected_traffic: Traffic = "low"
    features: list[str] = Field(default_factory=list)
    timeline: Timeline = "mvp"


# --- Recommendation ---


class StackEntry(CamelModel):
    """One selected tool in a recommended stack."""

    name: str
    category: str
    reason: str
    compatibility_score: int


class StackWarning(CamelModel):
    type: str
    message: str


class LegacyCostItem(CamelModel):
    tool: str
    cost: float


class LegacyCostEstimate(CamelModel):
    """Baseline-cost range kept for older clients."""

    min: float
    max: float
    breakdown: list[LegacyCostItem] = Field(default_factory=list)


# --- Cost projection ---


class StackItem(CamelModel):
    """A tool as seen by the cost projector."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    name: str
    category: str
    cost_model: CostModel | None = None


class CostBreakdown(CamelModel):
    tool_name: str
    category: str
    cost_type: str
    monthly_min: float
    monthly_max: float
    monthly_estimate: float
    notes: str


class ScalingFactors(CamelModel):
    development: float = 1.0
    production: float = 1.0
    scale: float = 1.0


class ScalingEstimate(CamelModel):
    """Projected monthly spend at a given user count."""

    user_count: int
    monthly_cost: float
    yearly_cost: float
    bottlenecks: list[str] = Field(default_factory=list)
    optimization_suggestions: list[str] = Field(default_factory=list)


class CostProjection(CamelModel):
    total_monthly_min: float
    total_monthly_max: float
    total_monthly_estimate: float
    total_yearly_min: float
    total_yearly_max: float
    total_yearly_estimate: float
    breakdown: list[CostBreakdown] = Field(default_factory=list)
    scaling_factors: ScalingFactors
    confidence: Confidence
    notes: list[str] = Field(default_factory=list)
    scaling_estimates: list[ScalingEstimate] = Field(default_factory=list)


class Recommendation(CamelModel):
    """Complete answer to a stack recommendation request."""

    summary: str
    recommended_stack: list[StackEntry] = Field(default_factory=list)
    warnings: list[StackWarning] = Field(default_factory=list)
    project_prompt: str
    estimated_cost: LegacyCostEstimate
    cost_projection: CostProjection
