"""Cost Projection Engine.

Calculates monthly and yearly cost ranges for a technology stack given
the project scale, plus per-user-count scaling estimates.

Totals apply a different scaling factor to each bound:

- min:      sum of per-tool minimums * development factor
- max:      sum of per-tool maximums * production factor * scale factor
- estimate: sum of per-tool estimates * mean(development, production)

The three figures describe different scenarios (cheap development phase,
worst-case production, typical run rate) and nothing enforces
min <= estimate <= max. The ordering currently holds only because no
development factor exceeds the smallest production factor.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from typing import Any

from app.logging_config import get_logger
from app.metrics import COST_CONFIDENCE, COST_PROJECTION_DURATION
from services.models import (
    CostBreakdown,
    CostProjection,
    ProjectScale,
    ScalingEstimate,
    ScalingFactors,
    StackItem,
)

logger = get_logger(__name__)

FREE = "Free"
SUBSCRIPTION = "Subscription"
PAY_AS_YOU_GO = "Pay-as-you-go"
CUSTOM = "Custom"
VARIABLE_COST_TYPES = {PAY_AS_YOU_GO, CUSTOM}

# Placeholder range for tools priced by quote
CUSTOM_MONTHLY_MIN = 0.0
CUSTOM_MONTHLY_MAX = 500.0
CUSTOM_MONTHLY_ESTIMATE = 100.0

# Heavy usage is modelled as three times the typical usage cost
PEAK_USAGE_FACTOR = 3

# Usage units per month for pay-as-you-go pricing (API calls, GB, events...)
USAGE_BASE_MULTIPLIERS: dict[str, float] = {
    "AI/ML API": 1000,
    "Database": 100,
    "CDN": 1000,
    "Cloud Storage": 10,
    "Analytics": 10000,
    "Email Service": 1000,
    "SMS Service": 100,
    "Search Service": 1000,
    # Catalog category ids
    "ai_ml": 1000,
    "database": 100,
    "analytics": 10000,
}
DEFAULT_USAGE_MULTIPLIER = 100

USAGE_COMPLEXITY_FACTOR = {"complex": 2.0, "medium": 1.5}
USAGE_TRAFFIC_FACTOR = {"high": 3.0, "medium": 1.5}

DEVELOPMENT_FACTOR = {"prototype": 0.5, "mvp": 0.8}
PRODUCTION_FACTOR = {"simple": 1.0, "medium": 1.5, "complex": 2.0}
SCALE_TRAFFIC_FACTOR = {"high": 1.5, "medium": 1.2}

SCALING_USER_POINTS = (1, 10, 100, 1000, 10000)

NO_COST_INFO = "Cost information not available"


def round_currency(value: float) -> float:
    """Round half-up to cents."""
    return math.floor(value * 100 + 0.5) / 100


def get_usage_multiplier(category: str, scale: ProjectScale) -> float:
    """Expected monthly usage units for a pay-as-you-go tool."""
    multiplier = USAGE_BASE_MULTIPLIERS.get(category, DEFAULT_USAGE_MULTIPLIER)
    multiplier *= USAGE_COMPLEXITY_FACTOR.get(scale.complexity, 1.0)
    multiplier *= USAGE_TRAFFIC_FACTOR.get(scale.expected_traffic, 1.0)
    return multiplier


def calculate_tool_cost(item: StackItem, scale: ProjectScale) -> CostBreakdown:
    """Monthly cost range for a single tool."""
    cost_model = item.cost_model
    if cost_model is None:
        return CostBreakdown(
            tool_name=item.name,
            category=item.category,
            cost_type="Unknown",
            monthly_min=0.0,
            monthly_max=0.0,
            monthly_estimate=0.0,
            notes=NO_COST_INFO,
        )

    base = cost_model.base_cost_monthly
    if cost_model.type == FREE:
        monthly_min = monthly_max = monthly_estimate = 0.0
        notes = "Free and open source"
    elif cost_model.type == SUBSCRIPTION:
        monthly_min = monthly_max = monthly_estimate = base
        notes = (
            "Has free tier available"
            if cost_model.free_tier_details
            else "Paid subscription required"
        )
    elif cost_model.type == PAY_AS_YOU_GO:
        usage_cost = (cost_model.unit_cost or 0.0) * get_usage_multiplier(item.category, scale)
        monthly_min = base
        monthly_estimate = base + usage_cost
        monthly_max = base + usage_cost * PEAK_USAGE_FACTOR
        notes = "Variable cost based on usage"
    elif cost_model.type == CUSTOM:
        monthly_min = CUSTOM_MONTHLY_MIN
        monthly_max = CUSTOM_MONTHLY_MAX
        monthly_estimate = CUSTOM_MONTHLY_ESTIMATE
        notes = "Contact sales for pricing"
    else:
        logger.warning("unknown_cost_model_type", tool=item.name, cost_type=cost_model.type)
        monthly_min = monthly_max = monthly_estimate = 0.0
        notes = NO_COST_INFO

    return CostBreakdown(
        tool_name=item.name,
        category=item.category,
        cost_type=cost_model.type,
        monthly_min=round_currency(monthly_min),
        monthly_max=round_currency(monthly_max),
        monthly_estimate=round_currency(monthly_estimate),
        notes=notes,
    )


def calculate_scaling_factors(scale: ProjectScale) -> ScalingFactors:
    """Multipliers for development phase, production complexity and audience size."""
    if scale.expected_users > 10000:
        audience = 2.0
    elif scale.expected_users > 1000:
        audience = 1.5
    else:
        audience = 1.0

    return ScalingFactors(
        development=DEVELOPMENT_FACTOR.get(scale.timeline, 1.0),
        production=PRODUCTION_FACTOR.get(scale.complexity, 1.0),
        scale=audience * SCALE_TRAFFIC_FACTOR.get(scale.expected_traffic, 1.0),
    )


def determine_confidence(breakdown: list[CostBreakdown], scale: ProjectScale) -> str:
    """How much to trust the projection given variable pricing and project risk."""
    has_variable_costs = any(item.cost_type in VARIABLE_COST_TYPES for item in breakdown)
    is_complex = scale.complexity == "complex"
    is_high_traffic = scale.expected_traffic == "high"

    if has_variable_costs and (is_complex or is_high_traffic):
        return "low"
    if has_variable_costs or is_complex:
        return "medium"
    return "high"


def estimate_scaling(breakdown: list[CostBreakdown], user_count: int) -> ScalingEstimate:
    """Project monthly spend at a user count with sublinear growth.

    Per-tool estimates grow with the square root of the audience; data
    and backend tiers get extra headroom once they become bottlenecks.
    """
    monthly = 0.0
    bottlenecks: list[str] = []
    optimizations: list[str] = []

    for item in breakdown:
        item_cost = item.monthly_estimate
        if user_count > 1:
            item_cost *= math.sqrt(user_count)

        category = item.category.lower()
        if user_count > 1000 and category == "database":
            bottlenecks.append("Database may require sharding or clustering")
            item_cost *= 1.5
        if user_count > 10000 and category == "backend":
            bottlenecks.append("Backend may require microservices architecture")
            item_cost *= 2

        monthly += item_cost

    if user_count > 100:
        optimizations.append("Consider CDN for static assets")
        optimizations.append("Implement caching strategy")
    if user_count > 1000:
        optimizations.append("Consider database read replicas")
        optimizations.append("Implement auto-scaling")

    return ScalingEstimate(
        user_count=user_count,
        monthly_cost=round_currency(monthly),
        yearly_cost=round_currency(monthly * 12),
        bottlenecks=list(dict.fromkeys(bottlenecks)),
        optimization_suggestions=optimizations,
    )


def _as_stack_item(tool: StackItem | Mapping[str, Any]) -> StackItem:
    if isinstance(tool, StackItem):
        return tool
    return StackItem.model_validate(tool)


@COST_PROJECTION_DURATION.time()
def calculate_cost_projection(
    stack: Iterable[StackItem | Mapping[str, Any]],
    scale: ProjectScale,
) -> CostProjection:
    """Project the monthly and yearly cost of a stack.

    Args:
        stack: Tools with name, category and an optional cost model. Plain
            dicts using ``costModel`` or ``cost_model`` keys are accepted.
        scale: Project scale assumptions.

    Returns:
        Cost projection with per-tool breakdown, totals and caveats.
    """
    breakdown = [calculate_tool_cost(_as_stack_item(tool), scale) for tool in stack]

    total_min = sum(item.monthly_min for item in breakdown)
    total_max = sum(item.monthly_max for item in breakdown)
    total_estimate = sum(item.monthly_estimate for item in breakdown)
    has_uncertainty = any(
        "Variable" in item.notes or "Contact" in item.notes for item in breakdown
    )

    factors = calculate_scaling_factors(scale)
    scaled_min = round_currency(total_min * factors.development)
    scaled_max = round_currency(total_max * factors.production * factors.scale)
    scaled_estimate = round_currency(
        total_estimate * (factors.development + factors.production) / 2
    )

    notes: list[str] = []
    if scale.complexity == "complex":
        notes.append("Complex projects may require additional tools or higher tiers")
    if scale.expected_traffic == "high":
        notes.append("High traffic may increase usage-based costs significantly")
    if has_uncertainty:
        notes.append("Some costs are variable or require custom quotes")

    confidence = determine_confidence(breakdown, scale)
    COST_CONFIDENCE.labels(confidence=confidence).inc()

    logger.debug(
        "cost_projection_calculated",
        tools=len(breakdown),
        monthly_estimate=scaled_estimate,
        confidence=confidence,
    )

    return CostProjection(
        total_monthly_min=scaled_min,
        total_monthly_max=scaled_max,
        total_monthly_estimate=scaled_estimate,
        total_yearly_min=round_currency(scaled_min * 12),
        total_yearly_max=round_currency(scaled_max * 12),
        total_yearly_estimate=round_currency(scaled_estimate * 12),
        breakdown=breakdown,
        scaling_factors=factors,
        confidence=confidence,
        notes=notes,
        scaling_estimates=[estimate_scaling(breakdown, users) for users in SCALING_USER_POINTS],
    )
