"""StackFast Recommendation Engine.

Turns a project description, a skill profile and optional tool
preferences into a recommended stack drawn from a tool catalog.

Selection rules:
- Preferred tools are added first, in caller order, whatever their score.
  Their categories count as covered, so a better-scoring tool in the same
  category is never considered.
- Remaining tools are taken greedily by descending score, one per
  category, while the stack holds fewer than MAX_STACK_SIZE entries.
- Tools whose unrounded score is below MIN_COMPATIBILITY_SCORE are skipped,
  so a raw 49.5 is excluded even though it reports as 50.
- A tool whose category rules target a category already in the stack is
  skipped with a "Tool Conflict" warning.

All functions are pure: the catalog and every input are passed in, and a
fresh result is built per call.
"""

from __future__ import annotations

from collections.abc import Sequence

from app.logging_config import get_logger
from app.metrics import RECOMMENDATION_DURATION, RECOMMENDATIONS_TOTAL, TOOL_CONFLICTS
from services.cost_projection import calculate_cost_projection, round_currency
from services.models import (
    LegacyCostEstimate,
    LegacyCostItem,
    ProjectAnalysis,
    Recommendation,
    ScoredTool,
    SkillProfile,
    StackEntry,
    StackItem,
    StackWarning,
    ToolProfile,
)
from services.project_analyzer import analyze_project, analyze_project_scale
from services.tool_scorer import generate_reason, raw_score, round_score

logger = get_logger(__name__)

MAX_STACK_SIZE = 6
MIN_COMPATIBILITY_SCORE = 50
PREFERENCE_REASON = "User preference"
CONFLICT_WARNING = "Tool Conflict"

LEGACY_MIN_FACTOR = 0.8
LEGACY_MAX_FACTOR = 1.5

PROJECT_TYPE_LABELS = {
    "web-app": "web application",
    "mobile-app": "mobile application",
    "api": "API service",
    "dashboard": "dashboard application",
}

PROJECT_PROMPT_TEMPLATE = """Create a {project_idea} using the following technology stack: {tools}.

Key requirements:
- Set up the project structure
- Configure all tools for optimal integration
- Implement core functionality
- Add proper error handling
- Include basic testing setup
- Deploy to production environment

Please provide step-by-step implementation with code examples for each major component."""


def has_category_conflict(tool: ToolProfile, stack: Sequence[StackEntry]) -> bool:
    """True if a category rule on the tool targets a category already chosen."""
    present = {entry.category for entry in stack}
    return any(
        rule.kind == "category" and any(target in present for target in rule.targets)
        for rule in tool.rules
    )


def score_catalog(
    catalog: Sequence[ToolProfile],
    analysis: ProjectAnalysis,
    skill: SkillProfile,
) -> list[ScoredTool]:
    """Score every tool, keeping catalog order."""
    scored = []
    for tool in catalog:
        raw = raw_score(tool, analysis, skill)
        scored.append(
            ScoredTool(**tool.model_dump(), compatibility_score=round_score(raw), raw_score=raw)
        )
    return scored


def select_stack(
    catalog: Sequence[ToolProfile],
    analysis: ProjectAnalysis,
    skill: SkillProfile,
    preferred_ids: Sequence[str] = (),
) -> tuple[list[StackEntry], list[StackWarning], list[ScoredTool]]:
    """Pick at most one tool per category for the project.

    Returns:
        The ordered stack, conflict warnings, and the selected tools with
        their scores (same order as the stack) for cost calculation.
    """
    scored = score_catalog(catalog, analysis, skill)
    by_id = {tool.id: tool for tool in scored}

    stack: list[StackEntry] = []
    selected: list[ScoredTool] = []
    warnings: list[StackWarning] = []
    used_categories: set[str] = set()

    for tool_id in dict.fromkeys(preferred_ids):
        tool = by_id.get(tool_id)
        if tool is None:
            logger.debug("preferred_tool_not_in_catalog", tool_id=tool_id)
            continue
        stack.append(
            StackEntry(
                name=tool.name,
                category=tool.category,
                reason=PREFERENCE_REASON,
                compatibility_score=tool.compatibility_score,
            )
        )
        selected.append(tool)
        used_categories.add(tool.category)

    # sorted() is stable, so equal scores keep catalog order
    ranked = sorted(scored, key=lambda t: t.raw_score, reverse=True)

    for tool in ranked:
        if len(stack) >= MAX_STACK_SIZE:
            break
        if tool.category in used_categories or tool.raw_score < MIN_COMPATIBILITY_SCORE:
            continue
        if has_category_conflict(tool, stack):
            TOOL_CONFLICTS.inc()
            logger.info("tool_conflict", tool_id=tool.id, category=tool.category)
            warnings.append(
                StackWarning(
                    type=CONFLICT_WARNING,
                    message=f"{tool.name} conflicts with existing selections",
                )
            )
            continue

        stack.append(
            StackEntry(
                name=tool.name,
                category=tool.category,
                reason=generate_reason(tool, analysis),
                compatibility_score=tool.compatibility_score,
            )
        )
        selected.append(tool)
        used_categories.add(tool.category)

    return stack, warnings, selected


def generate_summary(analysis: ProjectAnalysis, stack: Sequence[StackEntry]) -> str:
    label = PROJECT_TYPE_LABELS[analysis.project_type]
    focus = ", ".join(analysis.features) or "core functionality"
    return (
        f"Generated a {analysis.complexity} {label} stack with {len(stack)} optimized tools. "
        f"Focus on {focus} with {analysis.scaling_requirements} scaling requirements."
    )


def generate_project_prompt(project_idea: str, stack: Sequence[StackEntry]) -> str:
    tools = ", ".join(entry.name for entry in stack)
    return PROJECT_PROMPT_TEMPLATE.format(project_idea=project_idea, tools=tools)


def estimate_baseline_cost(selected: Sequence[ToolProfile]) -> LegacyCostEstimate:
    """Range around the sum of catalog baseline costs."""
    breakdown = [LegacyCostItem(tool=tool.name, cost=tool.baseline_cost) for tool in selected]
    total = sum(item.cost for item in breakdown)
    return LegacyCostEstimate(
        min=round_currency(max(0.0, total * LEGACY_MIN_FACTOR)),
        max=round_currency(total * LEGACY_MAX_FACTOR),
        breakdown=breakdown,
    )


@RECOMMENDATION_DURATION.time()
def generate_recommendation(
    description: str,
    skill: SkillProfile,
    preferred_tool_ids: Sequence[str],
    catalog: Sequence[ToolProfile],
) -> Recommendation:
    """Recommend a stack and project its cost.

    Args:
        description: Free-text project idea
        skill: Caller's setup/daily effort tolerance
        preferred_tool_ids: Catalog ids the caller wants included
        catalog: Tool profiles to choose from

    Returns:
        Recommendation with stack, warnings, prompt and cost figures
    """
    analysis = analyze_project(description)
    stack, warnings, selected = select_stack(catalog, analysis, skill, preferred_tool_ids)

    scale = analyze_project_scale(description, skill)
    cost_projection = calculate_cost_projection(
        [
            StackItem(name=tool.name, category=tool.category, cost_model=tool.cost_model)
            for tool in selected
        ],
        scale,
    )

    RECOMMENDATIONS_TOTAL.labels(
        project_type=analysis.project_type,
        complexity=analysis.complexity,
    ).inc()
    logger.info(
        "recommendation_generated",
        project_type=analysis.project_type,
        complexity=analysis.complexity,
        stack_size=len(stack),
        warnings=len(warnings),
        catalog_size=len(catalog),
    )

    return Recommendation(
        summary=generate_summary(analysis, stack),
        recommended_stack=stack,
        warnings=warnings,
        project_prompt=generate_project_prompt(description, stack),
        estimated_cost=estimate_baseline_cost(selected),
        cost_projection=cost_projection,
    )
