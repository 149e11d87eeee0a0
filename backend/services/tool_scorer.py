"""Tool compatibility scoring.

Additive point system over a tool profile, the project analysis and the
caller's skill profile:

- popularity: up to 30 points (popularity_score * 30)
- skill alignment: 20 points minus 5 per step of setup/daily gap
- community sentiment: 15 highly positive, 10 positive
- cost: 10 for a free tier, otherwise 5 for zero baseline cost
- complexity alignment: 10 for easy tools on simple projects or
  heavyweight tools on complex ones

The sum is clamped to [0, 100]. Thresholds use that raw value; the score
reported to callers is rounded half-up to an integer.
"""

from __future__ import annotations

import math

from services.models import ProjectAnalysis, SkillProfile, ToolProfile

POPULARITY_WEIGHT = 30
SKILL_ALIGNMENT_MAX = 20
SKILL_GAP_PENALTY = 5
SENTIMENT_BONUS = {"highly_positive": 15, "positive": 10}
FREE_TIER_BONUS = 10
ZERO_COST_BONUS = 5
COMPLEXITY_ALIGNMENT_BONUS = 10

# Setup effort boundaries for complexity alignment
BEGINNER_SETUP_MAX = 2
ENTERPRISE_SETUP_MIN = 3

POPULAR_THRESHOLD = 0.8
MAX_REASONS = 2
FALLBACK_REASON = "good fit for your project"


def _is_complexity_aligned(tool: ToolProfile, analysis: ProjectAnalysis) -> bool:
    if analysis.complexity == "simple":
        return tool.skills.setup <= BEGINNER_SETUP_MAX
    if analysis.complexity == "complex":
        return tool.skills.setup >= ENTERPRISE_SETUP_MIN
    return False


def raw_score(tool: ToolProfile, analysis: ProjectAnalysis, skill: SkillProfile) -> float:
    """Unrounded fit score clamped to [0, 100]; selection thresholds compare against this."""
    score = tool.popularity_score * POPULARITY_WEIGHT

    skill_gap = abs(tool.skills.setup - skill.setup) + abs(tool.skills.daily - skill.daily)
    score += max(0, SKILL_ALIGNMENT_MAX - skill_gap * SKILL_GAP_PENALTY)

    score += SENTIMENT_BONUS.get(tool.community_sentiment, 0)

    if tool.pricing_model == "free-tier":
        score += FREE_TIER_BONUS
    elif tool.baseline_cost == 0:
        score += ZERO_COST_BONUS

    if _is_complexity_aligned(tool, analysis):
        score += COMPLEXITY_ALIGNMENT_BONUS

    return min(100.0, max(0.0, score))


def round_score(score: float) -> int:
    """Round half-up to the reported integer score."""
    # 1e-9 absorbs float error such as 0.95 * 30 == 28.499999999999996
    return int(math.floor(score + 0.5 + 1e-9))


def score_tool(tool: ToolProfile, analysis: ProjectAnalysis, skill: SkillProfile) -> int:
    """Score how well a tool fits the project and the user (0-100)."""
    return round_score(raw_score(tool, analysis, skill))


def generate_reason(tool: ToolProfile, analysis: ProjectAnalysis) -> str:
    """Short human-readable justification for picking a tool."""
    reasons = []
    if tool.popularity_score > POPULAR_THRESHOLD:
        reasons.append("highly popular")
    if tool.pricing_model == "free-tier":
        reasons.append("free tier available")
    if tool.community_sentiment == "highly_positive":
        reasons.append("excellent community support")
    if analysis.complexity == "simple" and tool.skills.setup <= BEGINNER_SETUP_MAX:
        reasons.append("beginner-friendly")
    if analysis.complexity == "complex" and tool.skills.setup >= ENTERPRISE_SETUP_MIN:
        reasons.append("enterprise-ready")

    return ", ".join(reasons[:MAX_REASONS]) or FALLBACK_REASON
