"""Project description analyzer.

Classifies a free-text project description into a requirement profile
(project type, complexity, features) and, for cost projection, into a
project scale (users, traffic, timeline).

Matching is plain substring containment on the lower-cased text, not word
boundaries: "ai" also matches inside "pain" or "chain". Thresholds and
downstream scores are calibrated against that behavior.

Every rule table below is evaluated top to bottom. Where only the first
match counts (project type, users, traffic) the order decides the result
for descriptions that hit several rows.
"""

from __future__ import annotations

from services.models import ProjectAnalysis, ProjectScale, SkillProfile

# First match wins: "app" is checked before "api", so "api app" is mobile-app
PROJECT_TYPE_RULES: list[tuple[str, tuple[str, ...]]] = [
    ("mobile-app", ("mobile", "app")),
    ("api", ("api", "backend")),
    ("dashboard", ("dashboard", "admin")),
]
DEFAULT_PROJECT_TYPE = "web-app"

COMPLEXITY_INDICATORS: tuple[str, ...] = (
    "real-time",
    "ai",
    "ml",
    "machine learning",
    "analytics",
    "payment",
    "multi-tenant",
    "microservices",
    "scale",
    "enterprise",
)

# Scale analysis counts a few more architecture keywords
SCALE_COMPLEXITY_INDICATORS: tuple[str, ...] = COMPLEXITY_INDICATORS + (
    "distributed",
    "blockchain",
)

FEATURE_RULES: list[tuple[str, tuple[str, ...]]] = [
    ("authentication", ("auth", "login", "user")),
    ("real-time", ("real-time", "live", "chat")),
    ("ai-ml", ("ai", "ml", "machine learning")),
    ("payments", ("payment", "billing", "subscription")),
    ("search", ("search", "recommendation")),
]

SCALE_FEATURE_RULES: list[tuple[str, tuple[str, ...]]] = [
    ("authentication", ("auth", "login")),
    ("payments", ("payment", "billing")),
    ("ai-ml", ("ai", "ml")),
    ("real-time", ("real-time", "chat")),
]

EXPECTED_USER_RULES: list[tuple[int, tuple[str, ...]]] = [
    (10000, ("enterprise", "scale")),
    (1000, ("startup", "business")),
]
DEFAULT_EXPECTED_USERS = 100

TRAFFIC_RULES: list[tuple[str, tuple[str, ...]]] = [
    ("high", ("real-time", "streaming")),
    ("medium", ("social", "marketplace")),
]

SCALING_BY_COMPLEXITY = {"simple": "low", "medium": "medium", "complex": "high"}


def _contains_any(text: str, keywords: tuple[str, ...]) -> bool:
    return any(keyword in text for keyword in keywords)


def _first_match(text: str, rules: list[tuple], default):
    for value, keywords in rules:
        if _contains_any(text, keywords):
            return value
    return default


def _all_matches(text: str, rules: list[tuple[str, tuple[str, ...]]]) -> list[str]:
    return [value for value, keywords in rules if _contains_any(text, keywords)]


def _classify_complexity(text: str, indicators: tuple[str, ...]) -> str:
    """Bucket the number of complexity keywords found in the text."""
    matches = sum(1 for indicator in indicators if indicator in text)
    if matches > 3:
        return "complex"
    if matches > 1:
        return "medium"
    return "simple"


def analyze_project(description: str) -> ProjectAnalysis:
    """Classify a project description into a requirement profile.

    Total over any string; an empty description yields a simple web-app
    with no detected features.
    """
    text = (description or "").lower()

    project_type = _first_match(text, PROJECT_TYPE_RULES, DEFAULT_PROJECT_TYPE)
    complexity = _classify_complexity(text, COMPLEXITY_INDICATORS)
    features = _all_matches(text, FEATURE_RULES)

    if "search" in features:
        database_needs = "vector"
    elif "ai-ml" in features:
        database_needs = "nosql"
    else:
        database_needs = "relational"

    return ProjectAnalysis(
        project_type=project_type,
        complexity=complexity,
        features=features,
        scaling_requirements=SCALING_BY_COMPLEXITY[complexity],
        real_time_needs="real-time" in features,
        auth_needs="authentication" in features,
        ai_ml_needs="ai-ml" in features,
        database_needs=database_needs,
    )


def analyze_project_scale(description: str, skill: SkillProfile) -> ProjectScale:
    """Estimate project scale for cost projection.

    Timeline follows the caller's skill profile: low setup and daily
    effort tolerance means a prototype, high tolerance on both means a
    production build, anything else an MVP.
    """
    text = (description or "").lower()

    if skill.setup <= 2 and skill.daily <= 2:
        timeline = "prototype"
    elif skill.setup >= 4 and skill.daily >= 4:
        timeline = "production"
    else:
        timeline = "mvp"

    return ProjectScale(
        complexity=_classify_complexity(text, SCALE_COMPLEXITY_INDICATORS),
        expected_users=_first_match(text, EXPECTED_USER_RULES, DEFAULT_EXPECTED_USERS),
        expected_traffic=_first_match(text, TRAFFIC_RULES, "low"),
        features=_all_matches(text, SCALE_FEATURE_RULES),
        timeline=timeline,
    )
