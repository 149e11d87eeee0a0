"""Tests for stack selection and recommendation assembly."""

from app.config import DEFAULT_CATALOG_PATH
from conftest import make_tool
from services.models import ProjectAnalysis, SkillProfile, StackEntry, ToolProfile
from services.stack_recommender import (
    CONFLICT_WARNING,
    MAX_STACK_SIZE,
    PREFERENCE_REASON,
    estimate_baseline_cost,
    generate_project_prompt,
    generate_recommendation,
    generate_summary,
    has_category_conflict,
    select_stack,
)
from services.tool_catalog import load_catalog, parse_catalog

CATEGORIES = [
    "frontend",
    "backend",
    "database",
    "api",
    "testing",
    "deployment",
    "monitoring",
    "analytics",
]


class TestSelectStack:
    """Test suite for select_stack."""

    def setup_method(self):
        self.analysis = ProjectAnalysis(complexity="medium")
        self.skill = SkillProfile(setup=2, daily=2)

    def test_one_per_category_up_to_cap(self):
        """Equal scores fill the stack in catalog order, one per category."""
        catalog = parse_catalog([make_tool(f"t{i}", c) for i, c in enumerate(CATEGORIES)])
        stack, warnings, selected = select_stack(catalog, self.analysis, self.skill)

        assert len(stack) == MAX_STACK_SIZE
        assert [e.category for e in stack] == CATEGORIES[:MAX_STACK_SIZE]
        assert all(e.compatibility_score == 60 for e in stack)
        assert warnings == []
        assert [t.id for t in selected] == [f"t{i}" for i in range(MAX_STACK_SIZE)]

    def test_highest_score_wins_category(self):
        """Within a category the higher score is chosen."""
        catalog = parse_catalog(
            [
                make_tool("low", "database", popularity_score=0.8),
                make_tool("high", "database"),
            ]
        )
        stack, _, _ = select_stack(catalog, self.analysis, self.skill)
        assert [e.name for e in stack] == ["High"]

    def test_below_threshold_skipped(self):
        """Tools under 50 are never auto-selected."""
        catalog = parse_catalog([make_tool("weak", "frontend", popularity_score=0.5)])
        stack, warnings, selected = select_stack(catalog, self.analysis, self.skill)
        assert stack == []
        assert warnings == []
        assert selected == []

    def test_threshold_uses_unrounded_score(self):
        """A raw 49.5 reports as 50 but stays below the selection threshold."""
        catalog = parse_catalog(
            [
                make_tool(
                    "borderline",
                    "backend",
                    popularity_score=0.65,
                    community_sentiment="positive",
                    pricing_model="subscription",
                    baseline_cost=5,
                )
            ]
        )
        stack, warnings, _ = select_stack(catalog, self.analysis, self.skill)
        assert stack == []
        assert warnings == []

        stack, _, _ = select_stack(catalog, self.analysis, self.skill, ["borderline"])
        assert stack[0].compatibility_score == 50

    def test_preferred_tools_share_a_category(self):
        """Two preferred tools in one category are both kept, in caller order."""
        catalog = parse_catalog(
            [
                make_tool("postgres", "database"),
                make_tool("mongo", "database", popularity_score=0.8),
                make_tool("ui", "frontend"),
            ]
        )
        stack, _, _ = select_stack(catalog, self.analysis, self.skill, ["mongo", "postgres"])

        assert [e.name for e in stack] == ["Mongo", "Postgres", "Ui"]
        assert [e.category for e in stack[:2]] == ["database", "database"]
        assert all(e.reason == PREFERENCE_REASON for e in stack[:2])

    def test_preferred_tool_takes_category(self):
        """A preferred lower-scoring tool blocks the better one in its category."""
        catalog = parse_catalog(
            [
                make_tool("tool_a", "database"),
                make_tool("tool_b", "database", popularity_score=0.8),
            ]
        )
        stack, _, _ = select_stack(catalog, self.analysis, self.skill, ["tool_b"])

        assert [e.name for e in stack] == ["Tool B"]
        assert stack[0].reason == PREFERENCE_REASON
        assert stack[0].compatibility_score == 54

    def test_preferred_ignores_threshold_and_cap(self):
        """Preferred tools are added regardless of score or stack size."""
        records = [make_tool(f"t{i}", c) for i, c in enumerate(CATEGORIES)]
        records.append(make_tool("weak", "security", popularity_score=0.0))
        catalog = parse_catalog(records)
        preferred = [r["id"] for r in records]

        stack, _, _ = select_stack(catalog, self.analysis, self.skill, preferred)
        assert len(stack) == len(records)
        assert stack[-1].compatibility_score == 30

    def test_preferred_unknown_and_repeated_ids(self):
        """Unknown ids are ignored and repeats added once."""
        catalog = parse_catalog([make_tool("a", "frontend"), make_tool("b", "backend")])
        stack, _, _ = select_stack(
            catalog, self.analysis, self.skill, ["missing", "b", "b"]
        )
        assert [e.name for e in stack] == ["B", "A"]
        assert stack[0].reason == PREFERENCE_REASON
        assert stack[1].reason != PREFERENCE_REASON

    def test_category_conflict_warning(self):
        """A tool whose rules target a chosen category is skipped with a warning."""
        catalog = parse_catalog(
            [
                make_tool("db", "database"),
                make_tool(
                    "baas",
                    "api",
                    popularity_score=0.9,
                    rules=[{"kind": "category", "targets": ["database"]}],
                ),
            ]
        )
        stack, warnings, _ = select_stack(catalog, self.analysis, self.skill)

        assert [e.name for e in stack] == ["Db"]
        assert len(warnings) == 1
        assert warnings[0].type == CONFLICT_WARNING
        assert warnings[0].message == "Baas conflicts with existing selections"

    def test_conflict_is_one_directional(self):
        """Rules are only checked on the tool being added."""
        catalog = parse_catalog(
            [
                make_tool("db", "database", popularity_score=0.9),
                make_tool("baas", "api", rules=[{"kind": "category", "targets": ["database"]}]),
            ]
        )
        stack, warnings, _ = select_stack(catalog, self.analysis, self.skill)
        assert [e.name for e in stack] == ["Baas", "Db"]
        assert warnings == []

    def test_deterministic(self):
        """Same inputs, same stack."""
        catalog = load_catalog(DEFAULT_CATALOG_PATH)
        first = select_stack(catalog, self.analysis, self.skill, ["stripe"])
        second = select_stack(catalog, self.analysis, self.skill, ["stripe"])
        assert first == second


class TestHasCategoryConflict:
    """Test suite for has_category_conflict."""

    def test_non_category_rules_ignored(self):
        tool = ToolProfile.model_validate(
            make_tool("x", "api", rules=[{"kind": "vendor", "targets": ["database"]}])
        )
        stack = [StackEntry(name="Db", category="database", reason="", compatibility_score=60)]
        assert has_category_conflict(tool, stack) is False

    def test_empty_stack(self):
        tool = ToolProfile.model_validate(
            make_tool("x", "api", rules=[{"kind": "category", "targets": ["database"]}])
        )
        assert has_category_conflict(tool, []) is False


class TestRecommendationText:
    """Test suite for summary, prompt and legacy estimate."""

    def test_summary(self):
        """Summary names complexity, type, size, features and scaling."""
        stack = [
            StackEntry(name="A", category="frontend", reason="r", compatibility_score=60),
            StackEntry(name="B", category="backend", reason="r", compatibility_score=60),
        ]
        analysis = ProjectAnalysis(
            project_type="api",
            complexity="medium",
            features=["authentication", "payments"],
            scaling_requirements="medium",
        )
        assert generate_summary(analysis, stack) == (
            "Generated a medium API service stack with 2 optimized tools. "
            "Focus on authentication, payments with medium scaling requirements."
        )

    def test_summary_without_features(self):
        assert generate_summary(ProjectAnalysis(), []) == (
            "Generated a simple web application stack with 0 optimized tools. "
            "Focus on core functionality with low scaling requirements."
        )

    def test_project_prompt(self):
        """Prompt embeds the idea and tool names in stack order."""
        stack = [
            StackEntry(name="Next.js", category="frontend", reason="r", compatibility_score=60),
            StackEntry(name="Supabase", category="api", reason="r", compatibility_score=60),
        ]
        prompt = generate_project_prompt("recipe sharing site", stack)
        assert prompt.startswith(
            "Create a recipe sharing site using the following technology stack: Next.js, Supabase."
        )
        assert "- Include basic testing setup" in prompt
        assert prompt.endswith("code examples for each major component.")

    def test_baseline_cost_range(self):
        """Legacy estimate spans 0.8x to 1.5x of summed baseline costs."""
        tools = parse_catalog(
            [
                make_tool("a", "frontend", baseline_cost=10),
                make_tool("b", "backend", baseline_cost=20),
            ]
        )
        estimate = estimate_baseline_cost(tools)
        assert estimate.min == 24.0
        assert estimate.max == 45.0
        assert [(i.tool, i.cost) for i in estimate.breakdown] == [("A", 10.0), ("B", 20.0)]

    def test_baseline_cost_empty(self):
        estimate = estimate_baseline_cost([])
        assert estimate.min == 0
        assert estimate.max == 0
        assert estimate.breakdown == []


class TestGenerateRecommendation:
    """Test suite for generate_recommendation."""

    def test_sample_catalog(self, sample_catalog):
        """Simple project against the sample catalog."""
        recommendation = generate_recommendation(
            "A simple blog", SkillProfile(setup=2, daily=2), [], sample_catalog
        )

        assert [e.name for e in recommendation.recommended_stack] == [
            "React App",
            "Node Api",
            "Mongo",
            "Netlify",
            "Gpt Api",
        ]
        assert recommendation.warnings == []
        assert recommendation.summary.startswith("Generated a simple web application stack with 5")

        assert recommendation.estimated_cost.min == 24.0
        assert recommendation.estimated_cost.max == 45.0

        projection = recommendation.cost_projection
        assert projection.total_monthly_min == 10.0
        assert projection.total_monthly_max == 80.0
        assert projection.total_monthly_estimate == 30.0
        assert projection.confidence == "medium"
        assert [b.tool_name for b in projection.breakdown] == [
            e.name for e in recommendation.recommended_stack
        ]

    def test_shipped_catalog(self):
        """Feature-rich idea against the bundled catalog."""
        catalog = load_catalog(DEFAULT_CATALOG_PATH)
        recommendation = generate_recommendation(
            "A real-time chat app with AI recommendations and payment processing "
            "for enterprise users",
            SkillProfile(setup=2, daily=2),
            [],
            catalog,
        )
        stack = recommendation.recommended_stack
        categories = [e.category for e in stack]

        assert 0 < len(stack) <= MAX_STACK_SIZE
        assert len(set(categories)) == len(categories)
        assert all(e.compatibility_score >= 50 for e in stack)
        assert recommendation.cost_projection.confidence in ("low", "medium", "high")
        assert len(recommendation.cost_projection.scaling_estimates) == 5

    def test_camel_case_output(self, sample_catalog):
        """Serialized recommendation uses camelCase keys."""
        recommendation = generate_recommendation(
            "A simple blog", SkillProfile(setup=2, daily=2), [], sample_catalog
        )
        data = recommendation.model_dump(by_alias=True)
        assert {"summary", "recommendedStack", "warnings", "projectPrompt", "estimatedCost", "costProjection"} <= set(data)
        assert "compatibilityScore" in data["recommendedStack"][0]
        assert "totalMonthlyEstimate" in data["costProjection"]
