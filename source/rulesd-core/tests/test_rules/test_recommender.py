"""Tests for RuleRecommender.

Bundles must hold unique rule ids sorted by priority, whatever the corpus
and scenario.
"""

from hypothesis import given, strategies as st, settings

from rulesd_core.rules.index import RuleIndex
from rulesd_core.rules.models import (
    RuleCategory,
    RulePriority,
    ScenarioContext,
    ScenarioFocus,
)
from rulesd_core.rules.recommender import RuleRecommender, recommend
from rulesd_core.rules.store import MemoryRuleStore


def build_document(rule_id: str, category: str, priority: str, tags: list[str]) -> str:
    return (
        f"---\nid: {rule_id}\ncategory: {category}\npriority: {priority}\n"
        f"tags: [{', '.join(tags)}]\n---\n# {rule_id}\n"
    )


documents = st.lists(
    st.tuples(
        st.sampled_from(["alpha", "beta", "gamma", "delta", "epsilon"]),
        st.sampled_from(RuleCategory.values()),
        st.sampled_from([p.value for p in RulePriority]),
        st.lists(st.sampled_from([f.value for f in ScenarioFocus]), max_size=3),
    ),
    max_size=12,
)

contexts = st.builds(
    ScenarioContext,
    type=st.sampled_from(RuleCategory.values()),
    language=st.one_of(st.none(), st.sampled_from(["python", "go"])),
    framework=st.one_of(st.none(), st.just("django")),
    priorities=st.lists(st.sampled_from([f.value for f in ScenarioFocus]), max_size=4),
)


def index_from(docs) -> RuleIndex:
    store = MemoryRuleStore([
        (f"{category}/doc{i}-rules.md", build_document(rule_id, category, priority, tags or ["misc"]))
        for i, (rule_id, category, priority, tags) in enumerate(docs)
    ])
    return RuleIndex.from_store(store)


class TestRecommendBundle:
    """Tests for recommendation results on the sample corpus."""

    def test_python_coding_bundle(self, index) -> None:
        context = ScenarioContext(
            type="coding", language="python", priorities=["security", "performance"]
        )

        bundle = RuleRecommender(index).recommend(context)

        assert bundle.scenarios == [
            "general-ai-operations",
            "coding-tasks",
            "python-development",
            "security-focused",
            "performance-focused",
        ]
        assert bundle.rule_ids == [
            "secrets-rules",
            "python-rules",
            "rules",
            "testing-rules",
            "javascript-rules",
            "style-rules",
        ]

    def test_category_without_documents(self, index) -> None:
        bundle = recommend(index, ScenarioContext(type="devops"))

        assert bundle.rule_ids == [r.id for r in index.by_category(RuleCategory.GENERAL)]
        assert bundle.scenarios == ["general-ai-operations", "devops-tasks"]

    def test_framework_facet(self, index) -> None:
        bundle = recommend(index, ScenarioContext(type="writing", framework="django"))

        assert bundle.scenarios[-1] == "django-framework"
        assert "python-rules" in bundle.rule_ids

    def test_empty_index(self) -> None:
        bundle = recommend(RuleIndex(), ScenarioContext(type="coding", language="python"))

        assert bundle.rules == []
        assert bundle.scenarios == []
        assert bundle.name == "python-coding-bundle"

    def test_name_and_description(self, index) -> None:
        context = ScenarioContext(
            type="coding",
            language="python",
            framework="django",
            priorities=["security", "performance"],
        )

        bundle = recommend(index, context)

        assert bundle.name == "python-coding-django-bundle"
        assert bundle.description == (
            "Rules for python coding using django with focus on security, performance"
        )

    def test_description_without_optional_parts(self, index) -> None:
        bundle = recommend(index, ScenarioContext(type="data"))

        assert bundle.name == "data-bundle"
        assert bundle.description == "Rules for data"

    def test_nested_rules_file_kept_apart_from_prefixed_sibling(self) -> None:
        index = RuleIndex.from_store(MemoryRuleStore({
            "coding-rules.md": "# Coding at the root\n",
            "coding/rules.md": "# Coding directory rules\n",
        }))

        bundle = recommend(index, ScenarioContext(type="coding"))

        assert sorted(bundle.rule_ids) == ["coding-rules", "rules"]


class TestRecommendationProperties:
    """Property-based tests over random corpora and scenarios."""

    @given(docs=documents, context=contexts)
    @settings(max_examples=100)
    def test_no_duplicate_ids(self, docs, context) -> None:
        bundle = recommend(index_from(docs), context)

        assert len(bundle.rule_ids) == len(set(bundle.rule_ids))

    @given(docs=documents, context=contexts)
    @settings(max_examples=100)
    def test_sorted_by_priority(self, docs, context) -> None:
        bundle = recommend(index_from(docs), context)

        ranks = [rule.metadata.priority.rank for rule in bundle.rules]
        assert ranks == sorted(ranks)

    @given(docs=documents, context=contexts)
    @settings(max_examples=100)
    def test_general_rules_always_included(self, docs, context) -> None:
        index = index_from(docs)
        bundle = recommend(index, context)

        general_ids = {r.id for r in index.by_category(RuleCategory.GENERAL)}
        assert general_ids <= set(bundle.rule_ids)
