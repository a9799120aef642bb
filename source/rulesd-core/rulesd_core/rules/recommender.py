"""Rule recommender for rules.d.

This module composes index queries into recommendation bundles:
- One query per scenario facet, run in a fixed order
- De-duplication by rule id, first occurrence wins
- Stable sorting by rule priority
- Bundle name and description synthesis
"""

import logging

from rulesd_core.rules.index import RuleIndex
from rulesd_core.rules.models import (
    RecommendationBundle,
    Rule,
    RuleCategory,
    ScenarioContext,
)


logger = logging.getLogger(__name__)


class RuleRecommender:
    """Builds recommendation bundles from a RuleIndex.

    Every facet that applies to the scenario contributes its full query
    result; the only ranking signal is each rule's own priority. Facets run
    in this order, which also decides which duplicate survives:

    1. general rules            -> "general-ai-operations"
    2. rules of the task type   -> "{type}-tasks"
    3. language rules           -> "{language}-development"
    4. one tag query per focus  -> "{focus}-focused"
    5. framework rules          -> "{framework}-framework"
    """

    def __init__(self, index: RuleIndex):
        self.index = index

    def recommend(self, context: ScenarioContext) -> RecommendationBundle:
        """Recommend a bundle of rules for a scenario.

        Args:
            context: The scenario to recommend rules for.

        Returns:
            Bundle of unique rules sorted by priority, with the facet
            labels of every query that ran.
        """
        bundle = RecommendationBundle(
            name=self._generate_name(context),
            description=self._generate_description(context),
        )

        if len(self.index) == 0:
            logger.debug(f"Empty rule index, returning empty bundle '{bundle.name}'")
            return bundle

        collected: list[Rule] = []
        for label, rules in self._facet_queries(context):
            logger.debug(f"Facet '{label}' matched {len(rules)} rules")
            collected.extend(rules)
            bundle.scenarios.append(label)

        bundle.rules = self._sort_by_priority(self._deduplicate(collected))
        return bundle

    def _facet_queries(self, context: ScenarioContext):
        yield "general-ai-operations", self.index.by_category(RuleCategory.GENERAL)
        yield f"{context.type.value}-tasks", self.index.by_category(context.type)

        if context.language:
            yield f"{context.language}-development", self.index.by_language(context.language)

        # Each focus is queried on its own; duplicates are removed later
        for focus in context.priorities:
            yield f"{focus.value}-focused", self.index.by_tags([focus.value])

        if context.framework:
            yield f"{context.framework}-framework", self.index.by_framework(context.framework)

    def _deduplicate(self, rules: list[Rule]) -> list[Rule]:
        seen: set[str] = set()
        unique = []
        for rule in rules:
            if rule.id in seen:
                continue
            seen.add(rule.id)
            unique.append(rule)
        return unique

    def _sort_by_priority(self, rules: list[Rule]) -> list[Rule]:
        # sorted() is stable: equal priorities keep their facet order
        return sorted(rules, key=lambda r: r.metadata.priority.rank)

    def _generate_name(self, context: ScenarioContext) -> str:
        parts = [
            part for part in (context.language, context.type.value, context.framework)
            if part
        ]
        return "-".join(parts) + "-bundle" if parts else "custom-bundle"

    def _generate_description(self, context: ScenarioContext) -> str:
        parts = ["Rules for"]

        if context.language:
            parts.append(context.language)

        parts.append(context.type.value)

        if context.framework:
            parts.append(f"using {context.framework}")

        if context.priorities:
            focus = ", ".join(p.value for p in context.priorities)
            parts.append(f"with focus on {focus}")

        return " ".join(parts)


def recommend(index: RuleIndex, context: ScenarioContext) -> RecommendationBundle:
    """Recommend a bundle of rules from ``index`` for ``context``."""
    return RuleRecommender(index).recommend(context)
