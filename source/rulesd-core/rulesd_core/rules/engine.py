"""Rule engine facade for rules.d.

RuleEngine is the surface the CLI and the servers talk to. It owns the one
RuleIndex of the process: ``initialize()`` builds it, every other method
reads it.
"""

import logging
from pathlib import Path
from typing import Iterable

from rulesd_core.rules.catalog import common_bundles
from rulesd_core.rules.errors import EngineNotInitializedError, RuleNotFoundError
from rulesd_core.rules.index import RuleIndex
from rulesd_core.rules.models import RecommendationBundle, Rule, RuleCategory, ScenarioContext
from rulesd_core.rules.recommender import RuleRecommender
from rulesd_core.rules.store import DEFAULT_EXCLUDE_DIRS, FileRuleStore, RuleStore
from rulesd_core.rules.validator import RuleValidator, ValidationResult


logger = logging.getLogger(__name__)


class RuleEngine:
    """Query and recommendation API over a rule corpus.

    Attributes:
        store: Source the index is built from.
    """

    def __init__(
        self,
        rules_dir: Path | str | None = None,
        *,
        store: RuleStore | None = None,
        exclude_dirs: Iterable[str] = DEFAULT_EXCLUDE_DIRS,
        max_workers: int = 1,
    ):
        """Initialize the engine.

        Args:
            rules_dir: Corpus root; ignored when ``store`` is given.
            store: Explicit rule source.
            exclude_dirs: Directory names skipped during discovery.
            max_workers: Number of threads reading rule files.
        """
        if store is None:
            store = FileRuleStore(
                Path(rules_dir) if rules_dir is not None else Path.cwd(),
                exclude_dirs=exclude_dirs,
                max_workers=max_workers,
            )
        self.store = store
        self._index: RuleIndex | None = None

    @property
    def is_initialized(self) -> bool:
        return self._index is not None

    @property
    def index(self) -> RuleIndex:
        """The loaded index.

        Raises:
            EngineNotInitializedError: If initialize() has not run.
        """
        if self._index is None:
            raise EngineNotInitializedError()
        return self._index

    def initialize(self) -> RuleIndex:
        """Load the rule index. Later calls return the existing index."""
        if self._index is not None:
            logger.debug("Rule engine already initialized")
            return self._index

        self._index = RuleIndex.from_store(self.store)
        logger.info(f"Rule engine initialized with {len(self._index)} rules")
        return self._index

    def get_all_rules(self) -> list[Rule]:
        return self.index.all()

    def get_rule(self, rule_id: str) -> Rule:
        """Get a rule by id.

        Raises:
            RuleNotFoundError: If no rule has this id.
        """
        rule = self.index.get(rule_id)
        if rule is None:
            raise RuleNotFoundError(rule_id)
        return rule

    def search_by_category(self, category: RuleCategory | str) -> list[Rule]:
        return self.index.by_category(category)

    def search_by_language(self, language: str) -> list[Rule]:
        return self.index.by_language(language)

    def search_by_tags(self, tags: Iterable[str]) -> list[Rule]:
        return self.index.by_tags(tags)

    def search_by_text(self, query: str) -> list[Rule]:
        return self.index.by_substring(query)

    def search_rules(
        self,
        query: str | None = None,
        category: RuleCategory | str | None = None,
        language: str | None = None,
        tags: Iterable[str] | None = None,
    ) -> list[Rule]:
        """Search rules by several criteria at once.

        Every criterion given must hold; ``tags`` matches rules carrying any
        of the listed tags. With no criteria, all rules are returned.
        """
        index = self.index
        selected = index.all()

        filters: list[list[Rule]] = []
        if category:
            filters.append(index.by_category(category))
        if language:
            filters.append(index.by_language(language))
        if tags:
            filters.append(index.by_tags(tags))
        if query:
            filters.append(index.by_substring(query))

        for matched in filters:
            allowed = set(matched)
            selected = [rule for rule in selected if rule in allowed]

        return selected

    def recommend_bundle(self, context: ScenarioContext) -> RecommendationBundle:
        return RuleRecommender(self.index).recommend(context)

    def get_common_bundles(self) -> dict[str, RecommendationBundle]:
        return common_bundles(self.index)

    def get_related_rules(self, rule_id: str) -> list[Rule]:
        """Rules listed in the ``related`` field of a rule.

        Ids that do not resolve to a loaded rule are skipped.

        Raises:
            RuleNotFoundError: If ``rule_id`` itself is unknown.
        """
        rule = self.get_rule(rule_id)
        return self._resolve(rule.metadata.related or ())

    def get_prerequisites(self, rule_id: str) -> list[Rule]:
        """Rules listed in the ``prerequisites`` field of a rule.

        Ids that do not resolve to a loaded rule are skipped.

        Raises:
            RuleNotFoundError: If ``rule_id`` itself is unknown.
        """
        rule = self.get_rule(rule_id)
        return self._resolve(rule.metadata.prerequisites or ())

    def validate(self) -> list[ValidationResult]:
        """Validate the structure and references of every loaded rule."""
        return RuleValidator().validate_index(self.index)

    def _resolve(self, rule_ids: Iterable[str]) -> list[Rule]:
        resolved = []
        for rule_id in dict.fromkeys(rule_ids):
            rule = self.index.get(rule_id)
            if rule is None:
                logger.debug(f"Referenced rule '{rule_id}' not found, skipping")
                continue
            resolved.append(rule)
        return resolved
