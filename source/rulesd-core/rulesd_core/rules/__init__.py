"""Rule indexing and recommendation for rules.d.

This module loads rule documents, extracts their metadata, indexes them
in memory and composes scenario-specific rule bundles.
"""

from rulesd_core.rules.models import (
    FALLBACK_TAG,
    UNIVERSAL_LANGUAGE,
    Applicability,
    RecommendationBundle,
    Reference,
    Rule,
    RuleCategory,
    RuleDifficulty,
    RuleMetadata,
    RulePriority,
    ScenarioContext,
    ScenarioFocus,
)
from rulesd_core.rules.errors import (
    EngineNotInitializedError,
    RuleLoadError,
    RuleNotFoundError,
    RulesError,
)
from rulesd_core.rules.parser import RuleParser, extract_metadata, MAX_RULE_FILE_SIZE
from rulesd_core.rules.store import (
    DEFAULT_EXCLUDE_DIRS,
    FileRuleStore,
    MemoryRuleStore,
    RuleStore,
    discover_rule_files,
)
from rulesd_core.rules.index import RuleIndex
from rulesd_core.rules.recommender import RuleRecommender, recommend
from rulesd_core.rules.catalog import COMMON_SCENARIOS, common_bundles
from rulesd_core.rules.validator import RuleValidator, ValidationResult
from rulesd_core.rules.engine import RuleEngine

__all__ = [
    # Models
    "FALLBACK_TAG",
    "UNIVERSAL_LANGUAGE",
    "Applicability",
    "RecommendationBundle",
    "Reference",
    "Rule",
    "RuleCategory",
    "RuleDifficulty",
    "RuleMetadata",
    "RulePriority",
    "ScenarioContext",
    "ScenarioFocus",
    # Errors
    "EngineNotInitializedError",
    "RuleLoadError",
    "RuleNotFoundError",
    "RulesError",
    # Parser
    "RuleParser",
    "extract_metadata",
    "MAX_RULE_FILE_SIZE",
    # Store
    "DEFAULT_EXCLUDE_DIRS",
    "FileRuleStore",
    "MemoryRuleStore",
    "RuleStore",
    "discover_rule_files",
    # Index
    "RuleIndex",
    # Recommendation
    "RuleRecommender",
    "recommend",
    "COMMON_SCENARIOS",
    "common_bundles",
    # Validation
    "RuleValidator",
    "ValidationResult",
    # Engine
    "RuleEngine",
]
