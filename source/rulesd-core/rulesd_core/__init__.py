"""rules.d Core - rule indexing and recommendation engine."""

from rulesd_core.config import Settings, configure_logging
from rulesd_core.rules import (
    RecommendationBundle,
    Rule,
    RuleCategory,
    RuleEngine,
    RuleIndex,
    RuleMetadata,
    RuleNotFoundError,
    RulePriority,
    ScenarioContext,
    ScenarioFocus,
)

__all__ = [
    # Config
    "Settings",
    "configure_logging",
    # Rules
    "RecommendationBundle",
    "Rule",
    "RuleCategory",
    "RuleEngine",
    "RuleIndex",
    "RuleMetadata",
    "RuleNotFoundError",
    "RulePriority",
    "ScenarioContext",
    "ScenarioFocus",
]
