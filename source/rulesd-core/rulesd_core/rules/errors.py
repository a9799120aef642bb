"""Exceptions raised by the rule engine."""


class RulesError(Exception):
    """Base exception for rules.d."""
    pass


class RuleLoadError(RulesError):
    """Exception raised when a rule file cannot be read."""
    pass


class RuleNotFoundError(RulesError, KeyError):
    """Exception raised when a rule id is not in the index."""

    def __init__(self, rule_id: str):
        self.rule_id = rule_id
        super().__init__(f"Rule not found: {rule_id}")

    def __str__(self) -> str:
        return f"Rule not found: {self.rule_id}"


class EngineNotInitializedError(RulesError, RuntimeError):
    """Exception raised when the engine is queried before initialize()."""

    def __init__(self) -> None:
        super().__init__("RuleEngine.initialize() must be called before querying rules")
