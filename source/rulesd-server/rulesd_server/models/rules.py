"""Pydantic models for rules and bundles."""

from typing import Any

from pydantic import BaseModel, Field

from rulesd_core.rules import (
    RecommendationBundle,
    Rule,
    RuleCategory,
    ScenarioContext,
    ScenarioFocus,
)


class RuleSummaryResponse(BaseModel):
    """Listing form of a rule."""
    id: str
    title: str
    category: RuleCategory
    language: str | list[str]
    tags: list[str]
    priority: str
    description: str | None = None
    file_path: str

    @classmethod
    def from_rule(cls, rule: Rule) -> "RuleSummaryResponse":
        meta = rule.metadata
        return cls(
            id=meta.id,
            title=meta.title,
            category=meta.category,
            language=meta.language if isinstance(meta.language, str) else list(meta.language),
            tags=list(meta.tags),
            priority=meta.priority.value,
            description=meta.description,
            file_path=rule.file_path,
        )


class RuleListResponse(BaseModel):
    """Response model for listing rules."""
    rules: list[RuleSummaryResponse]
    total: int

    @classmethod
    def from_rules(cls, rules: list[Rule]) -> "RuleListResponse":
        return cls(rules=[RuleSummaryResponse.from_rule(r) for r in rules], total=len(rules))


class RuleDetailResponse(BaseModel):
    """Full rule: every declared metadata field plus the Markdown body."""
    metadata: dict[str, Any]
    content: str
    file_path: str

    @classmethod
    def from_rule(cls, rule: Rule) -> "RuleDetailResponse":
        return cls(metadata=rule.metadata.to_dict(), content=rule.content, file_path=rule.file_path)


class RecommendRequest(BaseModel):
    """Scenario to recommend a bundle for."""
    type: RuleCategory = Field(..., description="Type of task")
    language: str | None = Field(None, description="Programming language (for coding tasks)")
    framework: str | None = Field(None, description="Framework being used")
    priorities: list[ScenarioFocus] = Field(
        default_factory=list, description="Priority areas to focus on"
    )

    def to_context(self) -> ScenarioContext:
        return ScenarioContext(
            type=self.type,
            language=self.language,
            framework=self.framework,
            priorities=tuple(self.priorities),
        )


class BundleRuleResponse(BaseModel):
    id: str
    title: str
    category: RuleCategory
    priority: str
    file_path: str


class BundleResponse(BaseModel):
    """Response model for a recommendation bundle."""
    name: str
    description: str
    scenarios: list[str]
    rules: list[BundleRuleResponse]

    @classmethod
    def from_bundle(cls, bundle: RecommendationBundle) -> "BundleResponse":
        return cls(
            name=bundle.name,
            description=bundle.description,
            scenarios=list(bundle.scenarios),
            rules=[
                BundleRuleResponse(
                    id=r.id,
                    title=r.metadata.title,
                    category=r.metadata.category,
                    priority=r.metadata.priority.value,
                    file_path=r.file_path,
                )
                for r in bundle.rules
            ],
        )


class BundleListResponse(BaseModel):
    """Response model for the pre-configured bundles, keyed by bundle id."""
    bundles: dict[str, BundleResponse]
    total: int
