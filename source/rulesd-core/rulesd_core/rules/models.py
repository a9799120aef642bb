"""Data models for rules.d.

This module defines the core data structures of the rule engine:
- RuleCategory: Closed set of rule categories
- RulePriority: Intrinsic importance of a rule
- ScenarioFocus: Concerns a caller can ask a bundle to emphasize
- RuleMetadata: Structured metadata extracted from one rule document
- Rule: Metadata plus body content and source path
- ScenarioContext: Input of a recommendation call
- RecommendationBundle: Output of a recommendation call
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


UNIVERSAL_LANGUAGE = "universal"
FALLBACK_TAG = "best-practices"


class RuleCategory(str, Enum):
    """Rule categories.

    Inferred from the top-level directory of a rule document. Directories
    outside this set map to GENERAL.
    """
    GENERAL = "general"
    CODING = "coding"
    WRITING = "writing"
    RESEARCH = "research"
    COMMUNICATION = "communication"
    DATA = "data"
    PROJECT_MANAGEMENT = "project-management"
    SECURITY = "security"
    DEVOPS = "devops"

    @classmethod
    def values(cls) -> list[str]:
        return [c.value for c in cls]


class RulePriority(str, Enum):
    """Rule priority levels, most severe first."""
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return PRIORITY_RANK[self]


PRIORITY_RANK = {
    RulePriority.CRITICAL: 0,
    RulePriority.HIGH: 1,
    RulePriority.MEDIUM: 2,
    RulePriority.LOW: 3,
}


class ScenarioFocus(str, Enum):
    """Scenario focus areas.

    Not to be confused with RulePriority: a focus selects rules by tag,
    a priority orders them.
    """
    PERFORMANCE = "performance"
    SECURITY = "security"
    MAINTAINABILITY = "maintainability"
    ACCESSIBILITY = "accessibility"


class RuleDifficulty(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


@dataclass(frozen=True)
class Applicability:
    """Where a rule applies, as declared in front-matter."""
    scenarios: tuple[str, ...] = ()
    frameworks: tuple[str, ...] = ()
    environments: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, list[str]]:
        return {
            "scenarios": list(self.scenarios),
            "frameworks": list(self.frameworks),
            "environments": list(self.environments),
        }


@dataclass(frozen=True)
class Reference:
    title: str
    url: str
    description: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"title": self.title, "url": self.url}
        if self.description is not None:
            data["description"] = self.description
        return data


@dataclass(frozen=True)
class RuleMetadata:
    """Structured metadata for a rule document.

    Required fields are always populated, either from front-matter or by
    inference from the file path and body. Optional fields are only set
    when declared explicitly in front-matter.

    Attributes:
        id: Identifier of the rule, unique within the corpus
        title: Human-readable name
        category: Category from the closed RuleCategory set
        language: A single language token, or a tuple of tokens
        tags: Lowercase labels, never empty
        priority: Intrinsic importance, defaults to MEDIUM
        description: Short summary of the rule
        subcategory: Free-form subcategory
        difficulty: Declared difficulty level
        applicability: Scenarios, frameworks and environments the rule targets
        prerequisites: Ids of rules to read first
        related: Ids of related rules
        outcomes: Expected outcomes of applying the rule
        version: Document version string
        last_updated: Last update date as written in front-matter
        author: Document author
        references: External references
    """
    id: str
    title: str
    category: RuleCategory
    language: str | tuple[str, ...]
    tags: tuple[str, ...]
    priority: RulePriority = RulePriority.MEDIUM
    description: str | None = None
    subcategory: str | None = None
    difficulty: RuleDifficulty | None = None
    applicability: Applicability | None = None
    prerequisites: tuple[str, ...] | None = None
    related: tuple[str, ...] | None = None
    outcomes: tuple[str, ...] | None = None
    version: str | None = None
    last_updated: str | None = None
    author: str | None = None
    references: tuple[Reference, ...] | None = None

    def __post_init__(self) -> None:
        """Validate metadata fields."""
        if not self.id:
            raise ValueError("Rule id cannot be empty")
        if not self.tags:
            raise ValueError(f"Rule '{self.id}' must have at least one tag")
        if not self.language:
            raise ValueError(f"Rule '{self.id}' must declare a language")

    @property
    def languages(self) -> tuple[str, ...]:
        """Language tokens as a tuple, whatever the stored shape."""
        if isinstance(self.language, str):
            return (self.language,)
        return self.language

    @property
    def is_universal(self) -> bool:
        return UNIVERSAL_LANGUAGE in self.languages

    @property
    def frameworks(self) -> tuple[str, ...]:
        if self.applicability is None:
            return ()
        return self.applicability.frameworks

    def to_dict(self) -> dict[str, Any]:
        """Serialize metadata to a JSON-compatible dictionary.

        Unset optional fields are omitted.
        """
        data: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "category": self.category.value,
            "language": (
                self.language if isinstance(self.language, str) else list(self.language)
            ),
            "tags": list(self.tags),
            "priority": self.priority.value,
        }
        optional: dict[str, Any] = {
            "description": self.description,
            "subcategory": self.subcategory,
            "difficulty": self.difficulty.value if self.difficulty else None,
            "applicability": self.applicability.to_dict() if self.applicability else None,
            "prerequisites": list(self.prerequisites) if self.prerequisites is not None else None,
            "related": list(self.related) if self.related is not None else None,
            "outcomes": list(self.outcomes) if self.outcomes is not None else None,
            "version": self.version,
            "lastUpdated": self.last_updated,
            "author": self.author,
            "references": (
                [r.to_dict() for r in self.references]
                if self.references is not None
                else None
            ),
        }
        data.update({k: v for k, v in optional.items() if v is not None})
        return data


@dataclass(frozen=True)
class Rule:
    """A rule document: extracted metadata, Markdown body and source path."""
    metadata: RuleMetadata
    content: str
    file_path: str

    @property
    def id(self) -> str:
        return self.metadata.id

    def to_dict(self) -> dict[str, Any]:
        return {
            "metadata": self.metadata.to_dict(),
            "content": self.content,
            "filePath": self.file_path,
        }


@dataclass(frozen=True)
class ScenarioContext:
    """Scenario descriptor for a recommendation call.

    Accepts plain strings for ``type`` and ``priorities`` and normalizes
    them to their enums.

    Raises:
        ValueError: If ``type`` or any priority is outside its closed set.
    """
    type: RuleCategory
    language: str | None = None
    framework: str | None = None
    priorities: tuple[ScenarioFocus, ...] = ()

    def __post_init__(self) -> None:
        try:
            category = RuleCategory(self.type)
        except ValueError:
            raise ValueError(
                f"Invalid scenario type '{self.type}'. "
                f"Expected one of: {', '.join(RuleCategory.values())}"
            ) from None

        focuses = []
        for priority in self.priorities or ():
            try:
                focuses.append(ScenarioFocus(priority))
            except ValueError:
                raise ValueError(
                    f"Invalid scenario priority '{priority}'. "
                    f"Expected one of: {', '.join(f.value for f in ScenarioFocus)}"
                ) from None

        # frozen dataclass: normalize through object.__setattr__
        object.__setattr__(self, "type", category)
        object.__setattr__(self, "priorities", tuple(focuses))
        object.__setattr__(self, "language", self.language or None)
        object.__setattr__(self, "framework", self.framework or None)


@dataclass
class RecommendationBundle:
    """Result of a recommendation call.

    Attributes:
        name: Bundle name derived from the scenario
        description: Human-readable description derived from the scenario
        rules: Rules unique by id, sorted by priority
        scenarios: Facet labels, in the order their queries ran
    """
    name: str
    description: str
    rules: list[Rule] = field(default_factory=list)
    scenarios: list[str] = field(default_factory=list)

    @property
    def rule_ids(self) -> list[str]:
        return [rule.id for rule in self.rules]

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "scenarios": list(self.scenarios),
            "rules": [
                {
                    "id": r.metadata.id,
                    "title": r.metadata.title,
                    "category": r.metadata.category.value,
                    "filePath": r.file_path,
                    "priority": r.metadata.priority.value,
                }
                for r in self.rules
            ],
        }
