"""In-memory rule index for rules.d.

A RuleIndex is built once from a RuleStore and is read-only afterwards.
All queries are linear scans returning rules in discovery order, so they
are safe to call from several threads without locking.
"""

import logging
from pathlib import Path
from typing import Iterable, Iterator

from rulesd_core.rules.models import Rule, RuleCategory
from rulesd_core.rules.store import DEFAULT_EXCLUDE_DIRS, FileRuleStore, RuleStore


logger = logging.getLogger(__name__)


class RuleIndex:
    """Immutable collection of loaded rules.

    Example:
        index = RuleIndex.load(Path("rules.d"))
        python_rules = index.by_language("python")
    """

    __slots__ = ("_rules", "_by_id")

    def __init__(self, rules: Iterable[Rule] = ()):
        rules = tuple(rules)
        by_id: dict[str, Rule] = {}
        for rule in rules:
            if rule.id in by_id:
                logger.warning(
                    f"Duplicate rule id '{rule.id}' in {rule.file_path} "
                    f"(first defined in {by_id[rule.id].file_path})"
                )
                continue
            by_id[rule.id] = rule

        object.__setattr__(self, "_rules", rules)
        object.__setattr__(self, "_by_id", by_id)

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("RuleIndex is read-only")

    @classmethod
    def load(
        cls,
        root: Path | str,
        *,
        exclude_dirs: Iterable[str] = DEFAULT_EXCLUDE_DIRS,
        max_workers: int = 1,
    ) -> "RuleIndex":
        """Build an index from the rule documents under ``root``.

        A missing root yields an empty index.
        """
        store = FileRuleStore(Path(root), exclude_dirs=exclude_dirs, max_workers=max_workers)
        return cls.from_store(store)

    @classmethod
    def from_store(cls, store: RuleStore) -> "RuleIndex":
        return cls(store.load_rules())

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._by_id

    def __repr__(self) -> str:
        return f"RuleIndex({len(self._rules)} rules)"

    def all(self) -> list[Rule]:
        """All rules in discovery order."""
        return list(self._rules)

    def get(self, rule_id: str) -> Rule | None:
        """Look up a rule by id; the first rule wins when ids collide."""
        return self._by_id.get(rule_id)

    def by_category(self, category: RuleCategory | str) -> list[Rule]:
        """Rules whose category equals ``category``."""
        return [r for r in self._rules if r.metadata.category == category]

    def by_language(self, language: str) -> list[Rule]:
        """Rules written for ``language``, plus every universal rule."""
        return [
            r for r in self._rules
            if language in r.metadata.languages or r.metadata.is_universal
        ]

    def by_tags(self, tags: Iterable[str]) -> list[Rule]:
        """Rules carrying at least one of ``tags``."""
        wanted = set(tags)
        if not wanted:
            return []
        return [r for r in self._rules if wanted.intersection(r.metadata.tags)]

    def by_framework(self, framework: str) -> list[Rule]:
        """Rules whose applicability lists ``framework`` exactly."""
        return [r for r in self._rules if framework in r.metadata.frameworks]

    def by_substring(self, query: str) -> list[Rule]:
        """Case-insensitive substring search over title, description and body."""
        needle = query.lower()
        return [r for r in self._rules if _matches_text(r, needle)]


def _matches_text(rule: Rule, needle: str) -> bool:
    meta = rule.metadata
    return (
        needle in meta.title.lower()
        or (meta.description is not None and needle in meta.description.lower())
        or needle in rule.content.lower()
    )
