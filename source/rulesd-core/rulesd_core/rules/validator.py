"""Rule document validation for rules.d.

Checks the structure of loaded rule documents. Errors mark a document as
failing; warnings are reported but do not fail it.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable

from rulesd_core.rules.index import RuleIndex
from rulesd_core.rules.models import Rule


logger = logging.getLogger(__name__)

# Body size above which a rule is reported as very large
MAX_CONTENT_LENGTH = 50000

# Tab warnings reported per document
MAX_TAB_WARNINGS = 5


@dataclass
class ValidationResult:
    """Validation outcome for one rule document."""
    rule_id: str
    file_path: str
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.errors


class RuleValidator:
    """Validates rule documents and the references between them."""

    def validate_rule(self, rule: Rule, known_ids: Iterable[str] | None = None) -> ValidationResult:
        """Validate a single rule.

        Args:
            rule: Rule to validate.
            known_ids: Ids of every loaded rule. When given, declared
                ``related`` and ``prerequisites`` ids are checked against it.

        Returns:
            ValidationResult with errors and warnings.
        """
        result = ValidationResult(rule_id=rule.id, file_path=rule.file_path)
        content = rule.content

        if not content.strip():
            result.errors.append("Rule body is empty")
            return result

        if not content.startswith("# "):
            result.errors.append("Missing title (body should start with '# ')")

        lines = content.splitlines()
        if not any(line.startswith("## ") for line in lines):
            result.warnings.append("No level-2 headings found")

        tab_lines = [n for n, line in enumerate(lines, start=1) if "\t" in line]
        for line_num in tab_lines[:MAX_TAB_WARNINGS]:
            result.warnings.append(f"Tab character on body line {line_num} (use spaces)")
        if len(tab_lines) > MAX_TAB_WARNINGS:
            result.warnings.append(
                f"{len(tab_lines) - MAX_TAB_WARNINGS} more body lines contain tab characters"
            )

        if len(content) > MAX_CONTENT_LENGTH:
            result.warnings.append("Rule content is very large, may impact performance")

        if known_ids is not None:
            known = set(known_ids)
            meta = rule.metadata
            for label, ids in (("related", meta.related), ("prerequisite", meta.prerequisites)):
                for ref in ids or ():
                    if ref not in known:
                        result.warnings.append(f"Unknown {label} rule: {ref}")

        return result

    def validate_index(self, index: RuleIndex) -> list[ValidationResult]:
        """Validate every rule of an index, in discovery order.

        Also reports rules whose id is shadowed by an earlier rule.
        """
        known_ids = {rule.id for rule in index}
        results = []
        for rule in index:
            result = self.validate_rule(rule, known_ids)
            first = index.get(rule.id)
            if first is not None and first is not rule:
                result.errors.append(f"Duplicate rule id, already defined in {first.file_path}")
            results.append(result)

        failed = sum(1 for r in results if not r.passed)
        logger.info(f"Validated {len(results)} rules, {failed} failed")
        return results
