"""Pytest configuration and fixtures for rules.d core tests."""

import pytest
from pathlib import Path

from rulesd_core.rules import MemoryRuleStore, RuleEngine, RuleIndex


SAMPLE_CORPUS = {
    "rules.md": """# General AI Operations

Be explicit about assumptions and verify results before reporting them.
""",
    "coding/python-rules.md": """---
id: python-rules
priority: high
tags: [python, security, performance]
applicability:
  frameworks: [django, flask]
related: [testing-rules, missing-rule]
prerequisites: [rules]
---

# Python Development Rules

Follow PEP 8 and validate all input.
""",
    "coding/testing-rules.md": """---
id: testing-rules
priority: medium
---

# Testing Rules

Write unit tests before fixing a bug.
""",
    "coding/javascript-rules.md": """# JavaScript Rules

Keep bundles small for performance. Prefer const over let.
""",
    "security/secrets-rules.md": """---
id: secrets-rules
priority: critical
tags: [security]
---

# Secrets Handling

Never commit credentials.
""",
    "writing/style-rules.md": """# Writing Style

Prefer short sentences. Describe images for accessibility.
""",
}


def _write_corpus(root: Path, documents: dict[str, str]) -> Path:
    for relative, text in documents.items():
        target = root / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text, encoding="utf-8")
    return root


@pytest.fixture
def write_corpus():
    """Return a helper that writes documents under a root directory."""
    return _write_corpus


@pytest.fixture
def rules_dir(tmp_path) -> Path:
    """Create a temporary corpus with a handful of rule documents."""
    return _write_corpus(tmp_path / "corpus", SAMPLE_CORPUS)


@pytest.fixture
def memory_store() -> MemoryRuleStore:
    """Create a memory store holding the sample corpus."""
    return MemoryRuleStore(SAMPLE_CORPUS)


@pytest.fixture
def index(memory_store) -> RuleIndex:
    return RuleIndex.from_store(memory_store)


@pytest.fixture
def engine(memory_store) -> RuleEngine:
    """Create an initialized engine over the sample corpus."""
    engine = RuleEngine(store=memory_store)
    engine.initialize()
    return engine
