"""Test configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient

from rulesd_core.rules import MemoryRuleStore, RuleEngine
from rulesd_server.config import ServerSettings
from rulesd_server.main import create_app


CORPUS = {
    "rules.md": "# General AI Operations\n\nState assumptions explicitly.\n",
    "coding/python-rules.md": (
        "---\nid: python-rules\npriority: high\ntags: [python, security]\n"
        "description: Python conventions\n"
        "applicability:\n  frameworks: [django]\n"
        "related: [testing-rules, missing-id]\nprerequisites: [rules]\n"
        "---\n# Python Development Rules\n\nFollow PEP 8.\n"
    ),
    "coding/testing-rules.md": "# Testing Rules\n\nWrite the test first.\n",
    "security/secrets-rules.md": (
        "---\nid: secrets-rules\npriority: critical\n---\n# Secrets\n\nNever commit credentials.\n"
    ),
}


@pytest.fixture
def settings() -> ServerSettings:
    """Create test settings."""
    return ServerSettings(host="127.0.0.1", port=8000)


@pytest.fixture
def engine() -> RuleEngine:
    """Create an initialized engine over the sample corpus."""
    engine = RuleEngine(store=MemoryRuleStore(CORPUS))
    engine.initialize()
    return engine


@pytest.fixture
def app(engine):
    """Create test FastAPI app serving the sample corpus."""
    return create_app(engine=engine)


@pytest.fixture
def client(app) -> TestClient:
    """Create test client."""
    return TestClient(app)
