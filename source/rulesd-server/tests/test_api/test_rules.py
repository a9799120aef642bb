"""Tests for the rules endpoints."""

import pytest
from fastapi.testclient import TestClient

from rulesd_core.rules import MemoryRuleStore, RuleEngine
from rulesd_server.main import create_app


class TestListRules:
    """Tests for GET /api/v1/rules."""

    def test_list_all(self, client):
        data = client.get("/api/v1/rules").json()

        assert data["total"] == 4
        assert [r["id"] for r in data["rules"]] == [
            "rules", "python-rules", "testing-rules", "secrets-rules",
        ]

    def test_summary_fields(self, client):
        rule = client.get("/api/v1/rules", params={"category": "coding"}).json()["rules"][0]

        assert rule == {
            "id": "python-rules",
            "title": "Python Development Rules",
            "category": "coding",
            "language": "python",
            "tags": ["python", "security"],
            "priority": "high",
            "description": "Python conventions",
            "file_path": "coding/python-rules.md",
        }

    def test_filters_combine(self, client):
        data = client.get(
            "/api/v1/rules", params={"category": "coding", "q": "test first"}
        ).json()
        assert [r["id"] for r in data["rules"]] == ["testing-rules"]

    def test_tags_match_any(self, client):
        data = client.get(
            "/api/v1/rules", params=[("tags", "security"), ("tags", "nonexistent-tag")]
        ).json()
        assert [r["id"] for r in data["rules"]] == ["python-rules"]

    def test_invalid_category(self, client):
        assert client.get("/api/v1/rules", params={"category": "cooking"}).status_code == 422


class TestGetRule:
    """Tests for single-rule endpoints."""

    def test_get_rule(self, client):
        data = client.get("/api/v1/rules/python-rules").json()

        assert data["metadata"]["id"] == "python-rules"
        assert data["metadata"]["applicability"]["frameworks"] == ["django"]
        assert data["content"].endswith("Follow PEP 8.")
        assert data["file_path"] == "coding/python-rules.md"

    def test_get_unknown_rule(self, client):
        response = client.get("/api/v1/rules/nope")

        assert response.status_code == 404
        assert response.json() == {
            "error_code": "RULE_NOT_FOUND",
            "message": "Rule not found: nope",
            "details": {"rule_id": "nope"},
        }

    def test_related_skips_missing(self, client):
        data = client.get("/api/v1/rules/python-rules/related").json()
        assert [r["id"] for r in data["rules"]] == ["testing-rules"]

    def test_prerequisites(self, client):
        data = client.get("/api/v1/rules/python-rules/prerequisites").json()
        assert [r["id"] for r in data["rules"]] == ["rules"]

    def test_related_unknown_rule(self, client):
        assert client.get("/api/v1/rules/nope/related").status_code == 404

    def test_engine_not_initialized(self):
        app = create_app(engine=RuleEngine(store=MemoryRuleStore()))
        response = TestClient(app).get("/api/v1/rules")

        assert response.status_code == 503
        assert response.json()["error_code"] == "SERVICE_UNAVAILABLE"
