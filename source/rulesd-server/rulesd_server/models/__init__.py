"""Pydantic models for API requests and responses."""

from rulesd_server.models.common import ErrorResponse, HealthResponse
from rulesd_server.models.rules import (
    BundleListResponse,
    BundleResponse,
    BundleRuleResponse,
    RecommendRequest,
    RuleDetailResponse,
    RuleListResponse,
    RuleSummaryResponse,
)

__all__ = [
    "ErrorResponse",
    "HealthResponse",
    "BundleListResponse",
    "BundleResponse",
    "BundleRuleResponse",
    "RecommendRequest",
    "RuleDetailResponse",
    "RuleListResponse",
    "RuleSummaryResponse",
]
