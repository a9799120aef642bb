"""Rules REST API endpoints."""

import logging

from fastapi import APIRouter, Depends, Query

from rulesd_core.rules import RuleCategory, RuleEngine
from rulesd_server.api.deps import get_engine
from rulesd_server.models import RuleDetailResponse, RuleListResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/rules", tags=["Rules"])


@router.get("", response_model=RuleListResponse)
async def list_rules(
    q: str | None = Query(None, description="Substring of title, description or body"),
    category: RuleCategory | None = Query(None),
    language: str | None = Query(None),
    tags: list[str] | None = Query(None, description="Match rules carrying any of these tags"),
    engine: RuleEngine = Depends(get_engine),
) -> RuleListResponse:
    """List rules. Every filter given must match."""
    rules = engine.search_rules(query=q, category=category, language=language, tags=tags)
    return RuleListResponse.from_rules(rules)


@router.get("/{rule_id}", response_model=RuleDetailResponse)
async def get_rule(
    rule_id: str,
    engine: RuleEngine = Depends(get_engine),
) -> RuleDetailResponse:
    """Get a rule with its full content."""
    return RuleDetailResponse.from_rule(engine.get_rule(rule_id))


@router.get("/{rule_id}/related", response_model=RuleListResponse)
async def get_related_rules(
    rule_id: str,
    engine: RuleEngine = Depends(get_engine),
) -> RuleListResponse:
    """Get the rules a rule declares as related."""
    return RuleListResponse.from_rules(engine.get_related_rules(rule_id))


@router.get("/{rule_id}/prerequisites", response_model=RuleListResponse)
async def get_prerequisites(
    rule_id: str,
    engine: RuleEngine = Depends(get_engine),
) -> RuleListResponse:
    """Get the rules a rule declares as prerequisites."""
    return RuleListResponse.from_rules(engine.get_prerequisites(rule_id))
