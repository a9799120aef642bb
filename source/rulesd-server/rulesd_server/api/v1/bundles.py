"""Bundle recommendation endpoints."""

import logging

from fastapi import APIRouter, Depends

from rulesd_core.rules import RuleEngine
from rulesd_server.api.deps import get_engine
from rulesd_server.models import BundleListResponse, BundleResponse, RecommendRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bundles", tags=["Bundles"])


@router.post("/recommend", response_model=BundleResponse)
async def recommend_bundle(
    request: RecommendRequest,
    engine: RuleEngine = Depends(get_engine),
) -> BundleResponse:
    """Recommend a bundle of rules for a scenario."""
    context = request.to_context()
    bundle = engine.recommend_bundle(context)
    logger.info(f"Recommended bundle '{bundle.name}' with {len(bundle.rules)} rules")
    return BundleResponse.from_bundle(bundle)


@router.get("", response_model=BundleListResponse)
async def list_common_bundles(
    engine: RuleEngine = Depends(get_engine),
) -> BundleListResponse:
    """Get the pre-configured bundles for common scenarios."""
    bundles = engine.get_common_bundles()
    return BundleListResponse(
        bundles={key: BundleResponse.from_bundle(b) for key, b in bundles.items()},
        total=len(bundles),
    )
