"""Pre-configured scenario bundles.

Bundles are recomputed from the index on every call so they always reflect
the loaded corpus.
"""

from rulesd_core.rules.index import RuleIndex
from rulesd_core.rules.models import RecommendationBundle, ScenarioContext
from rulesd_core.rules.recommender import RuleRecommender


COMMON_SCENARIOS: dict[str, ScenarioContext] = {
    "python-web-development": ScenarioContext(
        type="coding",
        language="python",
        priorities=("security", "performance"),
    ),
    "javascript-frontend": ScenarioContext(
        type="coding",
        language="javascript",
        priorities=("accessibility", "performance"),
    ),
    "api-development": ScenarioContext(
        type="coding",
        priorities=("security", "performance"),
    ),
    "documentation-writing": ScenarioContext(
        type="writing",
        priorities=("accessibility",),
    ),
    "data-analysis": ScenarioContext(
        type="data",
        language="python",
    ),
    "devops-cicd": ScenarioContext(
        type="devops",
        priorities=("security",),
    ),
}


def common_bundles(index: RuleIndex) -> dict[str, RecommendationBundle]:
    """Run every catalog scenario against ``index``.

    Returns:
        Mapping of bundle key to bundle, in catalog order.
    """
    recommender = RuleRecommender(index)
    return {
        key: recommender.recommend(context)
        for key, context in COMMON_SCENARIOS.items()
    }
