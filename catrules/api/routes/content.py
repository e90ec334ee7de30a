"""On-demand rule execution and content analysis routes."""

from fastapi import APIRouter, HTTPException

from catrules.api.deps import OrchestratorDep
from catrules.core.errors import NotFoundError
from catrules.models.execution import RuleRunReport
from catrules.models.features import FeatureSet
from catrules.schemas.common import APIResponse

router = APIRouter(prefix="/content", tags=["content"])


@router.post("/{content_id}/run", response_model=APIResponse[RuleRunReport])
async def run_rules_for_content(
    content_id: str,
    orchestrator: OrchestratorDep,
) -> APIResponse[RuleRunReport]:
    """Run all active rules against a content item.

    Returns the matching rules in priority order; no match is an empty list.
    """
    try:
        report = await orchestrator.execute(content_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e

    return APIResponse(message="Rules executed successfully", data=report)


@router.get("/{content_id}/analysis", response_model=APIResponse[FeatureSet])
async def analyze_content(
    content_id: str,
    orchestrator: OrchestratorDep,
) -> APIResponse[FeatureSet]:
    """Extract the features rules are evaluated against."""
    try:
        features = await orchestrator.analyze_content(content_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e

    return APIResponse(message="Content analysis completed successfully", data=features)
