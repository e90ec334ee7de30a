"""Auto-categorization trigger route."""

from fastapi import APIRouter, HTTPException

from catrules.api.deps import AutoCategorizationJobDep
from catrules.models.execution import BatchReport
from catrules.schemas.common import APIResponse

router = APIRouter(prefix="/scheduler", tags=["scheduler"])


@router.post("/run", response_model=APIResponse[BatchReport])
async def run_auto_categorization(job: AutoCategorizationJobDep) -> APIResponse[BatchReport]:
    """Run one auto-categorization batch now."""
    run = await job.run_once()
    if not run.started:
        raise HTTPException(status_code=409, detail="Auto-categorization run already in progress")
    if run.error is not None:
        raise HTTPException(status_code=500, detail=f"Auto-categorization failed: {run.error}")

    return APIResponse(data=run.result)
