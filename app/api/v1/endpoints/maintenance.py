"""
Maintenance Endpoints - Data repair operations
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.services.recurrence_repair_service import RecurrenceRepairService
from app.schemas import DataResponse, RecurrenceRepairResult, WorkerContext
from app.api.deps import get_worker_context, require_min_role_level

router = APIRouter()
repair_service = RecurrenceRepairService()


@router.post(
    "/fix-recurrence",
    response_model=DataResponse[RecurrenceRepairResult],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(50))]
)
async def fix_recurrence(
    db: Session = Depends(get_db),
    context: WorkerContext = Depends(get_worker_context)
):
    """
    Rewrite malformed recurrence day lists of the caller's organization

    **Authorization:**
    - Requires role level >= 50 (Admin or above)

    **Use case:**
    - Values written as double-encoded JSON or comma lists are rewritten as
      canonical JSON arrays
    - Values with no recognizable weekday are reported, not changed
    """
    result = repair_service.repair(db, context.org_id)

    response = DataResponse(
        success=True,
        message="Recurrence repair completed",
        data=result
    )

    return response
