"""
Schedules Endpoints - Schedule management, approval and today's schedules
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date, datetime, timezone

from app.db.session import get_db
from app.services.schedule_service import ScheduleService
from app.schemas import (
    ScheduleCreate,
    ScheduleUpdate,
    ScheduleReject,
    ScheduleDefinition,
    ScheduleStatus,
    WorkerContext,
    DataResponse,
    PaginationResponse
)
from app.api.deps import get_worker_context, require_min_role_level
from app.core.config import settings
from atams.encryption import encrypt_response_data

router = APIRouter()
schedule_service = ScheduleService()


@router.get(
    "/me/today",
    response_model=DataResponse[List[ScheduleDefinition]],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(1))]
)
async def get_my_schedules_today(
    db: Session = Depends(get_db),
    context: WorkerContext = Depends(get_worker_context)
):
    """
    Approved schedules applying to the caller on their local date

    Matches schedules assigned to the worker, any of their teams, their
    department or their site, sorted by start time.
    """
    schedules = schedule_service.get_today_for_worker(db, context, datetime.now(timezone.utc))

    response = DataResponse(
        success=True,
        message="Schedules retrieved successfully",
        data=schedules
    )

    return encrypt_response_data(response, settings)


@router.get(
    "/",
    response_model=PaginationResponse[ScheduleDefinition],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(50))]
)
async def list_schedules(
    sc_status: Optional[ScheduleStatus] = Query(None, description="Filter by status"),
    worker_id: Optional[int] = Query(None, description="Filter by assigned worker"),
    date_from: Optional[date] = Query(None, description="Schedules running on or after (YYYY-MM-DD)"),
    date_to: Optional[date] = Query(None, description="Schedules starting on or before (YYYY-MM-DD)"),
    skip: int = Query(0, ge=0, description="Number of records to skip"),
    limit: int = Query(100, ge=1, le=1000, description="Maximum records to return"),
    db: Session = Depends(get_db),
    context: WorkerContext = Depends(get_worker_context)
):
    """
    Get schedules of the caller's organization

    **Authorization:**
    - Requires role level >= 50 (Admin or above)
    """
    schedules = schedule_service.list_schedules(
        db, context.org_id,
        status=sc_status,
        worker_id=worker_id,
        date_from=date_from,
        date_to=date_to,
        skip=skip,
        limit=limit
    )
    total = schedule_service.count_schedules(db, context.org_id, status=sc_status, worker_id=worker_id)

    response = PaginationResponse(
        success=True,
        message="Schedules retrieved successfully",
        data=schedules,
        total=total,
        page=skip // limit + 1,
        size=limit,
        pages=(total + limit - 1) // limit
    )

    return encrypt_response_data(response, settings)


@router.get(
    "/{sc_id}",
    response_model=DataResponse[ScheduleDefinition],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(50))]
)
async def get_schedule(
    sc_id: int,
    db: Session = Depends(get_db),
    context: WorkerContext = Depends(get_worker_context)
):
    schedule = schedule_service.get_schedule(db, context.org_id, sc_id)

    response = DataResponse(
        success=True,
        message="Schedule retrieved successfully",
        data=schedule
    )

    return encrypt_response_data(response, settings)


@router.post(
    "/",
    response_model=DataResponse[ScheduleDefinition],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_min_role_level(50))]
)
async def create_schedule(
    schedule: ScheduleCreate,
    db: Session = Depends(get_db),
    context: WorkerContext = Depends(get_worker_context)
):
    """
    Create new schedule

    **Validation:**
    - assignment: one of worker, team, department, site or none
    - recurrence_days: SUN..SAT tokens, used when sc_is_recurring is true
    - New schedules start as PENDING
    """
    new_schedule = schedule_service.create_schedule(db, context.org_id, context.worker_id, schedule)

    return DataResponse(
        success=True,
        message="Schedule created successfully",
        data=new_schedule
    )


@router.put(
    "/{sc_id}",
    response_model=DataResponse[ScheduleDefinition],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(50))]
)
async def update_schedule(
    sc_id: int,
    schedule: ScheduleUpdate,
    db: Session = Depends(get_db),
    context: WorkerContext = Depends(get_worker_context)
):
    updated = schedule_service.update_schedule(db, context.org_id, sc_id, schedule)

    return DataResponse(
        success=True,
        message="Schedule updated successfully",
        data=updated
    )


@router.delete(
    "/{sc_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_min_role_level(50))]
)
async def delete_schedule(
    sc_id: int,
    db: Session = Depends(get_db),
    context: WorkerContext = Depends(get_worker_context)
):
    """Deactivate schedule"""
    schedule_service.delete_schedule(db, context.org_id, sc_id)

    return None


@router.post(
    "/{sc_id}/approve",
    response_model=DataResponse[ScheduleDefinition],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(50))]
)
async def approve_schedule(
    sc_id: int,
    db: Session = Depends(get_db),
    context: WorkerContext = Depends(get_worker_context)
):
    approved = schedule_service.approve_schedule(db, context.org_id, sc_id, context.worker_id)

    return DataResponse(
        success=True,
        message="Schedule approved successfully",
        data=approved
    )


@router.post(
    "/{sc_id}/reject",
    response_model=DataResponse[ScheduleDefinition],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(50))]
)
async def reject_schedule(
    sc_id: int,
    payload: ScheduleReject,
    db: Session = Depends(get_db),
    context: WorkerContext = Depends(get_worker_context)
):
    """Reject schedule; an optional reason is appended to the description"""
    rejected = schedule_service.reject_schedule(db, context.org_id, sc_id, context.worker_id, payload)

    return DataResponse(
        success=True,
        message="Schedule rejected",
        data=rejected
    )
