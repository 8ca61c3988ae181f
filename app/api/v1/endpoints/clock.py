"""
Clock Endpoints - Punches, live status, daily events, timesheets and team status
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date

from app.db.session import get_db
from app.services.clock_service import ClockService
from app.schemas import (
    PunchRequest,
    PunchResponse,
    PunchEvent,
    LedgerSummary,
    TeamMemberStatus,
    TimesheetSummary,
    DataResponse
)
from app.api.deps import require_auth, require_min_role_level
from app.core.config import settings
from atams.encryption import encrypt_response_data

router = APIRouter()
clock_service = ClockService()


@router.post(
    "/in",
    response_model=DataResponse[PunchResponse],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(1))]
)
async def clock_in(
    request: PunchRequest,
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_auth)
):
    """
    Clock in

    **Process:**
    1. Refuse unless currently clocked out
    2. Geofence check against the nearest active site, or the site pinned by
       `site_id` / `site_token`
    3. Append CLOCK_IN punch and return today's ledger

    **Errors:**
    - 400: Already clocked in, missing coordinates, invalid site token
    - 403: Outside the site radius (details carry distance and radius)
    - 404: Requested site not found or no worker profile
    - 422: Organization has no active site
    """
    result = clock_service.clock_in(db, current_user["user_id"], request)

    return DataResponse(
        success=True,
        message=result.message,
        data=result
    )


@router.post(
    "/out",
    response_model=DataResponse[PunchResponse],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(1))]
)
async def clock_out(
    request: PunchRequest,
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_auth)
):
    """Clock out from CLOCKED_IN or ON_BREAK"""
    result = clock_service.clock_out(db, current_user["user_id"], request)

    return DataResponse(
        success=True,
        message=result.message,
        data=result
    )


@router.post(
    "/break/start",
    response_model=DataResponse[PunchResponse],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(1))]
)
async def start_break(
    request: PunchRequest,
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_auth)
):
    result = clock_service.start_break(db, current_user["user_id"], request)

    return DataResponse(
        success=True,
        message=result.message,
        data=result
    )


@router.post(
    "/break/end",
    response_model=DataResponse[PunchResponse],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(1))]
)
async def end_break(
    request: PunchRequest,
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_auth)
):
    result = clock_service.end_break(db, current_user["user_id"], request)

    return DataResponse(
        success=True,
        message=result.message,
        data=result
    )


@router.get(
    "/me/status",
    response_model=DataResponse[LedgerSummary],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(1))]
)
async def get_my_status(
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_auth)
):
    """
    Get current user's status with worked and break hours for today

    Hours are computed at request time; an open interval counts up to now.
    """
    summary = clock_service.get_status(db, current_user["user_id"])

    response = DataResponse(
        success=True,
        message="Status retrieved successfully",
        data=summary
    )

    return encrypt_response_data(response, settings)


@router.get(
    "/me/events",
    response_model=DataResponse[List[PunchEvent]],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(1))]
)
async def get_my_events(
    target_date: Optional[date] = Query(None, description="Local date (YYYY-MM-DD), default today"),
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_auth)
):
    """Get current user's punches for a local day, oldest first"""
    events = clock_service.get_events(db, current_user["user_id"], target_date)

    response = DataResponse(
        success=True,
        message="Punch events retrieved successfully",
        data=events
    )

    return encrypt_response_data(response, settings)


@router.get(
    "/me/timesheet",
    response_model=DataResponse[TimesheetSummary],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(1))]
)
async def get_my_timesheet(
    date_from: date = Query(..., description="First local date (YYYY-MM-DD)"),
    date_to: date = Query(..., description="Last local date (YYYY-MM-DD), inclusive"),
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_auth)
):
    """
    Get current user's timesheet

    **Response:**
    - One row per day with punches
    - Worked hours split into regular (up to REGULAR_HOURS_PER_DAY) and overtime
    """
    timesheet = clock_service.get_timesheet(db, current_user["user_id"], date_from, date_to)

    response = DataResponse(
        success=True,
        message="Timesheet retrieved successfully",
        data=timesheet
    )

    return encrypt_response_data(response, settings)


@router.get(
    "/team/status",
    response_model=DataResponse[List[TeamMemberStatus]],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(50))]
)
async def get_team_status(
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_auth)
):
    """
    Get every worker's status and hours for today (manager view)

    **Response:**
    - One row per worker in the caller's organization
    - `clocked_in_at` set while the worker is clocked in or on break
    """
    members = clock_service.get_team_status(db, current_user["user_id"])

    response = DataResponse(
        success=True,
        message="Team status retrieved successfully",
        data=members
    )

    return encrypt_response_data(response, settings)
