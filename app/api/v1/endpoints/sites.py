"""
Sites Endpoints - Work site management, location checks and display tokens
"""
from fastapi import APIRouter, Depends, Header, Query, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.services.site_service import SiteService
from app.schemas import (
    WorkSite,
    WorkSiteCreate,
    WorkSiteUpdate,
    LocationCheckRequest,
    LocationCheck,
    SiteTokenResponse,
    WorkerContext,
    DataResponse,
    PaginationResponse
)
from app.api.deps import get_worker_context, require_min_role_level
from app.core.config import settings
from atams.encryption import encrypt_response_data
from atams.exceptions import ForbiddenException

router = APIRouter()
site_service = SiteService()


@router.get(
    "/",
    response_model=PaginationResponse[WorkSite],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(50))]
)
async def list_sites(
    search: str = Query("", description="Search sites by name"),
    skip: int = Query(0, ge=0, description="Number of records to skip"),
    limit: int = Query(100, ge=1, le=1000, description="Maximum records to return"),
    db: Session = Depends(get_db),
    context: WorkerContext = Depends(get_worker_context)
):
    """
    Get active sites of the caller's organization

    **Authorization:**
    - Requires role level >= 50 (Admin or above)
    """
    sites = site_service.list_sites(db, context.org_id, search=search, skip=skip, limit=limit)
    total = site_service.count_sites(db, context.org_id, search=search)

    response = PaginationResponse(
        success=True,
        message="Sites retrieved successfully",
        data=sites,
        total=total,
        page=skip // limit + 1,
        size=limit,
        pages=(total + limit - 1) // limit
    )

    return encrypt_response_data(response, settings)


@router.post(
    "/verify",
    response_model=DataResponse[LocationCheck],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(1))]
)
async def verify_location(
    request: LocationCheckRequest,
    db: Session = Depends(get_db),
    context: WorkerContext = Depends(get_worker_context)
):
    """
    Distance from a coordinate to every active site, nearest first

    Nothing is recorded; use it to preview whether a clock-in would pass.
    """
    check = site_service.check_location(db, context.org_id, request.latitude, request.longitude)

    return DataResponse(
        success=True,
        message="Location verified" if check.is_valid else "No site within range",
        data=check
    )


@router.get(
    "/{ws_id}",
    response_model=DataResponse[WorkSite],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(50))]
)
async def get_site(
    ws_id: str,
    db: Session = Depends(get_db),
    context: WorkerContext = Depends(get_worker_context)
):
    site = site_service.get_site(db, context.org_id, ws_id)

    response = DataResponse(
        success=True,
        message="Site retrieved successfully",
        data=site
    )

    return encrypt_response_data(response, settings)


@router.post(
    "/",
    response_model=DataResponse[WorkSite],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_min_role_level(50))]
)
async def create_site(
    site: WorkSiteCreate,
    db: Session = Depends(get_db),
    context: WorkerContext = Depends(get_worker_context)
):
    """
    Create new site

    **Validation:**
    - ws_id: required, unique, max 50 characters
    - ws_latitude / ws_longitude: required, valid coordinates
    - ws_radius_m: optional, defaults to DEFAULT_SITE_RADIUS_M
    """
    new_site = site_service.create_site(db, context.org_id, site)

    return DataResponse(
        success=True,
        message="Site created successfully",
        data=new_site
    )


@router.put(
    "/{ws_id}",
    response_model=DataResponse[WorkSite],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(50))]
)
async def update_site(
    ws_id: str,
    site: WorkSiteUpdate,
    db: Session = Depends(get_db),
    context: WorkerContext = Depends(get_worker_context)
):
    updated_site = site_service.update_site(db, context.org_id, ws_id, site)

    return DataResponse(
        success=True,
        message="Site updated successfully",
        data=updated_site
    )


@router.delete(
    "/{ws_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_min_role_level(50))]
)
async def delete_site(
    ws_id: str,
    db: Session = Depends(get_db),
    context: WorkerContext = Depends(get_worker_context)
):
    """
    Deactivate site

    **Note:**
    - Refused with 409 while worker profiles are assigned to the site
    """
    site_service.delete_site(db, context.org_id, ws_id)

    return None


@router.get(
    "/{ws_id}/token",
    response_model=DataResponse[SiteTokenResponse],
    status_code=status.HTTP_200_OK
)
async def get_site_token(
    ws_id: str,
    x_display_key: str = Header(..., alias="X-Display-Key"),
    db: Session = Depends(get_db)
):
    """
    Rotating token for a site display

    **Authentication:**
    - Requires X-Display-Key header matching DISPLAY_API_KEY
    """
    if x_display_key != settings.DISPLAY_API_KEY:
        raise ForbiddenException("Invalid display API key")

    token_response = site_service.generate_token(db, ws_id)

    return DataResponse(
        success=True,
        message="Site token generated successfully",
        data=token_response
    )
