"""
Site Service - Business logic for work site management
"""
from typing import List
from sqlalchemy.orm import Session

from app.core.config import settings
from app.repositories.work_site_repository import WorkSiteRepository
from app.schemas.work_site import (
    LocationCheck,
    SiteTokenResponse,
    WorkSite,
    WorkSiteCreate,
    WorkSiteUpdate,
)
from app.services.geofence_service import GeofenceService
from app.services.site_token_service import SiteTokenService
from atams.exceptions import (
    NotFoundException,
    ConflictException,
)


class SiteService:
    def __init__(self) -> None:
        self.repo = WorkSiteRepository()
        self.geofence = GeofenceService()
        self.token_service = SiteTokenService()

    def list_sites(self, db: Session, org_id: int, search: str = "", skip: int = 0, limit: int = 100) -> List[WorkSite]:
        sites = self.repo.get_sites_with_search(db, org_id, search=search, skip=skip, limit=limit)
        return [WorkSite.model_validate(s) for s in sites]

    def count_sites(self, db: Session, org_id: int, search: str = "") -> int:
        return self.repo.count_sites_with_search(db, org_id, search=search)

    def active_sites(self, db: Session, org_id: int) -> List[WorkSite]:
        return [WorkSite.model_validate(s) for s in self.repo.get_active_sites(db, org_id)]

    def get_site(self, db: Session, org_id: int, ws_id: str) -> WorkSite:
        site = self.repo.get_by_id(db, org_id, ws_id)
        if not site:
            raise NotFoundException("Site not found")
        return WorkSite.model_validate(site)

    def create_site(self, db: Session, org_id: int, payload: WorkSiteCreate) -> WorkSite:
        if self.repo.check_site_exists(db, payload.ws_id):
            raise ConflictException("Site with this ID already exists")

        obj = self.repo.create(db, {
            "ws_id": payload.ws_id,
            "ws_org_id": org_id,
            "ws_name": payload.ws_name,
            "ws_address": payload.ws_address,
            "ws_latitude": payload.ws_latitude,
            "ws_longitude": payload.ws_longitude,
            "ws_radius_m": payload.ws_radius_m or settings.DEFAULT_SITE_RADIUS_M,
            "ws_active": True,
        })
        return WorkSite.model_validate(obj)

    def update_site(self, db: Session, org_id: int, ws_id: str, payload: WorkSiteUpdate) -> WorkSite:
        obj = self.repo.get_by_id(db, org_id, ws_id)
        if not obj:
            raise NotFoundException("Site not found")
        update_data = payload.model_dump(exclude_unset=True)
        if update_data.get("ws_radius_m") is None:
            update_data.pop("ws_radius_m", None)
        obj = self.repo.update(db, obj, update_data)
        return WorkSite.model_validate(obj)

    def delete_site(self, db: Session, org_id: int, ws_id: str) -> None:
        """Soft delete; refused while worker profiles still point at the site"""
        obj = self.repo.get_by_id(db, org_id, ws_id)
        if not obj:
            raise NotFoundException("Site not found")

        assigned = self.repo.count_assigned_workers(db, ws_id)
        if assigned:
            raise ConflictException(
                "Cannot delete site with assigned workers",
                {"assigned_workers": assigned}
            )

        self.repo.update(db, obj, {"ws_active": False})
        return None

    def check_location(self, db: Session, org_id: int, latitude: float, longitude: float) -> LocationCheck:
        return self.geofence.check_location(latitude, longitude, self.active_sites(db, org_id))

    def generate_token(self, db: Session, ws_id: str) -> SiteTokenResponse:
        """
        Issue a display token for a site

        Raises:
            NotFoundException: If the site does not exist or is inactive
        """
        site = self.repo.get(db, ws_id)
        if not site or not site.ws_active:
            raise NotFoundException("Site not found")

        token_data = self.token_service.issue(site.ws_id, site.ws_org_id)
        return SiteTokenResponse(**token_data)
