"""
Work Site Repository - Data access layer for work sites
"""
from typing import Optional, List
from sqlalchemy.orm import Session
from sqlalchemy import and_

from atams.db import BaseRepository
from app.models.work_site import WorkSite
from app.models.worker import WorkerProfile


class WorkSiteRepository(BaseRepository[WorkSite]):
    def __init__(self):
        super().__init__(WorkSite)

    def get_by_id(self, db: Session, org_id: int, site_id: str) -> Optional[WorkSite]:
        """Get an active site of the organization by ID using ORM"""
        return db.query(WorkSite).filter(
            and_(
                WorkSite.ws_org_id == org_id,
                WorkSite.ws_id == site_id,
                WorkSite.ws_active.is_(True)
            )
        ).first()

    def get_active_sites(self, db: Session, org_id: int) -> List[WorkSite]:
        """All active sites of the organization in a stable order"""
        return db.query(WorkSite).filter(
            and_(
                WorkSite.ws_org_id == org_id,
                WorkSite.ws_active.is_(True)
            )
        ).order_by(WorkSite.ws_created_at.asc(), WorkSite.ws_id.asc()).all()

    def get_sites_with_search(
        self,
        db: Session,
        org_id: int,
        search: str = "",
        skip: int = 0,
        limit: int = 100
    ) -> List[WorkSite]:
        """Get active sites with optional search filter using ORM"""
        query = db.query(WorkSite).filter(
            and_(
                WorkSite.ws_org_id == org_id,
                WorkSite.ws_active.is_(True)
            )
        )

        if search:
            query = query.filter(WorkSite.ws_name.ilike(f"%{search}%"))

        return query.order_by(WorkSite.ws_name.asc()).offset(skip).limit(limit).all()

    def count_sites_with_search(self, db: Session, org_id: int, search: str = "") -> int:
        """Count active sites with optional search filter using native SQL"""
        if search:
            query = """
                SELECT COUNT(*)
                FROM hris.work_sites
                WHERE ws_org_id = :org_id
                AND ws_active = TRUE
                AND ws_name ILIKE :search
            """
            return self.execute_raw_sql_scalar(db, query, {"org_id": org_id, "search": f"%{search}%"})
        else:
            query = "SELECT COUNT(*) FROM hris.work_sites WHERE ws_org_id = :org_id AND ws_active = TRUE"
            return self.execute_raw_sql_scalar(db, query, {"org_id": org_id})

    def check_site_exists(self, db: Session, site_id: str) -> bool:
        """Check if a site ID is taken in any organization, active or not"""
        query = "SELECT 1 FROM hris.work_sites WHERE ws_id = :site_id LIMIT 1"
        result = self.execute_raw_sql_scalar(db, query, {"site_id": site_id})
        return result is not None

    def count_assigned_workers(self, db: Session, site_id: str) -> int:
        """Workers whose profile points at the site"""
        return db.query(WorkerProfile).filter(WorkerProfile.wp_site_id == site_id).count()
