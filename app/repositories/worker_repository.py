"""
Worker Repository - Builds the worker context used by the resolvers
"""
from typing import Optional, List
from sqlalchemy.orm import Session

from atams.db import BaseRepository
from app.models.worker import WorkerProfile, TeamMember
from app.schemas.worker import WorkerContext
from app.core.exceptions import WorkerContextException


class WorkerRepository(BaseRepository[WorkerProfile]):
    def __init__(self):
        super().__init__(WorkerProfile)

    def get_profile(self, db: Session, user_id: int) -> Optional[WorkerProfile]:
        return db.query(WorkerProfile).filter(WorkerProfile.wp_user_id == user_id).first()

    def get_team_ids(self, db: Session, user_id: int) -> List[int]:
        rows = db.query(TeamMember.tm_team_id).filter(TeamMember.tm_user_id == user_id).all()
        return [row[0] for row in rows]

    def get_org_workers(self, db: Session, org_id: int) -> List[WorkerProfile]:
        return db.query(WorkerProfile).filter(
            WorkerProfile.wp_org_id == org_id
        ).order_by(WorkerProfile.wp_user_id.asc()).all()

    def get_context(self, db: Session, user_id: int, default_timezone: str = "UTC") -> WorkerContext:
        """
        Snapshot of the worker's organization, teams, department and site

        Raises:
            WorkerContextException: If the user has no worker profile
        """
        profile = self.get_profile(db, user_id)
        if profile is None:
            raise WorkerContextException(user_id)

        return WorkerContext(
            worker_id=profile.wp_user_id,
            org_id=profile.wp_org_id,
            team_ids=frozenset(self.get_team_ids(db, user_id)),
            department_id=profile.wp_department_id,
            site_id=profile.wp_site_id,
            timezone=profile.wp_timezone or default_timezone,
        )
