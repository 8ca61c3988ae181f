"""
Schedule Repository - Data access layer for schedule definitions
"""
from typing import Optional, List
from datetime import date
from sqlalchemy.orm import Session
from sqlalchemy import and_, or_

from atams.db import BaseRepository
from app.models.schedule import Schedule


class ScheduleRepository(BaseRepository[Schedule]):
    def __init__(self):
        super().__init__(Schedule)

    def get_by_id(self, db: Session, org_id: int, schedule_id: int) -> Optional[Schedule]:
        """Get an active schedule of the organization by ID using ORM"""
        return db.query(Schedule).filter(
            and_(
                Schedule.sc_org_id == org_id,
                Schedule.sc_id == schedule_id,
                Schedule.sc_active.is_(True)
            )
        ).first()

    def get_schedules_with_filters(
        self,
        db: Session,
        org_id: int,
        status: str = None,
        worker_id: int = None,
        date_from: date = None,
        date_to: date = None,
        skip: int = 0,
        limit: int = 100
    ) -> List[Schedule]:
        """Get active schedules with various filters using ORM"""
        query = db.query(Schedule).filter(
            and_(
                Schedule.sc_org_id == org_id,
                Schedule.sc_active.is_(True)
            )
        )

        if status:
            query = query.filter(Schedule.sc_status == status)
        if worker_id:
            query = query.filter(Schedule.sc_worker_id == worker_id)
        if date_from:
            query = query.filter(
                or_(
                    Schedule.sc_end_date >= date_from,
                    Schedule.sc_recurrence_end_date >= date_from,
                    and_(Schedule.sc_end_date.is_(None), Schedule.sc_start_date >= date_from),
                    and_(Schedule.sc_is_recurring.is_(True), Schedule.sc_recurrence_end_date.is_(None))
                )
            )
        if date_to:
            query = query.filter(Schedule.sc_start_date <= date_to)

        return query.order_by(
            Schedule.sc_start_date.asc(), Schedule.sc_start_time.asc()
        ).offset(skip).limit(limit).all()

    def count_schedules_with_filters(
        self,
        db: Session,
        org_id: int,
        status: str = None,
        worker_id: int = None
    ) -> int:
        """Count active schedules with filters using native SQL"""
        conditions = ["sc_org_id = :org_id", "sc_active = TRUE"]
        params = {"org_id": org_id}

        if status:
            conditions.append("sc_status = :status")
            params["status"] = status
        if worker_id:
            conditions.append("sc_worker_id = :worker_id")
            params["worker_id"] = worker_id

        query = f"""
            SELECT COUNT(*)
            FROM hris.schedules
            WHERE {" AND ".join(conditions)}
        """

        return self.execute_raw_sql_scalar(db, query, params)

    def get_candidates_for_day(self, db: Session, org_id: int, today: date) -> List[Schedule]:
        """
        Approved, active schedules of the organization that may apply on `today`

        Only the coarse date bound is filtered here; assignment and weekday
        matching happen in the resolver.
        """
        return db.query(Schedule).filter(
            and_(
                Schedule.sc_org_id == org_id,
                Schedule.sc_active.is_(True),
                Schedule.sc_status == "APPROVED",
                Schedule.sc_start_date <= today
            )
        ).order_by(Schedule.sc_start_time.asc(), Schedule.sc_id.asc()).all()

    def get_recurring_with_days(self, db: Session, org_id: int = None) -> List[Schedule]:
        """Recurring schedules that have a stored day list, for repair"""
        query = db.query(Schedule).filter(
            and_(
                Schedule.sc_is_recurring.is_(True),
                Schedule.sc_recurrence_days.isnot(None)
            )
        )
        if org_id:
            query = query.filter(Schedule.sc_org_id == org_id)
        return query.order_by(Schedule.sc_id.asc()).all()
