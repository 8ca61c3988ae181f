"""
Punch Event Repository - Data access layer for punch events
"""
from typing import List, Optional
from datetime import datetime
from sqlalchemy.orm import Session
from sqlalchemy import and_

from atams.db import BaseRepository
from app.models.punch_event import PunchEvent


class PunchEventRepository(BaseRepository[PunchEvent]):
    def __init__(self):
        super().__init__(PunchEvent)

    def get_last_event(self, db: Session, org_id: int, worker_id: int) -> Optional[PunchEvent]:
        """Most recent punch of a worker, ties broken by insertion order"""
        return db.query(PunchEvent).filter(
            and_(
                PunchEvent.pe_org_id == org_id,
                PunchEvent.pe_worker_id == worker_id
            )
        ).order_by(PunchEvent.pe_occurred_at.desc(), PunchEvent.pe_id.desc()).first()

    def get_events_between(
        self,
        db: Session,
        org_id: int,
        worker_id: int,
        start: datetime,
        end: datetime
    ) -> List[PunchEvent]:
        """Punches in [start, end) in chronological order using ORM"""
        return db.query(PunchEvent).filter(
            and_(
                PunchEvent.pe_org_id == org_id,
                PunchEvent.pe_worker_id == worker_id,
                PunchEvent.pe_occurred_at >= start,
                PunchEvent.pe_occurred_at < end
            )
        ).order_by(PunchEvent.pe_occurred_at.asc(), PunchEvent.pe_id.asc()).all()

    def create_event(self, db: Session, event_data: dict) -> PunchEvent:
        """Append a punch event and return the created object"""
        db_event = PunchEvent(**event_data)
        db.add(db_event)
        db.commit()
        db.refresh(db_event)
        return db_event
