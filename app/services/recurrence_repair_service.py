"""
Recurrence Repair Service - Rewrites stored weekday lists in canonical form
"""
from typing import Optional
from sqlalchemy.orm import Session

from atams.logging import get_logger

from app.repositories.schedule_repository import ScheduleRepository
from app.schemas.schedule import RecurrenceRepairResult
from app.services.recurrence import parse_recurrence_days, serialize_recurrence_days

logger = get_logger(__name__)


class RecurrenceRepairService:
    def __init__(self) -> None:
        self.repo = ScheduleRepository()

    def repair(self, db: Session, org_id: Optional[int] = None) -> RecurrenceRepairResult:
        """
        Rewrite every recurring schedule whose stored days are not canonical JSON

        Recoverable values are rewritten to the recovered days. Values with no
        recognizable weekday are left untouched and counted as unreadable.

        Args:
            db: Database session
            org_id: Limit the pass to one organization

        Returns:
            RecurrenceRepairResult: Row counts of the pass
        """
        scanned = repaired = unreadable = 0

        for schedule in self.repo.get_recurring_with_days(db, org_id):
            scanned += 1
            parsed = parse_recurrence_days(schedule.sc_recurrence_days)
            if not parsed.days:
                unreadable += 1
                continue

            canonical = serialize_recurrence_days(parsed.days)
            if canonical == schedule.sc_recurrence_days:
                continue

            schedule.sc_recurrence_days = canonical
            db.add(schedule)
            repaired += 1

        db.commit()

        logger.info(
            "Recurrence days repaired",
            extra={"extra_data": {"org_id": org_id, "scanned": scanned, "repaired": repaired, "unreadable": unreadable}}
        )

        return RecurrenceRepairResult(
            scanned=scanned,
            repaired=repaired,
            unreadable=unreadable,
            message=f"Fixed {repaired} of {scanned} recurring schedules"
        )
