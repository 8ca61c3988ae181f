"""
Schedule Service - Applicability resolution and schedule management
"""
from typing import Iterable, List, Optional
from datetime import datetime, date, timezone
from sqlalchemy.orm import Session

from atams.exceptions import BadRequestException, NotFoundException
from atams.logging import get_logger

from app.core.timezone import local_today
from app.repositories.schedule_repository import ScheduleRepository
from app.schemas.schedule import (
    DepartmentAssignment,
    ScheduleCreate,
    ScheduleDefinition,
    ScheduleReject,
    ScheduleStatus,
    ScheduleUpdate,
    SiteAssignment,
    TeamAssignment,
    WorkerAssignment,
    assignment_to_columns,
)
from app.schemas.worker import WorkerContext
from app.services.recurrence import (
    parse_recurrence_days,
    serialize_recurrence_days,
    weekday_token,
)

logger = get_logger(__name__)


class ScheduleResolver:
    """Decide which approved schedules apply to a worker on a local date"""

    @staticmethod
    def matches(context: WorkerContext, schedule: ScheduleDefinition) -> bool:
        assignment = schedule.assignment
        if isinstance(assignment, WorkerAssignment):
            return assignment.worker_id == context.worker_id
        if isinstance(assignment, TeamAssignment):
            return assignment.team_id in context.team_ids
        if isinstance(assignment, DepartmentAssignment):
            return context.department_id is not None and assignment.department_id == context.department_id
        if isinstance(assignment, SiteAssignment):
            return context.site_id is not None and assignment.site_id == context.site_id
        return False

    @staticmethod
    def applies_on(schedule: ScheduleDefinition, today: date) -> bool:
        """
        Date rules

        One-off schedules cover start..end inclusive (start only when end is
        empty). Recurring schedules run from start until the recurrence end on
        the stored weekdays; with no stored weekdays they run every day.
        """
        if schedule.sc_start_date > today:
            return False

        if not schedule.sc_is_recurring:
            return today <= (schedule.sc_end_date or schedule.sc_start_date)

        if schedule.sc_recurrence_end_date is not None and schedule.sc_recurrence_end_date < today:
            return False

        recurrence = parse_recurrence_days(schedule.sc_recurrence_days)
        if not recurrence.stored:
            return True
        return weekday_token(today) in recurrence.days

    def applicable(
        self,
        context: WorkerContext,
        schedules: Iterable[ScheduleDefinition],
        today: date
    ) -> List[ScheduleDefinition]:
        """
        Schedules applying to the worker on `today`, earliest start time first

        Args:
            context: Worker snapshot
            schedules: Candidate schedules of the worker's organization
            today: Worker's local calendar date

        Returns:
            List[ScheduleDefinition]: Every match, sorted by start time
        """
        result = [
            schedule for schedule in schedules
            if schedule.sc_status == ScheduleStatus.APPROVED
            and schedule.sc_active
            and schedule.sc_org_id == context.org_id
            and self.matches(context, schedule)
            and self.applies_on(schedule, today)
        ]
        return sorted(result, key=lambda s: s.sc_start_time)


class ScheduleService:
    def __init__(self) -> None:
        self.repo = ScheduleRepository()
        self.resolver = ScheduleResolver()

    def _get_or_404(self, db: Session, org_id: int, schedule_id: int):
        obj = self.repo.get_by_id(db, org_id, schedule_id)
        if not obj:
            raise NotFoundException("Schedule not found")
        return obj

    def list_schedules(
        self,
        db: Session,
        org_id: int,
        status: Optional[ScheduleStatus] = None,
        worker_id: Optional[int] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        skip: int = 0,
        limit: int = 100
    ) -> List[ScheduleDefinition]:
        schedules = self.repo.get_schedules_with_filters(
            db, org_id,
            status=status.value if status else None,
            worker_id=worker_id,
            date_from=date_from,
            date_to=date_to,
            skip=skip,
            limit=limit
        )
        return [ScheduleDefinition.model_validate(s) for s in schedules]

    def count_schedules(
        self,
        db: Session,
        org_id: int,
        status: Optional[ScheduleStatus] = None,
        worker_id: Optional[int] = None
    ) -> int:
        return self.repo.count_schedules_with_filters(
            db, org_id, status=status.value if status else None, worker_id=worker_id
        )

    def get_schedule(self, db: Session, org_id: int, schedule_id: int) -> ScheduleDefinition:
        return ScheduleDefinition.model_validate(self._get_or_404(db, org_id, schedule_id))

    def create_schedule(
        self,
        db: Session,
        org_id: int,
        created_by: int,
        payload: ScheduleCreate
    ) -> ScheduleDefinition:
        """New schedules start PENDING and wait for approval"""
        if payload.sc_is_recurring and payload.sc_recurrence_pattern is None:
            raise BadRequestException("sc_recurrence_pattern is required for recurring schedules")

        data = payload.model_dump(exclude={"recurrence_days", "assignment"})
        if data.get("sc_type") is not None:
            data["sc_type"] = payload.sc_type.value
        if payload.sc_recurrence_pattern is not None:
            data["sc_recurrence_pattern"] = payload.sc_recurrence_pattern.value
        data.update(assignment_to_columns(payload.assignment))
        data.update({
            "sc_org_id": org_id,
            "sc_recurrence_days": (
                serialize_recurrence_days(payload.recurrence_days or [])
                if payload.sc_is_recurring else None
            ),
            "sc_status": ScheduleStatus.PENDING.value,
            "sc_active": True,
            "sc_created_by": created_by,
        })

        obj = self.repo.create(db, data)
        logger.info(
            "Schedule created",
            extra={"extra_data": {"schedule_id": obj.sc_id, "org_id": org_id, "created_by": created_by}}
        )
        return ScheduleDefinition.model_validate(obj)

    def update_schedule(
        self,
        db: Session,
        org_id: int,
        schedule_id: int,
        payload: ScheduleUpdate
    ) -> ScheduleDefinition:
        obj = self._get_or_404(db, org_id, schedule_id)

        update_data = payload.model_dump(exclude_unset=True, exclude={"recurrence_days", "assignment"})
        for key in ("sc_type", "sc_recurrence_pattern"):
            if update_data.get(key) is not None:
                update_data[key] = update_data[key].value
        if "recurrence_days" in payload.model_fields_set:
            update_data["sc_recurrence_days"] = serialize_recurrence_days(payload.recurrence_days or [])
        if payload.assignment is not None:
            update_data.update(assignment_to_columns(payload.assignment))

        start = update_data.get("sc_start_date", obj.sc_start_date)
        end = update_data.get("sc_end_date", obj.sc_end_date)
        if end is not None and end < start:
            raise BadRequestException("sc_end_date must not be before sc_start_date")

        obj = self.repo.update(db, obj, update_data)
        return ScheduleDefinition.model_validate(obj)

    def delete_schedule(self, db: Session, org_id: int, schedule_id: int) -> None:
        """Soft delete: the row stays for history, the resolver never sees it"""
        obj = self._get_or_404(db, org_id, schedule_id)
        self.repo.update(db, obj, {"sc_active": False})
        return None

    def approve_schedule(
        self,
        db: Session,
        org_id: int,
        schedule_id: int,
        approver_id: int,
        now: Optional[datetime] = None
    ) -> ScheduleDefinition:
        obj = self._get_or_404(db, org_id, schedule_id)
        now = now or datetime.now(timezone.utc)

        obj = self.repo.update(db, obj, {
            "sc_status": ScheduleStatus.APPROVED.value,
            "sc_approved_by": approver_id,
            "sc_approved_at": now,
        })
        logger.info(
            "Schedule approved",
            extra={"extra_data": {"schedule_id": schedule_id, "approved_by": approver_id}}
        )
        return ScheduleDefinition.model_validate(obj)

    def reject_schedule(
        self,
        db: Session,
        org_id: int,
        schedule_id: int,
        approver_id: int,
        payload: ScheduleReject,
        now: Optional[datetime] = None
    ) -> ScheduleDefinition:
        """Reject a schedule; the reason is appended to its description"""
        obj = self._get_or_404(db, org_id, schedule_id)
        now = now or datetime.now(timezone.utc)

        update_data = {
            "sc_status": ScheduleStatus.REJECTED.value,
            "sc_approved_by": approver_id,
            "sc_approved_at": now,
        }
        if payload.reason:
            update_data["sc_description"] = f"{obj.sc_description or ''}\n\nRejection reason: {payload.reason}"

        obj = self.repo.update(db, obj, update_data)
        logger.info(
            "Schedule rejected",
            extra={"extra_data": {"schedule_id": schedule_id, "rejected_by": approver_id}}
        )
        return ScheduleDefinition.model_validate(obj)

    def get_today_for_worker(
        self,
        db: Session,
        context: WorkerContext,
        now: datetime
    ) -> List[ScheduleDefinition]:
        """Schedules applying on the worker's local date at `now`"""
        today = local_today(now, context.timezone)
        candidates = self.repo.get_candidates_for_day(db, context.org_id, today)
        schedules = [ScheduleDefinition.model_validate(s) for s in candidates]
        return self.resolver.applicable(context, schedules, today)
