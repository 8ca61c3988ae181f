"""
Clock Service - Punch workflows on top of the ledger and geofence resolvers
"""
from typing import List, Optional
from datetime import datetime, date, timezone
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import InvalidClockTransitionException
from app.core.timezone import day_window, local_today, range_window
from app.repositories.punch_event_repository import PunchEventRepository
from app.repositories.work_site_repository import WorkSiteRepository
from app.repositories.worker_repository import WorkerRepository
from app.schemas.punch import (
    AttendanceStatus,
    LedgerSummary,
    PunchEvent,
    PunchKind,
    PunchMethod,
    PunchRequest,
    PunchResponse,
    TeamMemberStatus,
    TimesheetSummary,
)
from app.schemas.work_site import GeofenceResult, WorkSite
from app.schemas.worker import WorkerContext
from app.services.geofence_service import GeofenceService
from app.services.ledger_service import LedgerService
from app.services.site_token_service import SiteTokenService
from atams.exceptions import BadRequestException
from atams.logging import get_logger

logger = get_logger(__name__)

# Statuses a punch may be recorded from
ALLOWED_FROM = {
    PunchKind.CLOCK_IN: (AttendanceStatus.CLOCKED_OUT,),
    PunchKind.CLOCK_OUT: (AttendanceStatus.CLOCKED_IN, AttendanceStatus.ON_BREAK),
    PunchKind.BREAK_START: (AttendanceStatus.CLOCKED_IN,),
    PunchKind.BREAK_END: (AttendanceStatus.ON_BREAK,),
}

ACTION_LABELS = {
    PunchKind.CLOCK_IN: "clock in",
    PunchKind.CLOCK_OUT: "clock out",
    PunchKind.BREAK_START: "start break",
    PunchKind.BREAK_END: "end break",
}

SUCCESS_MESSAGES = {
    PunchKind.CLOCK_IN: "Clocked in successfully",
    PunchKind.CLOCK_OUT: "Clocked out successfully",
    PunchKind.BREAK_START: "Break started",
    PunchKind.BREAK_END: "Break ended",
}


class ClockService:
    def __init__(self) -> None:
        self.event_repo = PunchEventRepository()
        self.site_repo = WorkSiteRepository()
        self.worker_repo = WorkerRepository()
        self.ledger = LedgerService(regular_hours_per_day=settings.REGULAR_HOURS_PER_DAY)
        self.geofence = GeofenceService()
        self.token_service = SiteTokenService()

    def _now(self) -> datetime:
        return datetime.now(timezone.utc)

    def get_context(self, db: Session, user_id: int) -> WorkerContext:
        return self.worker_repo.get_context(db, user_id, default_timezone=settings.DEFAULT_TIMEZONE)

    def _current_status(self, db: Session, context: WorkerContext) -> AttendanceStatus:
        last = self.event_repo.get_last_event(db, context.org_id, context.worker_id)
        return self.ledger.status_from_event(PunchEvent.model_validate(last) if last else None)

    def _today_events(self, db: Session, context: WorkerContext, now: datetime) -> List[PunchEvent]:
        start, end = day_window(local_today(now, context.timezone), context.timezone)
        events = self.event_repo.get_events_between(db, context.org_id, context.worker_id, start, end)
        return [PunchEvent.model_validate(e) for e in events]

    def _resolve_geofence(
        self,
        db: Session,
        context: WorkerContext,
        kind: PunchKind,
        request: PunchRequest
    ) -> Optional[GeofenceResult]:
        """
        Geofence check for a punch

        Clock-in needs coordinates while the geofence is enforced; other punches
        are checked only when coordinates are supplied. A site token pins the
        check to the site it was issued for.
        """
        has_coordinates = request.pe_lat is not None and request.pe_lon is not None
        if not has_coordinates:
            if kind == PunchKind.CLOCK_IN and settings.GEOFENCE_ENFORCED:
                raise BadRequestException("Location coordinates required for geofence validation")
            return None

        requested_site_id = request.site_id
        if request.site_token:
            requested_site_id = self.token_service.site_id_from(request.site_token, org_id=context.org_id)

        sites = [WorkSite.model_validate(s) for s in self.site_repo.get_active_sites(db, context.org_id)]
        result = self.geofence.resolve(request.pe_lat, request.pe_lon, sites, requested_site_id)
        return self.geofence.ensure_within(result, action=ACTION_LABELS[kind])

    def punch(self, db: Session, user_id: int, kind: PunchKind, request: PunchRequest) -> PunchResponse:
        """
        Record a punch after checking the transition and the geofence

        Args:
            db: Database session
            user_id: Current user ID from auth
            kind: Punch kind to record
            request: Coordinates, method and optional site token

        Returns:
            PunchResponse: New status, the stored event and today's ledger

        Raises:
            InvalidClockTransitionException: Punch not allowed from current status
            OutOfGeofenceException: Coordinates outside the resolved site radius
            NoActiveSitesException: Organization has no active site
            SiteNotFoundException: Requested or token site is not active
        """
        now = self._now()
        context = self.get_context(db, user_id)

        current = self._current_status(db, context)
        if current not in ALLOWED_FROM[kind]:
            raise InvalidClockTransitionException(ACTION_LABELS[kind], current.value)

        geofence = self._resolve_geofence(db, context, kind, request)

        method = request.method
        if request.site_token:
            method = PunchMethod.QR_CODE
        elif geofence is not None and method == PunchMethod.MANUAL:
            method = PunchMethod.GEOFENCE

        db_event = self.event_repo.create_event(db, {
            "pe_worker_id": context.worker_id,
            "pe_org_id": context.org_id,
            "pe_kind": kind.value,
            "pe_method": method.value,
            "pe_occurred_at": now,
            "pe_site_id": geofence.site_id if geofence else request.site_id,
            "pe_lat": request.pe_lat,
            "pe_lon": request.pe_lon,
            "pe_notes": request.notes,
        })
        event = PunchEvent.model_validate(db_event)

        logger.info(
            "Punch recorded",
            extra={"extra_data": {
                "worker_id": context.worker_id,
                "org_id": context.org_id,
                "kind": kind.value,
                "method": method.value,
                "site_id": event.pe_site_id,
            }}
        )

        today = self.ledger.derive(self._today_events(db, context, now), now)

        return PunchResponse(
            status=today.status,
            event=event,
            today=today,
            geofence=geofence,
            message=SUCCESS_MESSAGES[kind],
        )

    def clock_in(self, db: Session, user_id: int, request: PunchRequest) -> PunchResponse:
        return self.punch(db, user_id, PunchKind.CLOCK_IN, request)

    def clock_out(self, db: Session, user_id: int, request: PunchRequest) -> PunchResponse:
        return self.punch(db, user_id, PunchKind.CLOCK_OUT, request)

    def start_break(self, db: Session, user_id: int, request: PunchRequest) -> PunchResponse:
        return self.punch(db, user_id, PunchKind.BREAK_START, request)

    def end_break(self, db: Session, user_id: int, request: PunchRequest) -> PunchResponse:
        return self.punch(db, user_id, PunchKind.BREAK_END, request)

    def get_status(self, db: Session, user_id: int) -> LedgerSummary:
        """
        Today's ledger for the worker

        Status follows the worker's last punch overall, so a shift that
        started yesterday still reads as clocked in.
        """
        now = self._now()
        context = self.get_context(db, user_id)
        today = self.ledger.derive(self._today_events(db, context, now), now)
        status = self._current_status(db, context)
        return today.model_copy(update={"status": status})

    def get_events(self, db: Session, user_id: int, target_date: Optional[date] = None) -> List[PunchEvent]:
        """Punches on the worker's local day, oldest first"""
        now = self._now()
        context = self.get_context(db, user_id)
        target_date = target_date or local_today(now, context.timezone)
        start, end = day_window(target_date, context.timezone)
        events = self.event_repo.get_events_between(db, context.org_id, context.worker_id, start, end)
        return [PunchEvent.model_validate(e) for e in events]

    def get_timesheet(self, db: Session, user_id: int, date_from: date, date_to: date) -> TimesheetSummary:
        if date_to < date_from:
            raise BadRequestException("date_to must not be before date_from")

        now = self._now()
        context = self.get_context(db, user_id)
        start, end = range_window(date_from, date_to, context.timezone)
        events = [
            PunchEvent.model_validate(e)
            for e in self.event_repo.get_events_between(db, context.org_id, context.worker_id, start, end)
        ]
        return self.ledger.summarize_days(events, now, context.timezone, date_from, date_to)

    def get_team_status(self, db: Session, user_id: int) -> List[TeamMemberStatus]:
        """
        Today's ledger for every worker in the caller's organization

        Each worker's day is their own local day. `clocked_in_at` is the
        clock-in that opened the interval still running, if any.
        """
        now = self._now()
        context = self.get_context(db, user_id)

        members = []
        for profile in self.worker_repo.get_org_workers(db, context.org_id):
            tz_name = profile.wp_timezone or settings.DEFAULT_TIMEZONE
            start, end = day_window(local_today(now, tz_name), tz_name)
            events = [
                PunchEvent.model_validate(e)
                for e in self.event_repo.get_events_between(db, context.org_id, profile.wp_user_id, start, end)
            ]
            ledger = self.ledger.derive(events, now)

            clocked_in_at = None
            if ledger.status != AttendanceStatus.CLOCKED_OUT:
                clock_ins = [e for e in self.ledger.sort_events(events) if e.pe_kind == PunchKind.CLOCK_IN]
                if clock_ins:
                    clocked_in_at = clock_ins[-1].pe_occurred_at

            members.append(TeamMemberStatus(
                worker_id=profile.wp_user_id,
                status=ledger.status,
                clocked_in_at=clocked_in_at,
                worked_hours=ledger.worked_hours,
                break_hours=ledger.break_hours,
                last_event=ledger.last_event,
            ))

        logger.info(
            "Team status computed",
            extra={"extra_data": {"org_id": context.org_id, "requested_by": user_id, "workers": len(members)}}
        )
        return members
