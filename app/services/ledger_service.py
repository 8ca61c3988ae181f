"""
Ledger Service - Derive attendance status and hours from punch events

Pure computation: callers pass the events of one worker and the evaluation
instant. Results depend on `now` while a work interval is open, so they are
recomputed on every query and never stored.
"""
from collections import OrderedDict
from datetime import datetime, date
from typing import Iterable, List, Optional, Sequence

from app.core.timezone import local_today
from app.schemas.punch import (
    AttendanceStatus,
    DaySummary,
    LedgerSummary,
    PunchEvent,
    PunchKind,
    TimesheetSummary,
)

_STATUS_BY_KIND = {
    PunchKind.CLOCK_IN: AttendanceStatus.CLOCKED_IN,
    PunchKind.CLOCK_OUT: AttendanceStatus.CLOCKED_OUT,
    PunchKind.BREAK_START: AttendanceStatus.ON_BREAK,
    PunchKind.BREAK_END: AttendanceStatus.CLOCKED_IN,
}


def _minutes(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 60


def _round2(value: float) -> float:
    return round(value * 100) / 100


class LedgerService:
    def __init__(self, regular_hours_per_day: float = 8.0) -> None:
        self.regular_hours_per_day = regular_hours_per_day

    @staticmethod
    def sort_events(events: Iterable[PunchEvent]) -> List[PunchEvent]:
        """Chronological order; events sharing a timestamp keep their input order"""
        return sorted(events, key=lambda e: e.pe_occurred_at)

    @staticmethod
    def status_from_event(event: Optional[PunchEvent]) -> AttendanceStatus:
        """
        Map the most recent punch to a status

        The full sequence is not re-validated; only the last kind matters.
        """
        if event is None:
            return AttendanceStatus.CLOCKED_OUT
        return _STATUS_BY_KIND.get(event.pe_kind, AttendanceStatus.CLOCKED_OUT)

    def derive(self, events: Sequence[PunchEvent], now: datetime) -> LedgerSummary:
        """
        Compute status, worked hours and break hours for a window of events

        Args:
            events: Punch events of one worker, any order
            now: Evaluation instant, closes any interval still open

        Returns:
            LedgerSummary: status plus net worked hours and break hours
        """
        ordered = self.sort_events(events)

        worked_minutes = 0.0
        break_minutes = 0.0
        work_start: Optional[datetime] = None
        break_start: Optional[datetime] = None

        for event in ordered:
            at = event.pe_occurred_at
            if event.pe_kind == PunchKind.CLOCK_IN:
                work_start = at
            elif event.pe_kind == PunchKind.CLOCK_OUT:
                if work_start is not None:
                    worked_minutes += _minutes(work_start, at)
                    work_start = None
            elif event.pe_kind == PunchKind.BREAK_START:
                break_start = at
            elif event.pe_kind == PunchKind.BREAK_END:
                if break_start is not None:
                    break_minutes += _minutes(break_start, at)
                    break_start = None

        # Open interval: the clock is still running at `now`.
        # A break in progress pauses it.
        if work_start is not None:
            worked_minutes += _minutes(work_start, now)
            if break_start is not None:
                break_minutes += _minutes(break_start, now)

        last_event = ordered[-1] if ordered else None
        return LedgerSummary(
            status=self.status_from_event(last_event),
            worked_hours=max(0.0, worked_minutes - break_minutes) / 60,
            break_hours=max(0.0, break_minutes) / 60,
            evaluated_at=now,
            last_event=last_event,
        )

    def split_overtime(self, worked_hours: float):
        """(regular, overtime) under a fixed daily threshold"""
        if worked_hours <= self.regular_hours_per_day:
            return worked_hours, 0.0
        return self.regular_hours_per_day, worked_hours - self.regular_hours_per_day

    def summarize_days(
        self,
        events: Sequence[PunchEvent],
        now: datetime,
        tz_name: str,
        date_from: date,
        date_to: date,
    ) -> TimesheetSummary:
        """
        Per-day ledger over a date range, split into regular and overtime hours

        Days are the worker's local calendar days. Days without events are
        omitted. Totals are rounded to 2 decimals.
        """
        by_day: "OrderedDict[date, List[PunchEvent]]" = OrderedDict()
        for event in self.sort_events(events):
            work_date = local_today(event.pe_occurred_at, tz_name)
            if date_from <= work_date <= date_to:
                by_day.setdefault(work_date, []).append(event)

        days = []
        total = regular = overtime = breaks = 0.0
        for work_date, day_events in by_day.items():
            ledger = self.derive(day_events, now)
            day_regular, day_overtime = self.split_overtime(ledger.worked_hours)

            total += ledger.worked_hours
            regular += day_regular
            overtime += day_overtime
            breaks += ledger.break_hours

            days.append(DaySummary(
                work_date=work_date,
                worked_hours=_round2(ledger.worked_hours),
                break_hours=_round2(ledger.break_hours),
                regular_hours=_round2(day_regular),
                overtime_hours=_round2(day_overtime),
            ))

        return TimesheetSummary(
            date_from=date_from,
            date_to=date_to,
            days=days,
            total_hours=_round2(total),
            regular_hours=_round2(regular),
            overtime_hours=_round2(overtime),
            break_hours=_round2(breaks),
        )
