from datetime import date, datetime, timedelta, timezone

import pytest

from app.schemas.schedule import (
    DepartmentAssignment,
    ScheduleDefinition,
    ScheduleStatus,
    SiteAssignment,
    TeamAssignment,
    Unassigned,
    WorkerAssignment,
    assignment_from_columns,
    assignment_to_columns,
)
from app.schemas.worker import WorkerContext
from app.services.schedule_service import ScheduleResolver, ScheduleService

MONDAY = date(2024, 3, 4)
TUESDAY = date(2024, 3, 5)
WEDNESDAY = date(2024, 3, 6)


@pytest.fixture
def resolver():
    return ScheduleResolver()


def test_columns_collapse_by_specificity():
    assert assignment_from_columns(worker_id=1, team_id=2) == WorkerAssignment(worker_id=1)
    assert assignment_from_columns(team_id=2, department_id=3) == TeamAssignment(team_id=2)
    assert assignment_from_columns(department_id=3, site_id="HQ") == DepartmentAssignment(department_id=3)
    assert assignment_from_columns(site_id="HQ") == SiteAssignment(site_id="HQ")
    assert assignment_from_columns() == Unassigned()


def test_assignment_writes_exactly_one_column():
    columns = assignment_to_columns(TeamAssignment(team_id=9))

    assert columns == {
        "sc_worker_id": None,
        "sc_team_id": 9,
        "sc_department_id": None,
        "sc_site_id": None,
    }


def test_direct_assignment_matches(resolver, context, make_schedule):
    schedule = make_schedule()

    assert resolver.applicable(context, [schedule], MONDAY) == [schedule]


def test_other_worker_does_not_match(resolver, context, make_schedule):
    schedule = make_schedule(sc_worker_id=99)

    assert resolver.applicable(context, [schedule], MONDAY) == []


def test_team_and_department_row_matches_under_team_clause(resolver, make_schedule):
    schedule = make_schedule(sc_worker_id=None, sc_team_id=7, sc_department_id=555)
    context = WorkerContext(worker_id=42, org_id=1, team_ids=frozenset({7}), department_id=3)

    assert isinstance(schedule.assignment, TeamAssignment)
    assert resolver.applicable(context, [schedule], MONDAY) == [schedule]


def test_department_and_site_assignments(resolver, context, make_schedule):
    by_department = make_schedule(sc_worker_id=None, sc_department_id=3)
    by_site = make_schedule(sc_worker_id=None, sc_site_id="HQ")
    other_site = make_schedule(sc_worker_id=None, sc_site_id="BRANCH")

    result = resolver.applicable(context, [by_department, by_site, other_site], MONDAY)

    assert result == [by_department, by_site]


def test_unassigned_never_matches(resolver, context, make_schedule):
    schedule = make_schedule(sc_worker_id=None)

    assert resolver.applicable(context, [schedule], MONDAY) == []


def test_department_assignment_needs_a_department(resolver, make_schedule):
    schedule = make_schedule(sc_worker_id=None, sc_department_id=3)
    context = WorkerContext(worker_id=42, org_id=1)

    assert resolver.applicable(context, [schedule], MONDAY) == []


def test_every_match_returned_sorted_by_start_time(resolver, context, make_schedule):
    meeting = make_schedule(sc_title="Standup", sc_start_time="13:30", sc_end_time="14:00")
    shift = make_schedule(sc_worker_id=None, sc_team_id=7, sc_start_time="08:00")

    assert resolver.applicable(context, [meeting, shift], MONDAY) == [shift, meeting]


def test_unapproved_or_inactive_schedules_are_skipped(resolver, context, make_schedule):
    pending = make_schedule(sc_status=ScheduleStatus.PENDING)
    inactive = make_schedule(sc_active=False)

    assert resolver.applicable(context, [pending, inactive], MONDAY) == []


def test_other_organization_is_skipped(resolver, context, make_schedule):
    assert resolver.applicable(context, [make_schedule(sc_org_id=2)], MONDAY) == []


def test_one_off_range_is_inclusive(resolver, make_schedule):
    schedule = make_schedule(sc_start_date=MONDAY, sc_end_date=WEDNESDAY)

    assert resolver.applies_on(schedule, MONDAY)
    assert resolver.applies_on(schedule, WEDNESDAY)
    assert not resolver.applies_on(schedule, MONDAY - timedelta(days=1))
    assert not resolver.applies_on(schedule, WEDNESDAY + timedelta(days=1))


def test_past_one_off_is_not_applicable(resolver, context, make_schedule):
    schedule = make_schedule(sc_start_date=date(2024, 1, 1))

    assert resolver.applicable(context, [schedule], MONDAY) == []
    assert resolver.applicable(context, [schedule], date(2024, 1, 1)) == [schedule]


def test_one_off_without_end_is_single_day(resolver, make_schedule):
    schedule = make_schedule(sc_start_date=TUESDAY)

    assert resolver.applies_on(schedule, TUESDAY)
    assert not resolver.applies_on(schedule, WEDNESDAY)


def test_recurring_on_listed_weekdays_only(resolver, make_schedule):
    schedule = make_schedule(
        sc_is_recurring=True,
        sc_recurrence_pattern="WEEKLY",
        sc_recurrence_days='["MON","WED"]',
    )

    week = [MONDAY + timedelta(days=offset) for offset in range(14)]
    applying = [day for day in week if resolver.applies_on(schedule, day)]

    assert applying == [
        MONDAY, WEDNESDAY,
        MONDAY + timedelta(days=7), WEDNESDAY + timedelta(days=7),
    ]


def test_recurring_respects_start_and_end(resolver, make_schedule):
    schedule = make_schedule(
        sc_start_date=WEDNESDAY,
        sc_is_recurring=True,
        sc_recurrence_days='["MON","WED"]',
        sc_recurrence_end_date=WEDNESDAY + timedelta(days=4),
    )

    assert not resolver.applies_on(schedule, MONDAY)
    assert resolver.applies_on(schedule, WEDNESDAY)
    assert resolver.applies_on(schedule, MONDAY + timedelta(days=7)) is False


def test_recurring_recovers_corrupt_days(resolver, make_schedule):
    schedule = make_schedule(sc_is_recurring=True, sc_recurrence_days='"[\\"MON\\",\\"WED\\"]"')

    assert resolver.applies_on(schedule, MONDAY)
    assert resolver.applies_on(schedule, WEDNESDAY)
    assert not resolver.applies_on(schedule, TUESDAY)


def test_recurring_with_unreadable_days_never_applies(resolver, make_schedule):
    schedule = make_schedule(sc_is_recurring=True, sc_recurrence_days="garbage")

    assert not any(resolver.applies_on(schedule, MONDAY + timedelta(days=i)) for i in range(7))


def test_recurring_without_stored_days_applies_daily(resolver, make_schedule):
    schedule = make_schedule(sc_is_recurring=True, sc_recurrence_pattern="DAILY")

    assert all(resolver.applies_on(schedule, MONDAY + timedelta(days=i)) for i in range(7))


class FakeScheduleRepository:
    def __init__(self, rows):
        self.rows = rows
        self.requested_day = None

    def get_candidates_for_day(self, db, org_id, today):
        self.requested_day = today
        return self.rows


def test_today_uses_worker_local_date(make_schedule):
    # 20:00 UTC on Tuesday is already Wednesday in Tokyo
    now = datetime(2024, 3, 5, 20, 0, tzinfo=timezone.utc)
    schedule = make_schedule(sc_is_recurring=True, sc_recurrence_days='["WED"]')
    context = WorkerContext(worker_id=42, org_id=1, timezone="Asia/Tokyo")

    service = ScheduleService()
    service.repo = FakeScheduleRepository([schedule.model_dump()])

    result = service.get_today_for_worker(None, context, now)

    assert service.repo.requested_day == WEDNESDAY
    assert [s.sc_id for s in result] == [schedule.sc_id]


def test_schedule_definition_reads_orm_like_rows():
    class Row:
        sc_id = 5
        sc_org_id = 1
        sc_title = "Site briefing"
        sc_description = None
        sc_type = "MEETING"
        sc_start_date = MONDAY
        sc_end_date = None
        sc_start_time = "10:00"
        sc_end_time = "10:30"
        sc_break_minutes = None
        sc_is_recurring = False
        sc_recurrence_pattern = None
        sc_recurrence_days = None
        sc_recurrence_end_date = None
        sc_worker_id = None
        sc_team_id = None
        sc_department_id = None
        sc_site_id = "HQ"
        sc_status = "APPROVED"
        sc_active = True
        sc_created_by = 1
        sc_approved_by = 2
        sc_approved_at = None
        sc_created_at = None
        sc_updated_at = None

    schedule = ScheduleDefinition.model_validate(Row())

    assert schedule.assignment == SiteAssignment(site_id="HQ")
    assert schedule.sc_status == ScheduleStatus.APPROVED
