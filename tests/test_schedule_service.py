from datetime import date, datetime, timezone
from types import SimpleNamespace

import pytest

from atams.exceptions import BadRequestException, NotFoundException

from app.schemas.schedule import (
    ScheduleCreate,
    ScheduleReject,
    ScheduleStatus,
    ScheduleUpdate,
    TeamAssignment,
    WorkerAssignment,
)
from app.services.recurrence_repair_service import RecurrenceRepairService
from app.services.schedule_service import ScheduleService

ORG_ID = 1
MANAGER_ID = 5
NOW = datetime(2024, 3, 4, 8, 0, tzinfo=timezone.utc)

_COLUMNS = (
    "sc_id", "sc_org_id", "sc_title", "sc_description", "sc_type", "sc_start_date",
    "sc_end_date", "sc_start_time", "sc_end_time", "sc_break_minutes", "sc_is_recurring",
    "sc_recurrence_pattern", "sc_recurrence_days", "sc_recurrence_end_date",
    "sc_worker_id", "sc_team_id", "sc_department_id", "sc_site_id", "sc_status",
    "sc_active", "sc_created_by", "sc_approved_by", "sc_approved_at",
    "sc_created_at", "sc_updated_at",
)


class FakeScheduleRepository:
    def __init__(self):
        self.rows = {}

    def create(self, db, obj_in):
        row = SimpleNamespace(**dict.fromkeys(_COLUMNS))
        for key, value in obj_in.items():
            setattr(row, key, value)
        row.sc_id = len(self.rows) + 1
        self.rows[row.sc_id] = row
        return row

    def update(self, db, db_obj, obj_in):
        for key, value in obj_in.items():
            setattr(db_obj, key, value)
        return db_obj

    def get_by_id(self, db, org_id, schedule_id):
        row = self.rows.get(schedule_id)
        if row is None or row.sc_org_id != org_id or not row.sc_active:
            return None
        return row


class FakeSession:
    def __init__(self):
        self.added = []
        self.commits = 0

    def add(self, obj):
        self.added.append(obj)

    def commit(self):
        self.commits += 1


@pytest.fixture
def service():
    service = ScheduleService()
    service.repo = FakeScheduleRepository()
    return service


def shift(**overrides):
    data = {
        "sc_title": "Morning shift",
        "sc_start_date": date(2024, 3, 1),
        "sc_start_time": "09:00",
        "sc_end_time": "17:00",
        "sc_is_recurring": True,
        "sc_recurrence_pattern": "WEEKLY",
        "recurrence_days": ["WED", "MON"],
        "assignment": {"kind": "team", "team_id": 7},
    }
    data.update(overrides)
    return ScheduleCreate(**data)


def test_new_schedule_is_pending_with_canonical_days(service):
    created = service.create_schedule(None, ORG_ID, MANAGER_ID, shift())

    row = service.repo.rows[created.sc_id]
    assert created.sc_status == ScheduleStatus.PENDING
    assert created.assignment == TeamAssignment(team_id=7)
    assert row.sc_recurrence_days == '["MON", "WED"]'
    assert row.sc_team_id == 7
    assert row.sc_worker_id is None
    assert row.sc_created_by == MANAGER_ID


def test_recurring_schedule_needs_a_pattern(service):
    with pytest.raises(BadRequestException):
        service.create_schedule(None, ORG_ID, MANAGER_ID, shift(sc_recurrence_pattern=None))


def test_end_before_start_is_rejected_by_schema():
    with pytest.raises(ValueError):
        shift(sc_is_recurring=False, sc_end_date=date(2024, 2, 1))


def test_unknown_weekday_is_rejected_by_schema():
    with pytest.raises(ValueError):
        shift(recurrence_days=["MONDAY"])


def test_approve_records_approver(service):
    created = service.create_schedule(None, ORG_ID, MANAGER_ID, shift())

    approved = service.approve_schedule(None, ORG_ID, created.sc_id, approver_id=9, now=NOW)

    assert approved.sc_status == ScheduleStatus.APPROVED
    assert approved.sc_approved_by == 9
    assert approved.sc_approved_at == NOW


def test_reject_appends_reason_to_description(service):
    created = service.create_schedule(None, ORG_ID, MANAGER_ID, shift(sc_description="Cover for Dana"))

    rejected = service.reject_schedule(
        None, ORG_ID, created.sc_id, approver_id=9, payload=ScheduleReject(reason="Overlaps leave"), now=NOW
    )

    assert rejected.sc_status == ScheduleStatus.REJECTED
    assert rejected.sc_description == "Cover for Dana\n\nRejection reason: Overlaps leave"


def test_reject_without_reason_keeps_description(service):
    created = service.create_schedule(None, ORG_ID, MANAGER_ID, shift(sc_description="Cover"))

    rejected = service.reject_schedule(None, ORG_ID, created.sc_id, 9, ScheduleReject(), now=NOW)

    assert rejected.sc_description == "Cover"


def test_update_replaces_assignment_and_days(service):
    created = service.create_schedule(None, ORG_ID, MANAGER_ID, shift())

    updated = service.update_schedule(
        None, ORG_ID, created.sc_id,
        ScheduleUpdate(assignment={"kind": "worker", "worker_id": 42}, recurrence_days=["FRI"])
    )

    row = service.repo.rows[created.sc_id]
    assert updated.assignment == WorkerAssignment(worker_id=42)
    assert row.sc_team_id is None
    assert row.sc_recurrence_days == '["FRI"]'


def test_update_rejects_end_before_start(service):
    created = service.create_schedule(None, ORG_ID, MANAGER_ID, shift())

    with pytest.raises(BadRequestException):
        service.update_schedule(None, ORG_ID, created.sc_id, ScheduleUpdate(sc_end_date=date(2024, 2, 1)))


def test_soft_delete_hides_schedule(service):
    created = service.create_schedule(None, ORG_ID, MANAGER_ID, shift())

    service.delete_schedule(None, ORG_ID, created.sc_id)

    assert service.repo.rows[created.sc_id].sc_active is False
    with pytest.raises(NotFoundException):
        service.get_schedule(None, ORG_ID, created.sc_id)


def test_other_organization_cannot_see_schedule(service):
    created = service.create_schedule(None, ORG_ID, MANAGER_ID, shift())

    with pytest.raises(NotFoundException):
        service.get_schedule(None, 2, created.sc_id)


class FakeRecurringRepository:
    def __init__(self, rows):
        self.rows = rows

    def get_recurring_with_days(self, db, org_id=None):
        return self.rows


def test_repair_rewrites_recoverable_values_only():
    rows = [
        SimpleNamespace(sc_id=1, sc_recurrence_days='["MON", "WED"]'),
        SimpleNamespace(sc_id=2, sc_recurrence_days='"[\\"TUE\\",\\"THU\\"]"'),
        SimpleNamespace(sc_id=3, sc_recurrence_days="fri,mon"),
        SimpleNamespace(sc_id=4, sc_recurrence_days="???"),
    ]
    repair = RecurrenceRepairService()
    repair.repo = FakeRecurringRepository(rows)
    db = FakeSession()

    result = repair.repair(db, ORG_ID)

    assert (result.scanned, result.repaired, result.unreadable) == (4, 2, 1)
    assert rows[1].sc_recurrence_days == '["TUE", "THU"]'
    assert rows[2].sc_recurrence_days == '["MON", "FRI"]'
    assert rows[3].sc_recurrence_days == "???"
    assert db.commits == 1
