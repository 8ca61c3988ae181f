"""
Schedule Schemas - schedule definitions and their assignment variant
"""
import re
from enum import Enum
from typing import Annotated, Optional, List, Literal, Union, Any, Dict
from datetime import datetime, date
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DayOfWeek = Literal["SUN", "MON", "TUE", "WED", "THU", "FRI", "SAT"]

_TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class ScheduleStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class ScheduleType(str, Enum):
    SHIFT = "SHIFT"
    MEETING = "MEETING"
    TRAINING = "TRAINING"
    EVENT = "EVENT"
    OTHER = "OTHER"


class RecurrencePattern(str, Enum):
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"


# Assignment variant: a schedule targets exactly one of these
class WorkerAssignment(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["worker"] = "worker"
    worker_id: int


class TeamAssignment(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["team"] = "team"
    team_id: int


class DepartmentAssignment(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["department"] = "department"
    department_id: int


class SiteAssignment(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["site"] = "site"
    site_id: str


class Unassigned(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["none"] = "none"


Assignment = Annotated[
    Union[WorkerAssignment, TeamAssignment, DepartmentAssignment, SiteAssignment, Unassigned],
    Field(discriminator="kind"),
]

ASSIGNMENT_COLUMNS = ("sc_worker_id", "sc_team_id", "sc_department_id", "sc_site_id")


def assignment_from_columns(
    worker_id: Optional[int] = None,
    team_id: Optional[int] = None,
    department_id: Optional[int] = None,
    site_id: Optional[str] = None,
):
    """
    Collapse the four nullable assignment columns into one variant.

    Rows written before the variant existed may carry several columns;
    the most specific one wins (worker > team > department > site).
    """
    if worker_id is not None:
        return WorkerAssignment(worker_id=worker_id)
    if team_id is not None:
        return TeamAssignment(team_id=team_id)
    if department_id is not None:
        return DepartmentAssignment(department_id=department_id)
    if site_id is not None:
        return SiteAssignment(site_id=site_id)
    return Unassigned()


def assignment_to_columns(assignment) -> Dict[str, Any]:
    """Storage columns for an assignment variant, all four keys always present"""
    columns = dict.fromkeys(ASSIGNMENT_COLUMNS)
    if isinstance(assignment, WorkerAssignment):
        columns["sc_worker_id"] = assignment.worker_id
    elif isinstance(assignment, TeamAssignment):
        columns["sc_team_id"] = assignment.team_id
    elif isinstance(assignment, DepartmentAssignment):
        columns["sc_department_id"] = assignment.department_id
    elif isinstance(assignment, SiteAssignment):
        columns["sc_site_id"] = assignment.site_id
    return columns


class ScheduleBase(BaseModel):
    sc_title: str = Field(..., min_length=1, max_length=255)
    sc_description: Optional[str] = None
    sc_type: ScheduleType = ScheduleType.SHIFT
    sc_start_date: date
    sc_end_date: Optional[date] = None
    sc_start_time: str = Field(..., pattern=_TIME_PATTERN)
    sc_end_time: str = Field(..., pattern=_TIME_PATTERN)
    sc_break_minutes: Optional[int] = Field(None, ge=0)
    sc_is_recurring: bool = False
    sc_recurrence_pattern: Optional[RecurrencePattern] = None
    sc_recurrence_end_date: Optional[date] = None


class ScheduleCreate(ScheduleBase):
    recurrence_days: Optional[List[DayOfWeek]] = None
    assignment: Assignment = Unassigned()

    @model_validator(mode="after")
    def check_dates(self):
        if self.sc_end_date is not None and self.sc_end_date < self.sc_start_date:
            raise ValueError("sc_end_date must not be before sc_start_date")
        if self.sc_recurrence_end_date is not None and self.sc_recurrence_end_date < self.sc_start_date:
            raise ValueError("sc_recurrence_end_date must not be before sc_start_date")
        return self


class ScheduleUpdate(BaseModel):
    sc_title: Optional[str] = Field(None, min_length=1, max_length=255)
    sc_description: Optional[str] = None
    sc_type: Optional[ScheduleType] = None
    sc_start_date: Optional[date] = None
    sc_end_date: Optional[date] = None
    sc_start_time: Optional[str] = Field(None, pattern=_TIME_PATTERN)
    sc_end_time: Optional[str] = Field(None, pattern=_TIME_PATTERN)
    sc_break_minutes: Optional[int] = Field(None, ge=0)
    sc_is_recurring: Optional[bool] = None
    sc_recurrence_pattern: Optional[RecurrencePattern] = None
    sc_recurrence_end_date: Optional[date] = None
    recurrence_days: Optional[List[DayOfWeek]] = None
    assignment: Optional[Assignment] = None


class ScheduleReject(BaseModel):
    reason: Optional[str] = Field(None, max_length=1000)


class ScheduleInDB(ScheduleBase):
    model_config = ConfigDict(frozen=True)

    sc_id: int
    sc_org_id: int
    sc_recurrence_days: Optional[str] = None  # raw stored text, parsed defensively
    assignment: Assignment = Unassigned()
    sc_status: ScheduleStatus = ScheduleStatus.PENDING
    sc_active: bool = True
    sc_created_by: Optional[int] = None
    sc_approved_by: Optional[int] = None
    sc_approved_at: Optional[datetime] = None
    sc_created_at: Optional[datetime] = None
    sc_updated_at: Optional[datetime] = None

    @model_validator(mode="before")
    @classmethod
    def collapse_assignment(cls, data: Any) -> Any:
        """Build `assignment` from storage columns when reading an ORM row or a flat dict"""
        if isinstance(data, dict):
            if "assignment" in data:
                return data
            values = dict(data)
            columns = {name: values.pop(name, None) for name in ASSIGNMENT_COLUMNS}
        else:
            values = {
                name: getattr(data, name)
                for name in cls.model_fields
                if name != "assignment" and hasattr(data, name)
            }
            columns = {name: getattr(data, name, None) for name in ASSIGNMENT_COLUMNS}

        values["assignment"] = assignment_from_columns(
            worker_id=columns["sc_worker_id"],
            team_id=columns["sc_team_id"],
            department_id=columns["sc_department_id"],
            site_id=columns["sc_site_id"],
        )
        return values

    @field_validator('sc_approved_at', 'sc_created_at', 'sc_updated_at', mode='before')
    @classmethod
    def fix_datetime_timezone(cls, v):
        """Fix datetime timezone format from PostgreSQL"""
        if v == '' or v is None:
            return None

        if isinstance(v, str) and re.search(r'([+-]\d{2})$', v):
            v = v + ':00'

        return v


class ScheduleDefinition(ScheduleInDB):
    pass


class RecurrenceRepairResult(BaseModel):
    """Outcome of rewriting stored recurrence day lists"""
    scanned: int
    repaired: int
    unreadable: int
    message: str
