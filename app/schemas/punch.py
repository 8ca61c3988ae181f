"""
Punch Schemas for clock events, derived ledger and timesheet summaries
"""
import re
from enum import Enum
from typing import Optional, List
from datetime import datetime, date
from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.schemas.work_site import GeofenceResult


class PunchKind(str, Enum):
    CLOCK_IN = "CLOCK_IN"
    CLOCK_OUT = "CLOCK_OUT"
    BREAK_START = "BREAK_START"
    BREAK_END = "BREAK_END"


class PunchMethod(str, Enum):
    MANUAL = "MANUAL"
    GEOFENCE = "GEOFENCE"
    QR_CODE = "QR_CODE"


class AttendanceStatus(str, Enum):
    CLOCKED_OUT = "CLOCKED_OUT"
    CLOCKED_IN = "CLOCKED_IN"
    ON_BREAK = "ON_BREAK"


class PunchEventBase(BaseModel):
    pe_worker_id: int
    pe_org_id: int
    pe_kind: PunchKind
    pe_method: PunchMethod = PunchMethod.MANUAL
    pe_occurred_at: datetime
    pe_site_id: Optional[str] = None
    pe_lat: Optional[float] = None
    pe_lon: Optional[float] = None
    pe_notes: Optional[str] = None


class PunchEventInDB(PunchEventBase):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    pe_id: int
    pe_created_at: Optional[datetime] = None

    @field_validator('pe_occurred_at', 'pe_created_at', mode='before')
    @classmethod
    def fix_datetime_timezone(cls, v):
        """Fix datetime timezone format from PostgreSQL"""
        if v == '' or v is None:
            return None

        if isinstance(v, str) and re.search(r'([+-]\d{2})$', v):
            v = v + ':00'

        return v


class PunchEvent(PunchEventInDB):
    pass


# Request/Response schemas for API endpoints
class PunchRequest(BaseModel):
    """Request schema for clock in/out and break endpoints"""
    method: PunchMethod = PunchMethod.MANUAL
    pe_lat: Optional[float] = Field(None, ge=-90, le=90)
    pe_lon: Optional[float] = Field(None, ge=-180, le=180)
    site_id: Optional[str] = None  # pin the geofence check to one site
    site_token: Optional[str] = None  # token from a site display (QR_CODE method)
    notes: Optional[str] = Field(None, max_length=500)


class LedgerSummary(BaseModel):
    """Status and hours derived from a window of punch events"""
    status: AttendanceStatus
    worked_hours: float
    break_hours: float
    evaluated_at: datetime
    last_event: Optional[PunchEvent] = None


class TeamMemberStatus(BaseModel):
    """One worker's ledger for today, as seen by a manager"""
    worker_id: int
    status: AttendanceStatus
    clocked_in_at: Optional[datetime] = None
    worked_hours: float
    break_hours: float
    last_event: Optional[PunchEvent] = None


class PunchResponse(BaseModel):
    """Response schema for punch endpoints"""
    status: AttendanceStatus
    event: PunchEvent
    today: LedgerSummary
    geofence: Optional[GeofenceResult] = None
    message: str


class DaySummary(BaseModel):
    work_date: date
    worked_hours: float
    break_hours: float
    regular_hours: float
    overtime_hours: float


class TimesheetSummary(BaseModel):
    """Per-day worked hours split into regular and overtime"""
    date_from: date
    date_to: date
    days: List[DaySummary]
    total_hours: float
    regular_hours: float
    overtime_hours: float
    break_hours: float
