from .work_site import (
    WorkSite,
    WorkSiteCreate,
    WorkSiteUpdate,
    GeofenceResult,
    SiteDistance,
    LocationCheckRequest,
    LocationCheck,
    SiteTokenResponse
)
from .punch import (
    PunchKind,
    PunchMethod,
    AttendanceStatus,
    PunchEvent,
    PunchRequest,
    PunchResponse,
    LedgerSummary,
    TeamMemberStatus,
    DaySummary,
    TimesheetSummary
)
from .schedule import (
    ScheduleStatus,
    ScheduleType,
    RecurrencePattern,
    WorkerAssignment,
    TeamAssignment,
    DepartmentAssignment,
    SiteAssignment,
    Unassigned,
    ScheduleCreate,
    ScheduleUpdate,
    ScheduleReject,
    ScheduleDefinition,
    RecurrenceRepairResult
)
from .worker import WorkerContext
from .common import DataResponse, PaginationResponse

__all__ = [
    # Work site schemas
    "WorkSite",
    "WorkSiteCreate",
    "WorkSiteUpdate",
    "GeofenceResult",
    "SiteDistance",
    "LocationCheckRequest",
    "LocationCheck",
    "SiteTokenResponse",
    # Punch schemas
    "PunchKind",
    "PunchMethod",
    "AttendanceStatus",
    "PunchEvent",
    "PunchRequest",
    "PunchResponse",
    "LedgerSummary",
    "TeamMemberStatus",
    "DaySummary",
    "TimesheetSummary",
    # Schedule schemas
    "ScheduleStatus",
    "ScheduleType",
    "RecurrencePattern",
    "WorkerAssignment",
    "TeamAssignment",
    "DepartmentAssignment",
    "SiteAssignment",
    "Unassigned",
    "ScheduleCreate",
    "ScheduleUpdate",
    "ScheduleReject",
    "ScheduleDefinition",
    "RecurrenceRepairResult",
    # Worker schemas
    "WorkerContext",
    # Common schemas
    "DataResponse",
    "PaginationResponse"
]
