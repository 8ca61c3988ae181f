from .ledger_service import LedgerService
from .geofence_service import GeofenceService
from .schedule_service import ScheduleResolver, ScheduleService
from .site_service import SiteService
from .site_token_service import SiteTokenService
from .clock_service import ClockService
from .recurrence_repair_service import RecurrenceRepairService

__all__ = [
    "LedgerService",
    "GeofenceService",
    "ScheduleResolver",
    "ScheduleService",
    "SiteService",
    "SiteTokenService",
    "ClockService",
    "RecurrenceRepairService"
]
