from .work_site_repository import WorkSiteRepository
from .punch_event_repository import PunchEventRepository
from .schedule_repository import ScheduleRepository
from .worker_repository import WorkerRepository

__all__ = [
    "WorkSiteRepository",
    "PunchEventRepository",
    "ScheduleRepository",
    "WorkerRepository"
]
