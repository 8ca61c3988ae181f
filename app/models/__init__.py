from .work_site import WorkSite
from .punch_event import PunchEvent
from .schedule import Schedule
from .worker import WorkerProfile, TeamMember

__all__ = [
    "WorkSite",
    "PunchEvent",
    "Schedule",
    "WorkerProfile",
    "TeamMember"
]
