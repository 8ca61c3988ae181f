"""
Domain exceptions for clock, geofence and worker context failures
"""
from typing import Optional, Dict, Any

from atams.exceptions import (
    BadRequestException,
    ForbiddenException,
    NotFoundException,
    UnprocessableEntityException,
)


class NoActiveSitesException(UnprocessableEntityException):
    """Organization has no active work site to validate against"""

    def __init__(self, message: str = "No active work sites configured for your organization"):
        super().__init__(message, {"site_count": 0})


class SiteNotFoundException(NotFoundException):
    """Requested site is unknown, inactive or belongs to another organization"""

    def __init__(self, site_id: str):
        super().__init__("Requested site not found", {"requested_site_id": site_id})


class OutOfGeofenceException(ForbiddenException):
    """Worker coordinates fall outside the resolved site radius"""

    def __init__(self, site_name: str, distance: int, radius: int, action: str = "clock in"):
        super().__init__(
            f"You are {distance}m away from {site_name}. "
            f"You must be within {radius}m to {action}.",
            {"distance": distance, "radius": radius, "site_name": site_name},
        )


class InvalidClockTransitionException(BadRequestException):
    """Punch is not allowed from the worker's current status"""

    def __init__(self, action: str, current_status: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            f"Cannot {action} from current status: {current_status}",
            details or {"current_status": current_status},
        )


class WorkerContextException(NotFoundException):
    """Worker profile lookup failed; the request cannot be resolved"""

    def __init__(self, user_id: int):
        super().__init__("Worker profile not found", {"user_id": user_id})
