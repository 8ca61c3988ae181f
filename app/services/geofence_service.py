"""
Geofence Service - Resolve coordinates against work site radii
"""
import math
from typing import Optional, Sequence

from atams.logging import get_logger

from app.core.exceptions import (
    NoActiveSitesException,
    OutOfGeofenceException,
    SiteNotFoundException,
)
from app.schemas.work_site import GeofenceResult, LocationCheck, SiteDistance, WorkSite

logger = get_logger(__name__)

EARTH_RADIUS_M = 6371000


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate distance between two coordinates using Haversine formula

    Degrees convert as `x * pi / 180` and sines square by multiplication so
    results match other clients of the same formula bit for bit.

    Returns:
        float: Distance in meters
    """
    phi1 = lat1 * math.pi / 180
    phi2 = lat2 * math.pi / 180
    delta_phi = (lat2 - lat1) * math.pi / 180
    delta_lambda = (lon2 - lon1) * math.pi / 180

    a = (math.sin(delta_phi / 2) * math.sin(delta_phi / 2) +
         math.cos(phi1) * math.cos(phi2) *
         math.sin(delta_lambda / 2) * math.sin(delta_lambda / 2))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_M * c


def round_half_up(distance: float) -> int:
    return int(math.floor(distance + 0.5))


class GeofenceService:
    def resolve(
        self,
        lat: float,
        lon: float,
        sites: Sequence[WorkSite],
        requested_site_id: Optional[str] = None
    ) -> GeofenceResult:
        """
        Pick the site a coordinate is checked against

        Args:
            lat: Worker latitude
            lon: Worker longitude
            sites: Active sites of the worker's organization
            requested_site_id: Pin the check to one site instead of the nearest

        Returns:
            GeofenceResult: Resolved site, distance and containment

        Raises:
            NoActiveSitesException: If the organization has no active site
            SiteNotFoundException: If the requested site is not among `sites`
        """
        if not sites:
            raise NoActiveSitesException()

        if requested_site_id is not None:
            site = next((s for s in sites if s.ws_id == requested_site_id), None)
            if site is None:
                raise SiteNotFoundException(requested_site_id)
            distance = haversine_distance(lat, lon, site.ws_latitude, site.ws_longitude)
        else:
            # Strict comparison keeps the first site on equal distances
            site, distance = None, math.inf
            for candidate in sites:
                d = haversine_distance(lat, lon, candidate.ws_latitude, candidate.ws_longitude)
                if d < distance:
                    site, distance = candidate, d

        return GeofenceResult(
            site_id=site.ws_id,
            site_name=site.ws_name,
            distance_m=distance,
            rounded_distance_m=round_half_up(distance),
            radius_m=site.ws_radius_m,
            within_radius=distance <= site.ws_radius_m,
        )

    def ensure_within(self, result: GeofenceResult, action: str = "clock in") -> GeofenceResult:
        """Raise OutOfGeofenceException unless the resolved distance is within radius"""
        if not result.within_radius:
            logger.warning(
                "Geofence check refused",
                extra={"extra_data": {
                    "site_id": result.site_id,
                    "distance_m": result.rounded_distance_m,
                    "radius_m": result.radius_m,
                }}
            )
            raise OutOfGeofenceException(
                site_name=result.site_name,
                distance=result.rounded_distance_m,
                radius=result.radius_m,
                action=action,
            )
        return result

    def check_location(self, lat: float, lon: float, sites: Sequence[WorkSite]) -> LocationCheck:
        """Distance from a coordinate to every site, nearest first"""
        rows = []
        for site in sites:
            distance = haversine_distance(lat, lon, site.ws_latitude, site.ws_longitude)
            # Containment on the raw distance, same as resolve
            in_range = distance <= site.ws_radius_m
            rows.append(SiteDistance(
                site_id=site.ws_id,
                site_name=site.ws_name,
                address=site.ws_address,
                latitude=site.ws_latitude,
                longitude=site.ws_longitude,
                radius_m=site.ws_radius_m,
                distance_m=round_half_up(distance),
                in_range=in_range,
                status="IN_RANGE" if in_range else "OUT_OF_RANGE",
            ))

        rows.sort(key=lambda row: row.distance_m)
        in_range_count = sum(1 for row in rows if row.in_range)

        return LocationCheck(
            is_valid=in_range_count > 0,
            latitude=lat,
            longitude=lon,
            sites=rows,
            in_range_count=in_range_count,
            closest=rows[0] if rows else None,
        )
