"""
Work Site Schemas for request/response validation and geofence results
"""
import re
from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator


class WorkSiteBase(BaseModel):
    ws_name: str
    ws_address: Optional[str] = None
    ws_latitude: float = Field(..., ge=-90, le=90)
    ws_longitude: float = Field(..., ge=-180, le=180)
    ws_radius_m: Optional[int] = Field(None, gt=0)


class WorkSiteCreate(WorkSiteBase):
    ws_id: str = Field(..., max_length=50)


class WorkSiteUpdate(BaseModel):
    ws_name: Optional[str] = None
    ws_address: Optional[str] = None
    ws_latitude: Optional[float] = Field(None, ge=-90, le=90)
    ws_longitude: Optional[float] = Field(None, ge=-180, le=180)
    ws_radius_m: Optional[int] = Field(None, gt=0)
    ws_active: Optional[bool] = None


class WorkSiteInDB(WorkSiteBase):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    ws_id: str
    ws_org_id: int
    ws_radius_m: int
    ws_active: bool = True
    ws_created_at: Optional[datetime] = None
    ws_updated_at: Optional[datetime] = None

    @field_validator('ws_updated_at', 'ws_created_at', mode='before')
    @classmethod
    def fix_datetime_timezone(cls, v):
        """
        Fix datetime timezone format from PostgreSQL
        PostgreSQL returns: '2025-10-01 09:17:39.587802+00'
        Pydantic expects: '2025-10-01 09:17:39.587802+00:00'
        """
        if v == '' or v is None:
            return None

        if isinstance(v, str) and re.search(r'([+-]\d{2})$', v):
            v = v + ':00'

        return v


class WorkSite(WorkSiteInDB):
    pass


# Geofence schemas
class GeofenceResult(BaseModel):
    """Site a coordinate resolved against, and whether it is inside the radius"""
    site_id: str
    site_name: str
    distance_m: float
    rounded_distance_m: int
    radius_m: int
    within_radius: bool


class SiteDistance(BaseModel):
    """Distance from a coordinate to one site"""
    site_id: str
    site_name: str
    address: Optional[str] = None
    latitude: float
    longitude: float
    radius_m: int
    distance_m: int
    in_range: bool
    status: str  # IN_RANGE or OUT_OF_RANGE


class LocationCheckRequest(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class LocationCheck(BaseModel):
    """Distance of a coordinate to every active site, nearest first"""
    is_valid: bool
    latitude: float
    longitude: float
    sites: List[SiteDistance]
    in_range_count: int
    closest: Optional[SiteDistance] = None


class SiteTokenResponse(BaseModel):
    """Response schema for site display token endpoint"""
    token: str
    slot: int
    expires_in: int
