"""
Work Site Model - Geofenced locations where workers clock in
"""
from sqlalchemy import Column, BigInteger, String, DateTime, Float, Integer, Boolean
from sqlalchemy.sql import func
from atams.db import Base


class WorkSite(Base):
    """Work Site model for hris schema - Table: hris.work_sites"""
    __tablename__ = "work_sites"
    __table_args__ = {"schema": "hris"}

    ws_id = Column(String(50), primary_key=True, index=True)
    ws_org_id = Column(BigInteger, nullable=False, index=True)  # References organization
    ws_name = Column(String(255), nullable=False)
    ws_address = Column(String(500), nullable=True)
    ws_latitude = Column(Float, nullable=False)
    ws_longitude = Column(Float, nullable=False)
    ws_radius_m = Column(Integer, nullable=False, default=10)
    ws_active = Column(Boolean, nullable=False, default=True, index=True)
    ws_created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    ws_updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)
