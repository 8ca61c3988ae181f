"""
Punch Event Model - Append-only ledger of clock actions
"""
from sqlalchemy import Column, BigInteger, String, DateTime, Float, ForeignKey, Index
from sqlalchemy.sql import func
from atams.db import Base


class PunchEvent(Base):
    """Punch Event model for hris schema - Table: hris.punch_events"""
    __tablename__ = "punch_events"
    __table_args__ = (
        Index("ix_punch_events_worker_occurred", "pe_org_id", "pe_worker_id", "pe_occurred_at"),
        {"schema": "hris"},
    )

    pe_id = Column(BigInteger, primary_key=True, index=True, autoincrement=True)
    pe_worker_id = Column(BigInteger, nullable=False, index=True)  # References pt_atams_indonesia.users(u_id)
    pe_org_id = Column(BigInteger, nullable=False, index=True)
    pe_kind = Column(String(20), nullable=False)  # CLOCK_IN, CLOCK_OUT, BREAK_START, BREAK_END
    pe_method = Column(String(20), nullable=False, default="MANUAL")  # MANUAL, GEOFENCE, QR_CODE
    pe_occurred_at = Column(DateTime(timezone=True), nullable=False)
    pe_site_id = Column(String(50), ForeignKey("hris.work_sites.ws_id"), nullable=True, index=True)
    pe_lat = Column(Float, nullable=True)  # Latitude
    pe_lon = Column(Float, nullable=True)  # Longitude
    pe_notes = Column(String(500), nullable=True)
    pe_created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
