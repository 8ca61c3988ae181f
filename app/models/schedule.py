"""
Schedule Model - One-off and recurring schedule definitions
"""
from sqlalchemy import (
    Column, BigInteger, String, DateTime, Date, Integer, Boolean, Text, ForeignKey
)
from sqlalchemy.sql import func
from atams.db import Base


class Schedule(Base):
    """Schedule model for hris schema - Table: hris.schedules"""
    __tablename__ = "schedules"
    __table_args__ = {"schema": "hris"}

    sc_id = Column(BigInteger, primary_key=True, index=True, autoincrement=True)
    sc_org_id = Column(BigInteger, nullable=False, index=True)
    sc_title = Column(String(255), nullable=False)
    sc_description = Column(Text, nullable=True)
    sc_type = Column(String(20), nullable=False, default="SHIFT")  # SHIFT, MEETING, TRAINING, EVENT, OTHER
    sc_start_date = Column(Date, nullable=False)
    sc_end_date = Column(Date, nullable=True)
    sc_start_time = Column(String(5), nullable=False)  # HH:MM
    sc_end_time = Column(String(5), nullable=False)  # HH:MM
    sc_break_minutes = Column(Integer, nullable=True)
    sc_is_recurring = Column(Boolean, nullable=False, default=False)
    sc_recurrence_pattern = Column(String(10), nullable=True)  # DAILY, WEEKLY, MONTHLY
    sc_recurrence_days = Column(Text, nullable=True)  # JSON list: ["MON","WED"]
    sc_recurrence_end_date = Column(Date, nullable=True)

    # Assignment targets, at most one is set
    sc_worker_id = Column(BigInteger, nullable=True, index=True)
    sc_team_id = Column(BigInteger, nullable=True, index=True)
    sc_department_id = Column(BigInteger, nullable=True, index=True)
    sc_site_id = Column(String(50), ForeignKey("hris.work_sites.ws_id"), nullable=True, index=True)

    sc_status = Column(String(10), nullable=False, default="PENDING")  # PENDING, APPROVED, REJECTED
    sc_active = Column(Boolean, nullable=False, default=True, index=True)
    sc_created_by = Column(BigInteger, nullable=False)
    sc_approved_by = Column(BigInteger, nullable=True)
    sc_approved_at = Column(DateTime(timezone=True), nullable=True)
    sc_created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    sc_updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)
