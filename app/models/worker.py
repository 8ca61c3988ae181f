"""
Worker Profile and Team Member Models - Worker context for schedule resolution
"""
from sqlalchemy import Column, BigInteger, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from atams.db import Base


class WorkerProfile(Base):
    """Worker Profile model for hris schema - Table: hris.worker_profiles"""
    __tablename__ = "worker_profiles"
    __table_args__ = {"schema": "hris"}

    wp_user_id = Column(BigInteger, primary_key=True, index=True)  # References pt_atams_indonesia.users(u_id)
    wp_org_id = Column(BigInteger, nullable=False, index=True)
    wp_department_id = Column(BigInteger, nullable=True, index=True)
    wp_site_id = Column(String(50), ForeignKey("hris.work_sites.ws_id"), nullable=True, index=True)
    wp_timezone = Column(String(64), nullable=True)  # IANA name, e.g. Asia/Jakarta
    wp_created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    wp_updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)


class TeamMember(Base):
    """Team Member model for hris schema - Table: hris.team_members"""
    __tablename__ = "team_members"
    __table_args__ = (
        UniqueConstraint("tm_team_id", "tm_user_id", name="uq_team_members_team_user"),
        {"schema": "hris"},
    )

    tm_id = Column(BigInteger, primary_key=True, index=True, autoincrement=True)
    tm_team_id = Column(BigInteger, nullable=False, index=True)
    tm_user_id = Column(BigInteger, ForeignKey("hris.worker_profiles.wp_user_id"), nullable=False, index=True)
    tm_created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
