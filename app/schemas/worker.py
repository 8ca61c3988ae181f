"""
Worker Context Schema
"""
from typing import Optional, FrozenSet
from pydantic import BaseModel, ConfigDict


class WorkerContext(BaseModel):
    """Read-only snapshot of who the worker is, passed into the resolvers"""
    model_config = ConfigDict(frozen=True)

    worker_id: int
    org_id: int
    team_ids: FrozenSet[int] = frozenset()
    department_id: Optional[int] = None
    site_id: Optional[str] = None
    timezone: str = "UTC"
