"""
API Dependencies
Authentication via Atlas SSO plus the worker context of the caller
"""
from fastapi import Depends
from sqlalchemy.orm import Session
from atams.sso import create_atlas_client, create_auth_dependencies

from app.core.config import settings
from app.db.session import get_db
from app.repositories.worker_repository import WorkerRepository
from app.schemas.worker import WorkerContext

atlas_client = create_atlas_client(settings)

get_current_user, require_auth, require_min_role_level, require_role_level = create_auth_dependencies(atlas_client)

worker_repo = WorkerRepository()


def get_worker_context(
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_auth)
) -> WorkerContext:
    """Worker profile of the authenticated user; 404 when the user has none"""
    return worker_repo.get_context(db, current_user["user_id"], default_timezone=settings.DEFAULT_TIMEZONE)


__all__ = [
    "atlas_client",
    "get_current_user",
    "require_auth",
    "require_min_role_level",
    "require_role_level",
    "get_worker_context",
]
