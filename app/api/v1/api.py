from fastapi import APIRouter
from app.api.v1.endpoints import clock, sites, schedules, maintenance

api_router = APIRouter()

# Register routes
api_router.include_router(clock.router, prefix="/clock", tags=["Clock"])
api_router.include_router(sites.router, prefix="/sites", tags=["Sites"])
api_router.include_router(schedules.router, prefix="/schedules", tags=["Schedules"])
api_router.include_router(maintenance.router, prefix="/maintenance", tags=["Maintenance"])
