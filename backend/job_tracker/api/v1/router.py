"""API v1 router aggregator.

All v1 endpoint routers are included here and mounted under /api/v1.
"""

from fastapi import APIRouter

from job_tracker.api.v1 import activity_log, applications, dashboard, interviews

router = APIRouter()

router.include_router(
    applications.router, prefix="/applications", tags=["applications"]
)
router.include_router(interviews.router, prefix="/interviews", tags=["interviews"])
router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
router.include_router(
    activity_log.router, prefix="/activity-log", tags=["activity-log"]
)
