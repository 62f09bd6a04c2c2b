"""API router composition.

All REST endpoints live under `/api/v1/*`.
"""

from fastapi import APIRouter

from aggie.api.routes.auth import router as auth_router
from aggie.api.routes.reports import router as reports_router


api_router = APIRouter()

api_router.include_router(auth_router, tags=["auth"])
api_router.include_router(reports_router, tags=["reports"])
