"""Top-level API router."""

from fastapi import APIRouter

from app.api.routes.analysis import router as analysis_router
from app.api.routes.dashboards import router as dashboards_router
from app.api.routes.directory import router as directory_router
from app.api.routes.exports import router as exports_router
from app.api.routes.grid import router as grid_router
from app.api.routes.health import router as health_router

api_router = APIRouter()
api_router.include_router(health_router, tags=["health"])
api_router.include_router(directory_router)
api_router.include_router(grid_router)
api_router.include_router(dashboards_router)
api_router.include_router(analysis_router)
api_router.include_router(exports_router)
