"""Workspace dependency for FastAPI endpoints."""

from __future__ import annotations

from functools import lru_cache

from app.core.config import get_settings
from app.db.seed import seed_demo_data
from app.db.workspace import PlannerWorkspace
from app.services.summary_service import NarrativeService


@lru_cache
def get_workspace() -> PlannerWorkspace:
    """Process-wide workspace; state lives for the lifetime of the process."""

    settings = get_settings()
    workspace = PlannerWorkspace(settings, narrative_client=NarrativeService.client_from_settings(settings))
    if settings.seed_demo_data:
        seed_demo_data(workspace)
    return workspace
