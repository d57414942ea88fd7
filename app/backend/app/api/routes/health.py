"""Liveness and workspace readiness endpoints."""

from fastapi import APIRouter, Depends

from app.db.dependencies import get_workspace
from app.db.workspace import PlannerWorkspace

router = APIRouter()


@router.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/health/workspace")
def workspace_health(workspace: PlannerWorkspace = Depends(get_workspace)) -> dict[str, object]:
    """Counts of what the in-memory workspace currently holds."""

    with workspace.lock:
        return {
            "status": "ok",
            "environment": workspace.settings.app_env,
            "roles": len(workspace.directory.list_roles()),
            "members": len(workspace.directory.list_members()),
            "projects": len(workspace.directory.list_projects()),
            "allocations": len(workspace.store),
            "narrative_configured": workspace.narrative.client is not None,
        }
