"""Capacity, financial and over-allocation views."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.routes.grid import timeline_months
from app.db.dependencies import get_workspace
from app.db.workspace import PlannerWorkspace
from app.models.entities import MemberType
from app.services.aggregation_service import q2, serialize_over_allocation

router = APIRouter(tags=["dashboards"])


@router.get("/capacity")
def get_capacity_plan(
    count: int | None = Query(default=None, ge=1, le=120),
    member_type: MemberType | None = None,
    workspace: PlannerWorkspace = Depends(get_workspace),
) -> dict[str, object]:
    with workspace.lock:
        return workspace.aggregation.capacity_plan(timeline_months(workspace, count), member_type)


@router.get("/dashboard")
def get_dashboard(workspace: PlannerWorkspace = Depends(get_workspace)) -> dict[str, object]:
    with workspace.lock:
        return workspace.aggregation.dashboard()


@router.get("/over-allocations")
def list_over_allocations(workspace: PlannerWorkspace = Depends(get_workspace)) -> dict[str, list[object]]:
    with workspace.lock:
        return {"items": [serialize_over_allocation(item) for item in workspace.aggregation.over_allocations()]}


@router.get("/projects/{project_id}/cost")
def get_project_cost(project_id: str, workspace: PlannerWorkspace = Depends(get_workspace)) -> dict[str, object]:
    with workspace.lock:
        if workspace.directory.get_project(project_id) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found.")
        total = workspace.aggregation.project_total_cost(project_id)
    return {"project_id": project_id, "total_cost": str(q2(total))}
