"""Directory endpoints: roles, team members, projects and project rosters."""

from __future__ import annotations

from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel, Field

from app.db.dependencies import get_workspace
from app.db.workspace import PlannerWorkspace
from app.models.entities import (
    DEFAULT_PROJECT_CLIENT,
    DEFAULT_PROJECT_COLOR,
    MemberType,
    Project,
    ProjectStatus,
    Role,
    TeamMember,
)
from app.services.aggregation_service import serialize_member

router = APIRouter(tags=["directory"])


class RoleCreatePayload(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    default_hourly_rate: Decimal = Field(ge=0)


class MemberCreatePayload(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    role_id: str = Field(min_length=1)
    member_type: MemberType = MemberType.FULL_TIME


class ProjectCreatePayload(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    client: str | None = Field(default=None, max_length=255)
    status: ProjectStatus = ProjectStatus.PLANNING
    color: str = Field(default=DEFAULT_PROJECT_COLOR, min_length=1, max_length=32)


class RosterAddPayload(BaseModel):
    member_id: str = Field(min_length=1)


def serialize_role(role: Role) -> dict[str, object]:
    return {
        "id": role.id,
        "title": role.title,
        "default_hourly_rate": str(role.default_hourly_rate),
    }


def serialize_project(project: Project) -> dict[str, object]:
    return {
        "id": project.id,
        "name": project.name,
        "client": project.client,
        "status": project.status.value,
        "color": project.color,
    }


# ---------- Roles ----------
@router.get("/roles")
def list_roles(workspace: PlannerWorkspace = Depends(get_workspace)) -> dict[str, list[object]]:
    return {"items": [serialize_role(role) for role in workspace.directory.list_roles()]}


@router.post("/roles", status_code=status.HTTP_201_CREATED)
def create_role(
    payload: RoleCreatePayload,
    workspace: PlannerWorkspace = Depends(get_workspace),
) -> dict[str, object]:
    role = workspace.directory.add_role(
        Role(title=payload.title.strip(), default_hourly_rate=payload.default_hourly_rate)
    )
    return serialize_role(role)


@router.delete("/roles/{role_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_role(role_id: str, workspace: PlannerWorkspace = Depends(get_workspace)) -> Response:
    workspace.directory.delete_role(role_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ---------- Members ----------
@router.get("/members")
def list_members(
    member_type: MemberType | None = None,
    workspace: PlannerWorkspace = Depends(get_workspace),
) -> dict[str, list[object]]:
    return {"items": [serialize_member(member) for member in workspace.directory.list_members(member_type)]}


@router.post("/members", status_code=status.HTTP_201_CREATED)
def create_member(
    payload: MemberCreatePayload,
    workspace: PlannerWorkspace = Depends(get_workspace),
) -> dict[str, object]:
    if workspace.directory.get_role(payload.role_id) is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="role_id must reference an existing role.",
        )
    member = workspace.directory.add_member(
        TeamMember(name=payload.name.strip(), role_id=payload.role_id, member_type=payload.member_type)
    )
    return serialize_member(member)


@router.delete("/members/{member_id}")
def delete_member(member_id: str, workspace: PlannerWorkspace = Depends(get_workspace)) -> dict[str, object]:
    removed = workspace.directory.delete_member(member_id)
    return {"deleted_allocations": removed}


# ---------- Projects ----------
@router.get("/projects")
def list_projects(workspace: PlannerWorkspace = Depends(get_workspace)) -> dict[str, list[object]]:
    return {"items": [serialize_project(project) for project in workspace.directory.list_projects()]}


@router.post("/projects", status_code=status.HTTP_201_CREATED)
def create_project(
    payload: ProjectCreatePayload,
    workspace: PlannerWorkspace = Depends(get_workspace),
) -> dict[str, object]:
    client = payload.client.strip() if payload.client else ""
    project = workspace.directory.add_project(
        Project(
            name=payload.name.strip(),
            client=client or DEFAULT_PROJECT_CLIENT,
            status=payload.status,
            color=payload.color.strip(),
        )
    )
    return serialize_project(project)


@router.post("/projects/{project_id}/members", status_code=status.HTTP_201_CREATED)
def add_project_member(
    project_id: str,
    payload: RosterAddPayload,
    workspace: PlannerWorkspace = Depends(get_workspace),
) -> dict[str, object]:
    workspace.directory.add_member_to_project(project_id, payload.member_id)
    return {"project_id": project_id, "member_id": payload.member_id}


@router.delete("/projects/{project_id}/members/{member_id}")
def remove_project_member(
    project_id: str,
    member_id: str,
    workspace: PlannerWorkspace = Depends(get_workspace),
) -> dict[str, object]:
    if workspace.directory.get_project(project_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found.")
    removed = workspace.engine.remove_member_from_project(project_id, member_id)
    return {"deleted_allocations": removed}
