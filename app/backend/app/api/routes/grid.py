"""Allocation grid endpoints: timeline, project grid, gestures and inline editor."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field

from app.core.months import Month, next_months
from app.db.dependencies import get_workspace
from app.db.workspace import PlannerWorkspace
from app.services.aggregation_service import serialize_month
from app.services.allocation_edit_service import CellRef, GestureOutcome

router = APIRouter(tags=["grid"])

MONTH_PATTERN = r"^\d{4}-\d{2}$"


class CellPayload(BaseModel):
    project_id: str = Field(min_length=1)
    member_id: str = Field(min_length=1)
    month: str = Field(pattern=MONTH_PATTERN)


class EditorCommitPayload(BaseModel):
    text: str = Field(max_length=64)


def parse_month(value: str) -> Month:
    try:
        return Month.parse(value)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc


def timeline_months(workspace: PlannerWorkspace, count: int | None) -> list[Month]:
    return next_months(count or workspace.settings.grid_month_count, clock=workspace.clock)


def _cell(payload: CellPayload) -> CellRef:
    return CellRef(project_id=payload.project_id, member_id=payload.member_id, month=parse_month(payload.month))


def _ensure_cell_targets(workspace: PlannerWorkspace, cell: CellRef) -> None:
    if workspace.directory.get_project(cell.project_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found.")
    if workspace.directory.get_member(cell.member_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Team member not found.")


def serialize_outcome(outcome: GestureOutcome) -> dict[str, object]:
    editor = outcome.editor
    return {
        "phase": outcome.phase.value,
        "applied": outcome.applied,
        "editor": (
            {
                "project_id": editor.cell.project_id,
                "member_id": editor.cell.member_id,
                "month": str(editor.cell.month),
                "seed_text": editor.seed_text,
            }
            if editor is not None
            else None
        ),
        "writes": [
            {
                "project_id": write.cell.project_id,
                "member_id": write.cell.member_id,
                "month": str(write.cell.month),
                "percentage": write.percentage,
                "result": write.result.value,
            }
            for write in outcome.writes
        ],
    }


@router.get("/timeline")
def get_timeline(
    count: int | None = Query(default=None, ge=1, le=120),
    workspace: PlannerWorkspace = Depends(get_workspace),
) -> dict[str, object]:
    return {"months": [serialize_month(month) for month in timeline_months(workspace, count)]}


@router.get("/projects/{project_id}/grid")
def get_project_grid(
    project_id: str,
    count: int | None = Query(default=None, ge=1, le=120),
    workspace: PlannerWorkspace = Depends(get_workspace),
) -> dict[str, object]:
    with workspace.lock:
        if workspace.directory.get_project(project_id) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found.")
        return workspace.aggregation.project_grid(project_id, timeline_months(workspace, count))


# ---------- Pointer gestures ----------
@router.get("/grid/gesture")
def get_gesture_state(workspace: PlannerWorkspace = Depends(get_workspace)) -> dict[str, object]:
    with workspace.lock:
        drag = workspace.engine.drag
        return {
            "phase": workspace.engine.phase.value,
            "drag": (
                {
                    "project_id": drag.project_id,
                    "member_id": drag.member_id,
                    "start_month": str(drag.start_month),
                    "paint_value": drag.paint_value,
                    "moved": drag.moved,
                    "painted": sorted(str(month) for month in drag.painted),
                }
                if drag is not None
                else None
            ),
            "editor_open": workspace.engine.editor is not None,
        }


@router.post("/grid/gestures/pointer-down")
def pointer_down(payload: CellPayload, workspace: PlannerWorkspace = Depends(get_workspace)) -> dict[str, object]:
    cell = _cell(payload)
    with workspace.lock:
        _ensure_cell_targets(workspace, cell)
        return serialize_outcome(workspace.engine.pointer_down(cell))


@router.post("/grid/gestures/pointer-enter")
def pointer_enter(payload: CellPayload, workspace: PlannerWorkspace = Depends(get_workspace)) -> dict[str, object]:
    return serialize_outcome(workspace.engine.pointer_enter(_cell(payload)))


@router.post("/grid/gestures/pointer-up")
def pointer_up(payload: CellPayload, workspace: PlannerWorkspace = Depends(get_workspace)) -> dict[str, object]:
    return serialize_outcome(workspace.engine.pointer_up(_cell(payload)))


@router.post("/grid/gestures/release")
def release(workspace: PlannerWorkspace = Depends(get_workspace)) -> dict[str, object]:
    return serialize_outcome(workspace.engine.global_pointer_up())


# ---------- Inline editor ----------
@router.post("/grid/editor/open")
def open_editor(payload: CellPayload, workspace: PlannerWorkspace = Depends(get_workspace)) -> dict[str, object]:
    cell = _cell(payload)
    with workspace.lock:
        _ensure_cell_targets(workspace, cell)
        return serialize_outcome(workspace.engine.open_editor(cell))


@router.post("/grid/editor/commit")
def commit_editor(
    payload: EditorCommitPayload,
    workspace: PlannerWorkspace = Depends(get_workspace),
) -> dict[str, object]:
    return serialize_outcome(workspace.engine.commit_editor(payload.text))


@router.post("/grid/editor/cancel")
def cancel_editor(workspace: PlannerWorkspace = Depends(get_workspace)) -> dict[str, object]:
    return serialize_outcome(workspace.engine.cancel_editor())
