"""Forecast summary and narrative analysis endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.db.dependencies import get_workspace
from app.db.workspace import PlannerWorkspace
from app.services.summary_service import render_prompt

router = APIRouter(prefix="/analysis", tags=["analysis"])


@router.get("/payload")
def get_analysis_payload(workspace: PlannerWorkspace = Depends(get_workspace)) -> dict[str, object]:
    payload = workspace.narrative.payload()
    return {**payload.as_dict(), "prompt": render_prompt(payload)}


@router.post("")
async def run_analysis(workspace: PlannerWorkspace = Depends(get_workspace)) -> dict[str, str]:
    return {"analysis": await workspace.narrative.analyze()}
