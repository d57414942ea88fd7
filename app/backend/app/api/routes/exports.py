"""Export endpoint for planning datasets."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import Response

from app.api.routes.grid import timeline_months
from app.db.dependencies import get_workspace
from app.db.workspace import PlannerWorkspace
from app.models.entities import MemberType
from app.services.export_service import UnknownExportError, UnsupportedExportFormatError

router = APIRouter(prefix="/exports", tags=["exports"])


@router.get("/{report_key}")
def export_report(
    report_key: str,
    format: str = Query(default="xlsx"),
    count: int | None = Query(default=None, ge=1, le=120),
    member_type: MemberType | None = Query(default=None),
    workspace: PlannerWorkspace = Depends(get_workspace),
) -> Response:
    try:
        with workspace.lock:
            exported = workspace.exports.export_report(
                report_key=report_key,
                format_name=format,
                months=timeline_months(workspace, count),
                member_type=member_type,
            )
    except UnsupportedExportFormatError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    except UnknownExportError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return Response(
        content=exported.content,
        media_type=exported.media_type,
        headers={"Content-Disposition": f'attachment; filename="{exported.filename}"'},
    )
