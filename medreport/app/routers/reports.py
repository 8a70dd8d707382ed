"""REST router for displaying and exporting the analyzed report."""

from __future__ import annotations

import io
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import HTMLResponse, StreamingResponse

from medreport.utils.logging import get_logger
from medreport.app.errors import ExportError
from medreport.app.models.analysis import SucceededState
from medreport.app.models.export import ExportKind
from medreport.app.models.report import Language, Theme
from medreport.app.routers.dependencies import get_analysis_controller, get_export_engine
from medreport.app.services.analysis_controller import AnalysisController
from medreport.app.services.export_engine import ExportEngine
from medreport.app.services.report_surface import ReportSurface, render_surface

router = APIRouter(prefix="/api/reports", tags=["reports"])
logger = get_logger(__name__)

_EXPORT_ERROR_STATUS = {
    ExportError.NOT_READY: status.HTTP_503_SERVICE_UNAVAILABLE,
    ExportError.BUSY: status.HTTP_409_CONFLICT,
}


def _current_surface(
    controller: AnalysisController, theme: Theme, language: Optional[Language]
) -> ReportSurface:
    """Snapshot the report currently shown, in the result's own language by default."""

    state = controller.state
    if not isinstance(state, SucceededState):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No analyzed report is available.",
        )
    return render_surface(state.result, language or state.language, theme)


@router.get("/current", response_class=HTMLResponse)
async def view_report(
    theme: Theme = Theme.LIGHT,
    language: Optional[Language] = None,
    controller: AnalysisController = Depends(get_analysis_controller),
) -> HTMLResponse:
    """Return the rendered report markup."""

    surface = _current_surface(controller, theme, language)
    return HTMLResponse(content=surface.markup)


@router.get("/exports")
async def read_export_availability(
    controller: AnalysisController = Depends(get_analysis_controller),
    engine: ExportEngine = Depends(get_export_engine),
) -> Dict[str, Any]:
    """Return which export actions are enabled right now."""

    return {
        "available": engine.available_exports(controller.current_result is not None),
        "busy": {kind.value: engine.is_busy(kind) for kind in ExportKind},
        "rendering_libraries": engine.libraries.status(),
    }


@router.get("/export/{kind}")
async def export_report(
    kind: ExportKind,
    theme: Theme = Theme.LIGHT,
    language: Optional[Language] = None,
    controller: AnalysisController = Depends(get_analysis_controller),
    engine: ExportEngine = Depends(get_export_engine),
) -> StreamingResponse:
    """Export the current report as a downloadable PDF, PNG or HTML file."""

    surface = _current_surface(controller, theme, language)
    try:
        artifact = await engine.export(kind, surface)
    except ExportError as exc:
        raise HTTPException(
            status_code=_EXPORT_ERROR_STATUS.get(exc.reason, status.HTTP_500_INTERNAL_SERVER_ERROR),
            detail=exc.to_dict(),
        ) from exc

    logger.info(
        "Report exported",
        extra={"extra_fields": {"kind": kind.value, "filename": artifact.filename, "size": len(artifact.body)}},
    )
    headers = {
        "Content-Disposition": f'attachment; filename="{artifact.filename}"',
    }
    return StreamingResponse(
        io.BytesIO(artifact.body), media_type=artifact.media_type, headers=headers
    )
