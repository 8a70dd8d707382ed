"""Request-scoped access to the application's pipeline objects."""

from __future__ import annotations

from fastapi import Request

from ..services.analysis_controller import AnalysisController
from ..services.export_engine import ExportEngine


def get_analysis_controller(request: Request) -> AnalysisController:
    return request.app.state.analysis_controller


def get_export_engine(request: Request) -> ExportEngine:
    return request.app.state.export_engine
