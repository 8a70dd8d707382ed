"""Service modules for the analysis and export pipelines."""

from medreport.app.services.analysis_controller import AnalysisController
from medreport.app.services.export_engine import ExportEngine, paginate
from medreport.app.services.rendering_libraries import RenderingLibraries
from medreport.app.services.report_surface import ReportSurface, render_surface
from medreport.app.services.request_builder import RequestBuilder, ServiceRequest, request_builder
from medreport.app.services.response_mapper import ResponseMapper, response_mapper
from medreport.app.services.schema_contract import prompt_for, schema_for

__all__ = [
    "AnalysisController",
    "ExportEngine",
    "paginate",
    "RenderingLibraries",
    "ReportSurface",
    "render_surface",
    "RequestBuilder",
    "ServiceRequest",
    "request_builder",
    "ResponseMapper",
    "response_mapper",
    "prompt_for",
    "schema_for",
]
