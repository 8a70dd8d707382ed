"""Model modules for the medical report analyzer."""

from medreport.app.models.report import (
    AnalysisResult,
    Language,
    PatientDetails,
    PhysicianReportItem,
    Recommendations,
    Status,
    Theme,
)
from medreport.app.models.analysis import (
    AnalysisRequest,
    AnalysisState,
    FailedState,
    IdleState,
    LoadingState,
    SucceededState,
)
from medreport.app.models.export import (
    ExportArtifact,
    ExportKind,
    HtmlArtifact,
    PdfArtifact,
    PngArtifact,
)

__all__ = [
    "AnalysisResult",
    "Language",
    "PatientDetails",
    "PhysicianReportItem",
    "Recommendations",
    "Status",
    "Theme",
    "AnalysisRequest",
    "AnalysisState",
    "FailedState",
    "IdleState",
    "LoadingState",
    "SucceededState",
    "ExportArtifact",
    "ExportKind",
    "HtmlArtifact",
    "PdfArtifact",
    "PngArtifact",
]
