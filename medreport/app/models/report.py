"""Pydantic models for analyzed medical lab reports."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Language(str, Enum):
    """Languages the analysis and the rendered report can be produced in."""

    EN = "en"
    AR = "ar"

    @property
    def direction(self) -> str:
        return "rtl" if self is Language.AR else "ltr"


class Theme(str, Enum):
    """Display theme the report is rendered and exported with."""

    LIGHT = "light"
    DARK = "dark"


class Status(str, Enum):
    """Severity classification of a single lab parameter."""

    NORMAL = "normal"
    MODERATE = "moderate"
    SEVERE = "severe"


class _WireModel(BaseModel):
    """Frozen model that reads and writes the camelCase response shape."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")


class PatientDetails(_WireModel):
    """Demographic and test information read from the report header."""

    name: str
    age: str
    test_date: str = Field(..., alias="testDate")
    test_type: str = Field(..., alias="testType")


class PhysicianReportItem(_WireModel):
    """One measured parameter with its reference range and classification."""

    parameter: str
    value: str
    reference_range: str = Field(..., alias="referenceRange")
    status: Status
    explanation: str


class Recommendations(_WireModel):
    """Ordered advice lists, each possibly empty."""

    general: List[str] = Field(default_factory=list)
    nutrition: List[str] = Field(default_factory=list)
    physical_therapy: List[str] = Field(default_factory=list, alias="physicalTherapy")


class AnalysisResult(_WireModel):
    """Validated outcome of one successful analysis."""

    patient_details: Optional[PatientDetails] = Field(default=None, alias="patientDetails")
    patient_summary: str = Field(..., alias="patientSummary")
    physician_report: List[PhysicianReportItem] = Field(..., alias="physicianReport")
    recommendations: Recommendations

    def to_wire(self) -> Dict[str, Any]:
        """Serialize back to the response schema shape."""

        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
