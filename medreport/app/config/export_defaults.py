"""Configuration defaults for rendering and exporting reports."""

from __future__ import annotations

from functools import lru_cache
from typing import Dict, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..models.report import Language, Status, Theme


class ExportDefaults(BaseModel):
    """Rendering and export parameters provided by configuration."""

    capture_scale: int = Field(2, ge=2, description="Supersampling factor for raster capture")
    surface_width: int = Field(800, gt=0, description="Report width in CSS pixels")
    page_format: str = "A4"
    base_filename: str = "medical-report-analysis"
    font_path: Optional[str] = None
    arabic_font_path: Optional[str] = None

    def font_for(self, language: Language) -> Optional[str]:
        """Font file embedded in captures; None uses the renderer's bundled fonts."""
        if language is Language.AR and self.arabic_font_path:
            return self.arabic_font_path
        return self.font_path

    def filename_for(self, extension: str) -> str:
        return f"{self.base_filename}.{extension}"


class ExportDefaultsSettings(BaseSettings):
    """Environment-backed export defaults (``REPORT_`` prefix)."""

    model_config = SettingsConfigDict(
        env_prefix="REPORT_", env_file=".env", case_sensitive=False, extra="ignore"
    )

    capture_scale: int = 2
    surface_width: int = 800
    page_format: str = "A4"
    base_filename: str = "medical-report-analysis"
    font_path: Optional[str] = None
    arabic_font_path: Optional[str] = None

    @field_validator("page_format")
    @classmethod
    def normalize_page_format(cls, value: str) -> str:
        return value.strip().upper()


@lru_cache(maxsize=1)
def get_export_defaults() -> ExportDefaults:
    """Return cached export defaults as a Pydantic model."""

    settings = ExportDefaultsSettings()
    return ExportDefaults(**settings.model_dump())


# Background colours match the report card of the application in each theme.
THEME_COLORS: Dict[Theme, Dict[str, str]] = {
    Theme.LIGHT: {
        "background": "#ffffff",
        "page": "#f9fafb",
        "text": "#1f2937",
        "muted": "#6b7280",
        "heading": "#111827",
        "accent": "#2563eb",
        "rule": "#bfdbfe",
        "border": "#e5e7eb",
        "table_header": "#f9fafb",
    },
    Theme.DARK: {
        "background": "#1f2937",
        "page": "#111827",
        "text": "#e5e7eb",
        "muted": "#9ca3af",
        "heading": "#ffffff",
        "accent": "#60a5fa",
        "rule": "#1e40af",
        "border": "#374151",
        "table_header": "#374151",
    },
}

STATUS_COLORS: Dict[Theme, Dict[Status, Dict[str, str]]] = {
    Theme.LIGHT: {
        Status.NORMAL: {"bg": "#dcfce7", "text": "#166534"},
        Status.MODERATE: {"bg": "#fef9c3", "text": "#854d0e"},
        Status.SEVERE: {"bg": "#fee2e2", "text": "#991b1b"},
    },
    Theme.DARK: {
        Status.NORMAL: {"bg": "#14532d", "text": "#bbf7d0"},
        Status.MODERATE: {"bg": "#713f12", "text": "#fef08a"},
        Status.SEVERE: {"bg": "#7f1d1d", "text": "#fecaca"},
    },
}

FONT_FAMILIES: Dict[Language, str] = {
    Language.EN: "'Inter', 'Helvetica Neue', Arial, sans-serif",
    Language.AR: "'Cairo', 'Noto Naskh Arabic', 'Segoe UI', Tahoma, sans-serif",
}

FONT_STYLESHEETS: Dict[Language, str] = {
    Language.EN: "https://fonts.googleapis.com/css2?family=Inter:wght@400;700&display=swap",
    Language.AR: "https://fonts.googleapis.com/css2?family=Cairo:wght@400;700&display=swap",
}
