"""Rendered report snapshots shared by the display and export paths."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..config.export_defaults import STATUS_COLORS, THEME_COLORS
from ..config.labels import labels_for
from ..models.report import AnalysisResult, Language, Status, Theme

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
_env = Environment(
    loader=FileSystemLoader(TEMPLATE_DIR),
    autoescape=select_autoescape(["html", "xml", "j2"]),
    trim_blocks=True,
    lstrip_blocks=True,
)


def template_environment() -> Environment:
    return _env


def show_explanation(status: Status) -> bool:
    """Explanations are displayed for non-normal findings only."""
    return status is not Status.NORMAL


@dataclass(frozen=True)
class ReportSurface:
    """Immutable snapshot of the report exactly as it is displayed."""

    result: AnalysisResult
    language: Language
    theme: Theme
    labels: Dict[str, str] = field(repr=False)
    markup: str = field(repr=False)

    @property
    def direction(self) -> str:
        return self.language.direction

    @property
    def colors(self) -> Dict[str, str]:
        return THEME_COLORS[self.theme]

    def status_colors(self, status: Status) -> Dict[str, str]:
        return STATUS_COLORS[self.theme][status]


def render_surface(result: AnalysisResult, language: Language, theme: Theme = Theme.LIGHT) -> ReportSurface:
    """Render ``result`` into the report markup for ``language`` and ``theme``."""

    language = Language(language)
    theme = Theme(theme)
    labels = labels_for(language)
    markup = _env.get_template("report_body.html.j2").render(
        result=result,
        labels=labels,
        language=language,
        theme=theme,
        show_explanation=show_explanation,
    )
    return ReportSurface(
        result=result,
        language=language,
        theme=theme,
        labels=labels,
        markup=markup,
    )
