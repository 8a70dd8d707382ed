"""Export artifacts produced from a rendered report."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple, Union


class ExportKind(str, Enum):
    """Downloadable export formats."""

    PDF = "pdf"
    PNG = "png"
    HTML = "html"

    @property
    def needs_rendering_libraries(self) -> bool:
        return self is not ExportKind.HTML


@dataclass(frozen=True)
class PdfArtifact:
    """Paginated PDF; every page draws the same raster shifted by its offset."""

    content: bytes = field(repr=False)
    page_size_mm: Tuple[float, float]
    page_offsets_mm: Tuple[float, ...]
    filename: str
    kind = ExportKind.PDF
    media_type = "application/pdf"

    @property
    def page_count(self) -> int:
        return len(self.page_offsets_mm)

    @property
    def body(self) -> bytes:
        return self.content


@dataclass(frozen=True)
class PngArtifact:
    """Single raster image of the whole report."""

    content: bytes = field(repr=False)
    width: int
    height: int
    filename: str
    kind = ExportKind.PNG
    media_type = "image/png"

    @property
    def body(self) -> bytes:
        return self.content


@dataclass(frozen=True)
class HtmlArtifact:
    """Self-contained HTML document reproducing the rendered report."""

    document: str = field(repr=False)
    filename: str
    kind = ExportKind.HTML
    media_type = "text/html; charset=utf-8"

    @property
    def body(self) -> bytes:
        return self.document.encode("utf-8")


ExportArtifact = Union[PdfArtifact, PngArtifact, HtmlArtifact]
