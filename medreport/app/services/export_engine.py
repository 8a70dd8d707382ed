"""Raster capture and PDF / PNG / portable HTML export of a rendered report."""

from __future__ import annotations

import asyncio
import io
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from ...utils.logging import get_compliance_logger, get_logger, monitor_latency
from ..config.export_defaults import (
    FONT_FAMILIES,
    FONT_STYLESHEETS,
    STATUS_COLORS,
    ExportDefaults,
    get_export_defaults,
)
from ..errors import ExportError
from ..models.export import ExportArtifact, ExportKind, HtmlArtifact, PdfArtifact, PngArtifact
from ..models.report import Status
from .rendering_libraries import RenderingLibraries
from .report_surface import ReportSurface, template_environment

logger = get_logger(__name__)
compliance_logger = get_compliance_logger()

# Remaining content shorter than this (in page units) does not open a new page.
_PAGINATION_EPSILON = 1e-6

# Layout segment height in points; longer reports are laid out over several segments.
_SEGMENT_HEIGHT = 8000

_FONT_FAMILY = "report-font"


@dataclass(frozen=True)
class RasterImage:
    """Bitmap of a report surface. Local to the export call that captured it."""

    image: Any
    scale: int
    background: str

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height


def paginate(image_width: float, image_height: float, page_width: float, page_height: float) -> List[float]:
    """Return the upward offset of the full image on every page.

    The image is scaled to the page width. Page ``k`` draws the same image
    shifted up by ``k * page_height``; pages are added while content remains
    below the bottom edge of the current page.
    """

    if image_width <= 0 or image_height <= 0 or page_width <= 0 or page_height <= 0:
        raise ValueError("Image and page dimensions must be positive")

    scaled_height = image_height * page_width / image_width
    offsets = [0.0]
    remaining = scaled_height - page_height
    while remaining > _PAGINATION_EPSILON:
        offsets.append(len(offsets) * page_height)
        remaining -= page_height
    return offsets


def render_document(surface: ReportSurface, defaults: Optional[ExportDefaults] = None,
                    capture: bool = False, font_face: Optional[str] = None) -> str:
    """Wrap the surface markup in the standalone, styled report document.

    With ``capture`` the document is laid out edge to edge for rasterizing and
    links no remote stylesheets. ``font_face`` names a font file to embed.
    """

    defaults = defaults or get_export_defaults()
    font_family = FONT_FAMILIES[surface.language]
    if font_face:
        font_family = f"{_FONT_FAMILY}, {font_family}"
    return template_environment().get_template("report.html.j2").render(
        surface=surface,
        colors=surface.colors,
        status_colors={status: STATUS_COLORS[surface.theme][status] for status in Status},
        font_family=font_family,
        font_face=font_face,
        font_stylesheet=None if capture else FONT_STYLESHEETS[surface.language],
        surface_width=defaults.surface_width,
        capture=capture,
    )


def _layout_pages(document: str, width: int, fitz, font_path: Optional[str]) -> bytes:
    """Lay out ``document`` with the MuPDF HTML engine into segment pages."""

    archive = fitz.Archive()
    if font_path:
        font = Path(font_path)
        if not font.is_file():
            raise FileNotFoundError(f"Font file not found: {font_path}")
        archive.add(str(font.parent))

    story = fitz.Story(html=document, archive=archive)
    buffer = io.BytesIO()
    writer = fitz.DocumentWriter(buffer)
    more = True
    while more:
        more, filled = story.place(fitz.Rect(0, 0, width, _SEGMENT_HEIGHT))
        height = _SEGMENT_HEIGHT if more else max(filled.y1, 1)
        device = writer.begin_page(fitz.Rect(0, 0, width, height))
        story.draw(device)
        writer.end_page()
    writer.close()
    return buffer.getvalue()


def capture_surface(surface: ReportSurface, libraries: RenderingLibraries,
                    defaults: Optional[ExportDefaults] = None) -> RasterImage:
    """Render the surface's report document to a bitmap at the configured scale.

    The markup is laid out by MuPDF, which shapes complex scripts and falls
    back to its bundled Noto fonts for glyphs the configured font lacks.
    """

    defaults = defaults or get_export_defaults()
    fitz = libraries.module("fitz")
    Image = libraries.module("PIL.Image")
    ImageColor = libraries.module("PIL.ImageColor")

    font_path = defaults.font_for(surface.language)
    document = render_document(
        surface, defaults, capture=True,
        font_face=Path(font_path).name if font_path else None,
    )
    pdf_bytes = _layout_pages(document, defaults.surface_width, fitz, font_path)

    background = surface.colors["background"]
    fill = tuple(channel / 255 for channel in ImageColor.getrgb(background))
    matrix = fitz.Matrix(defaults.capture_scale, defaults.capture_scale)
    segments = []
    with fitz.open(stream=pdf_bytes, filetype="pdf") as pages:
        for page in pages:
            page.draw_rect(page.rect, color=None, fill=fill, overlay=False)
            pix = page.get_pixmap(matrix=matrix, alpha=False)
            segments.append(Image.frombytes("RGB", (pix.width, pix.height), pix.samples))

    image = Image.new("RGB", (segments[0].width, sum(segment.height for segment in segments)), background)
    top = 0
    for segment in segments:
        image.paste(segment, (0, top))
        top += segment.height
    return RasterImage(image=image, scale=defaults.capture_scale, background=background)


def assemble_pdf(raster: RasterImage, surface: ReportSurface, libraries: RenderingLibraries,
                 defaults: Optional[ExportDefaults] = None) -> PdfArtifact:
    """Compose ``raster`` into a paginated PDF, scaled to the page width."""

    defaults = defaults or get_export_defaults()
    canvas_module = libraries.module("reportlab.pdfgen.canvas")
    pagesizes = libraries.module("reportlab.lib.pagesizes")
    mm = libraries.module("reportlab.lib.units").mm
    ImageReader = libraries.module("reportlab.lib.utils").ImageReader
    colors = libraries.module("reportlab.lib.colors")

    page_size = getattr(pagesizes, defaults.page_format, None)
    if page_size is None:
        raise ValueError(f"Unknown page format '{defaults.page_format}'")
    page_width, page_height = pagesizes.portrait(page_size)
    page_size_mm = (round(page_width / mm, 2), round(page_height / mm, 2))

    offsets_mm = paginate(raster.width, raster.height, page_width / mm, page_height / mm)
    image_height = raster.height * page_width / raster.width

    buffer = io.BytesIO()
    pdf = canvas_module.Canvas(buffer, pagesize=(page_width, page_height))
    pdf.setTitle(surface.labels["title"])
    pdf.setSubject(f"lang={surface.language.value}; theme={surface.theme.value}")
    reader = ImageReader(raster.image)
    for offset in offsets_mm:
        pdf.setFillColor(colors.HexColor(raster.background))
        pdf.rect(0, 0, page_width, page_height, stroke=0, fill=1)
        pdf.drawImage(reader, 0, page_height - image_height + offset * mm,
                      width=page_width, height=image_height)
        pdf.showPage()
    pdf.save()

    return PdfArtifact(
        content=buffer.getvalue(),
        page_size_mm=page_size_mm,
        page_offsets_mm=tuple(offsets_mm),
        filename=defaults.filename_for("pdf"),
    )


def assemble_png(raster: RasterImage, defaults: Optional[ExportDefaults] = None) -> PngArtifact:
    """Encode ``raster`` as a PNG image."""

    defaults = defaults or get_export_defaults()
    buffer = io.BytesIO()
    raster.image.save(buffer, format="PNG")
    return PngArtifact(
        content=buffer.getvalue(),
        width=raster.width,
        height=raster.height,
        filename=defaults.filename_for("png"),
    )


def assemble_html(surface: ReportSurface, defaults: Optional[ExportDefaults] = None) -> HtmlArtifact:
    """Wrap the surface markup in a standalone, styled HTML document."""

    defaults = defaults or get_export_defaults()
    return HtmlArtifact(document=render_document(surface, defaults), filename=defaults.filename_for("html"))


class ExportEngine:
    """Produces export artifacts from a report surface, one per kind at a time."""

    def __init__(self, libraries: Optional[RenderingLibraries] = None,
                 defaults: Optional[ExportDefaults] = None):
        self.libraries = libraries or RenderingLibraries()
        self._defaults = defaults
        self._locks = {kind: asyncio.Lock() for kind in ExportKind}

    @property
    def defaults(self) -> ExportDefaults:
        return self._defaults or get_export_defaults()

    def available_exports(self, has_result: bool) -> Dict[str, bool]:
        """Which export actions are currently enabled."""
        ready = self.libraries.is_ready
        return {
            ExportKind.PDF.value: has_result and ready,
            ExportKind.PNG.value: has_result and ready,
            ExportKind.HTML.value: has_result,
        }

    def is_busy(self, kind: ExportKind) -> bool:
        return self._locks[ExportKind(kind)].locked()

    @monitor_latency("report_capture")
    async def capture(self, surface: ReportSurface) -> RasterImage:
        """Rasterize ``surface`` off the event loop."""
        return await asyncio.to_thread(capture_surface, surface, self.libraries, self.defaults)

    async def export(self, kind: ExportKind, surface: ReportSurface) -> ExportArtifact:
        """Build the ``kind`` artifact for ``surface``; raises :class:`ExportError`."""

        kind = ExportKind(kind)
        lock = self._locks[kind]
        try:
            if lock.locked():
                raise ExportError(kind.value, ExportError.BUSY,
                                  f"A {kind.value.upper()} export is already in progress.")
            async with lock:
                if kind.needs_rendering_libraries and not self.libraries.is_ready:
                    raise ExportError(kind.value, ExportError.NOT_READY,
                                      f"{kind.value.upper()} export is not ready. Please try again in a moment.")
                artifact = await self._build(kind, surface)
        except ExportError as exc:
            logger.error("Report export failed: %s", exc.message,
                         extra={"extra_fields": {"kind": kind.value, "reason": exc.reason}})
            compliance_logger.log_export(kind.value, surface.language.value, surface.theme.value,
                                         success=False, reason=exc.reason)
            raise

        compliance_logger.log_export(kind.value, surface.language.value, surface.theme.value,
                                     success=True, size=len(artifact.body))
        return artifact

    @monitor_latency("report_export")
    async def _build(self, kind: ExportKind, surface: ReportSurface) -> ExportArtifact:
        if kind is ExportKind.HTML:
            try:
                return assemble_html(surface, self.defaults)
            except Exception as exc:
                raise ExportError(kind.value, ExportError.ENCODING_FAILED,
                                  f"An error occurred while generating the HTML document: {exc}") from exc

        try:
            raster = await self.capture(surface)
        except Exception as exc:
            raise ExportError(kind.value, ExportError.CAPTURE_FAILED,
                              f"An error occurred while capturing the report: {exc}") from exc

        try:
            if kind is ExportKind.PDF:
                return await asyncio.to_thread(assemble_pdf, raster, surface, self.libraries, self.defaults)
            return await asyncio.to_thread(assemble_png, raster, self.defaults)
        except Exception as exc:
            raise ExportError(kind.value, ExportError.ENCODING_FAILED,
                              f"An error occurred while generating the {kind.value.upper()}: {exc}") from exc
