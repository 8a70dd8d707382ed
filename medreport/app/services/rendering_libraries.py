"""Lazy loading of the raster and document rendering libraries."""

from __future__ import annotations

import asyncio
import importlib
from types import ModuleType
from typing import Dict, Optional, Sequence

from ...utils.logging import get_logger

logger = get_logger(__name__)

# Rasterizer (PyMuPDF HTML layout, Pillow bitmaps) and page-document composer (reportlab).
DEFAULT_MODULES: Dict[str, Sequence[str]] = {
    "rasterizer": ("fitz", "PIL.Image", "PIL.ImageColor"),
    "composer": (
        "reportlab.pdfgen.canvas",
        "reportlab.lib.colors",
        "reportlab.lib.pagesizes",
        "reportlab.lib.units",
        "reportlab.lib.utils",
    ),
}


class RenderingLibraries:
    """Loads both rendering capabilities once and reports readiness.

    Readiness is a future resolved exactly once by the loader; callers either
    check :attr:`is_ready` or await :meth:`wait_ready` a single time.
    """

    def __init__(self, modules: Optional[Dict[str, Sequence[str]]] = None):
        self._modules = dict(modules or DEFAULT_MODULES)
        self._loaded: Dict[str, ModuleType] = {}
        self._ready: Optional[asyncio.Future] = None
        self._task: Optional[asyncio.Task] = None

    def _future(self) -> asyncio.Future:
        if self._ready is None:
            self._ready = asyncio.get_running_loop().create_future()
        return self._ready

    def start(self) -> asyncio.Future:
        """Schedule loading (idempotent) and return the readiness future."""
        ready = self._future()
        if self._task is None:
            self._task = asyncio.get_running_loop().create_task(self._load())
        return ready

    async def wait_ready(self) -> None:
        """Wait until both libraries are loaded; raises the load error if any."""
        await self.start()

    @property
    def is_ready(self) -> bool:
        ready = self._ready
        return ready is not None and ready.done() and not ready.cancelled() and ready.exception() is None

    @property
    def error(self) -> Optional[BaseException]:
        ready = self._ready
        if ready is None or not ready.done() or ready.cancelled():
            return None
        return ready.exception()

    def module(self, name: str) -> ModuleType:
        """Return a loaded module, e.g. ``module("PIL.Image")``."""
        if not self.is_ready:
            raise RuntimeError("Rendering libraries are not loaded")
        return self._loaded[name]

    def status(self) -> Dict[str, object]:
        return {
            "ready": self.is_ready,
            "loading": self._ready is not None and not self._ready.done(),
            "error": str(self.error) if self.error else None,
            "capabilities": sorted(self._modules),
        }

    async def _load(self) -> None:
        ready = self._future()
        try:
            loaded = await asyncio.to_thread(self._import_all)
        except Exception as exc:
            logger.error("Rendering libraries failed to load: %s", exc)
            if not ready.done():
                ready.set_exception(exc)
            # Mark the exception as retrieved; readiness is reported via ``error``.
            ready.exception()
            return
        self._loaded.update(loaded)
        logger.info(
            "Rendering libraries ready",
            extra={"extra_fields": {"capabilities": sorted(self._modules)}},
        )
        if not ready.done():
            ready.set_result(True)

    def _import_all(self) -> Dict[str, ModuleType]:
        loaded: Dict[str, ModuleType] = {}
        for capability, names in self._modules.items():
            for name in names:
                loaded[name] = importlib.import_module(name)
        return loaded
