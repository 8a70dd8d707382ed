"""
FastAPI main application for the medical report analyzer.
Provides REST endpoints for report analysis and export.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
import uvicorn

from medreport import __version__
from medreport.app.routers.analysis import router as analysis_router
from medreport.app.routers.reports import router as reports_router
from medreport.app.services.analysis_controller import AnalysisController, InferenceClient
from medreport.app.services.export_engine import ExportEngine
from medreport.services.inference_service import InferenceService
from medreport.utils.config import settings
from medreport.utils.logging import get_logger

logger = get_logger(__name__)


class HealthResponse(BaseModel):
    status: str
    timestamp: float
    services: Dict[str, Any]
    version: str = __version__


def _now() -> datetime:
    return datetime.now(timezone.utc)


def create_app(
    service: Optional[InferenceClient] = None,
    export_engine: Optional[ExportEngine] = None,
    wait_for_rendering: bool = False,
) -> FastAPI:
    """Build the application with its own controller and export engine."""

    inference = service if service is not None else InferenceService()
    engine = export_engine or ExportEngine()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting medical report analyzer API server")
        ready = engine.libraries.start()
        if wait_for_rendering:
            await ready
        yield
        logger.info("Shutting down medical report analyzer API server")
        close = getattr(inference, "aclose", None)
        if close is not None:
            await close()

    app = FastAPI(
        title="Medical Report Analyzer API",
        description="Structured analysis of medical lab report images",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.analysis_controller = AnalysisController(inference)
    app.state.export_engine = engine

    app.include_router(analysis_router)
    app.include_router(reports_router)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health", response_model=HealthResponse)
    async def health_check(request: Request) -> HealthResponse:
        """Report API health and rendering library readiness."""
        controller: AnalysisController = request.app.state.analysis_controller
        libraries = request.app.state.export_engine.libraries.status()
        return HealthResponse(
            status="healthy" if libraries["ready"] else "degraded",
            timestamp=_now().timestamp(),
            services={
                "analysis": {
                    "state": controller.state.status,
                    "language": controller.language.value,
                },
                "rendering_libraries": libraries,
            },
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request, exc):
        """Handle HTTP exceptions."""
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": exc.detail,
                "status_code": exc.status_code,
                "timestamp": _now().isoformat(),
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request, exc):
        """Handle general exceptions."""
        logger.error(f"Unhandled exception: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "Internal server error",
                "status_code": 500,
                "timestamp": _now().isoformat(),
            },
        )

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "medreport.api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_level=settings.log_level.lower(),
    )
