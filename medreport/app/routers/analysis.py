"""REST router for running and inspecting report analyses."""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from pydantic import BaseModel

from medreport.utils.logging import get_logger, RequestContext
from medreport.app.errors import (
    AnalysisError,
    InvalidInputError,
    MalformedOutputError,
    NetworkError,
)
from medreport.app.models.analysis import FailedState
from medreport.app.models.report import Language
from medreport.app.routers.dependencies import get_analysis_controller
from medreport.app.services.analysis_controller import AnalysisController

router = APIRouter(prefix="/api/analysis", tags=["analysis"])
logger = get_logger(__name__)


class LanguageUpdate(BaseModel):
    language: Language


def http_error_for(error: AnalysisError) -> HTTPException:
    """Translate an analysis failure into the HTTP error shown to the client."""

    if isinstance(error, InvalidInputError):
        code = status.HTTP_415_UNSUPPORTED_MEDIA_TYPE
    elif isinstance(error, MalformedOutputError):
        code = status.HTTP_502_BAD_GATEWAY
    elif isinstance(error, NetworkError):
        code = status.HTTP_503_SERVICE_UNAVAILABLE
    else:
        code = status.HTTP_502_BAD_GATEWAY
    return HTTPException(status_code=code, detail=error.to_dict())


def _describe(controller: AnalysisController) -> Dict[str, Any]:
    payload = controller.state.to_dict()
    payload["selected_language"] = controller.language.value
    payload["stale"] = controller.is_stale
    return payload


@router.post("")
async def start_analysis(
    file: UploadFile = File(...),
    language: Optional[Language] = Form(None),
    controller: AnalysisController = Depends(get_analysis_controller),
) -> Dict[str, Any]:
    """Analyze one uploaded report image and return the resulting state."""

    with RequestContext():
        if language is not None:
            controller.set_language(language)

        image_bytes = await file.read()
        analysis_request = controller.request_for(image_bytes, file.content_type or "")
        logger.info(
            "Analysis requested",
            extra={"extra_fields": {"filename": file.filename, **analysis_request.describe()}},
        )

        state = await controller.start(analysis_request)
        if isinstance(state, FailedState):
            raise http_error_for(state.error)
        return _describe(controller)


@router.get("")
async def read_analysis(
    controller: AnalysisController = Depends(get_analysis_controller),
) -> Dict[str, Any]:
    """Return the current analysis state."""

    return _describe(controller)


@router.put("/language")
async def update_language(
    payload: LanguageUpdate,
    controller: AnalysisController = Depends(get_analysis_controller),
) -> Dict[str, Any]:
    """Select the language used by the next analysis."""

    controller.set_language(payload.language)
    return _describe(controller)
