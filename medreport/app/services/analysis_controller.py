"""Single-flight coordination of one analysis at a time."""

from __future__ import annotations

from typing import Optional, Protocol

from ...utils.logging import get_logger
from ..errors import AnalysisError, ServiceError
from ..models.analysis import (
    AnalysisRequest,
    AnalysisState,
    FailedState,
    IdleState,
    LoadingState,
    SucceededState,
    state_language,
)
from ..models.report import AnalysisResult, Language
from .request_builder import RequestBuilder, ServiceRequest
from .response_mapper import ResponseMapper

logger = get_logger(__name__)


class InferenceClient(Protocol):
    async def generate(self, request: ServiceRequest) -> str: ...


class AnalysisController:
    """Publishes the state of the most recently started analysis.

    Each ``start`` takes a new generation number. A response is applied only
    while its generation is still the current one, so a slow response of a
    superseded analysis can never overwrite newer state.
    """

    def __init__(
        self,
        service: InferenceClient,
        builder: Optional[RequestBuilder] = None,
        mapper: Optional[ResponseMapper] = None,
        language: Language = Language.EN,
    ):
        self._service = service
        self._builder = builder or RequestBuilder()
        self._mapper = mapper or ResponseMapper()
        self._language = Language(language)
        self._generation = 0
        self._state: AnalysisState = IdleState()

    @property
    def state(self) -> AnalysisState:
        return self._state

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def language(self) -> Language:
        return self._language

    @property
    def current_result(self) -> Optional[AnalysisResult]:
        if isinstance(self._state, SucceededState):
            return self._state.result
        return None

    @property
    def is_stale(self) -> bool:
        """True when the published state belongs to another language."""
        tagged = state_language(self._state)
        return tagged is not None and tagged is not self._language

    def set_language(self, language: Language) -> None:
        """Select the language of the next analysis; the current state is kept."""
        language = Language(language)
        if language is not self._language:
            logger.info(
                "Analysis language changed",
                extra={"extra_fields": {"from": self._language.value, "to": language.value}},
            )
        self._language = language

    def request_for(self, image_bytes: bytes, mime_type: str) -> AnalysisRequest:
        """Create a request in the currently selected language."""
        return AnalysisRequest(image_bytes=image_bytes, mime_type=mime_type, language=self._language)

    async def start(self, request: AnalysisRequest) -> AnalysisState:
        """Run one analysis and return the state current when it finishes."""

        self._generation += 1
        generation = self._generation
        self._publish(LoadingState(request=request, generation=generation))

        try:
            service_request = self._builder.build(request)
            raw = await self._service.generate(service_request)
            result = self._mapper.parse(raw)
        except AnalysisError as exc:
            self._apply(generation, FailedState(error=exc, language=request.language, generation=generation))
        except Exception as exc:
            logger.exception("Unexpected failure during analysis")
            error = ServiceError(f"An error occurred while analyzing the medical report: {exc}")
            self._apply(generation, FailedState(error=error, language=request.language, generation=generation))
        else:
            self._apply(
                generation,
                SucceededState(result=result, language=request.language, generation=generation),
            )
        return self._state

    def _apply(self, generation: int, state: AnalysisState) -> None:
        if generation != self._generation:
            logger.info(
                "Discarding superseded analysis outcome",
                extra={
                    "extra_fields": {
                        "generation": generation,
                        "current_generation": self._generation,
                        "outcome": state.status,
                    }
                },
            )
            return
        self._publish(state)

    def _publish(self, state: AnalysisState) -> None:
        previous = self._state.status
        self._state = state
        extra = {"from": previous, "to": state.status, "generation": state.generation}
        if isinstance(state, FailedState):
            extra["error"] = state.error.code
            logger.warning(f"Analysis failed: {state.error.message}", extra={"extra_fields": extra})
        else:
            logger.info("Analysis state changed", extra={"extra_fields": extra})
