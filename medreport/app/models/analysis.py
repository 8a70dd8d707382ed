"""Analysis request and the single-flight analysis states."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ..errors import AnalysisError
from .report import AnalysisResult, Language


class AnalysisRequest(BaseModel):
    """One image submitted for analysis in a given language."""

    model_config = ConfigDict(frozen=True)

    image_bytes: bytes = Field(..., repr=False)
    mime_type: str
    language: Language = Language.EN

    def describe(self) -> Dict[str, Any]:
        return {
            "mime_type": self.mime_type,
            "language": self.language.value,
            "size_bytes": len(self.image_bytes),
        }


@dataclass(frozen=True)
class IdleState:
    """No analysis has been started yet."""

    status = "idle"
    generation: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"status": self.status, "generation": self.generation}


@dataclass(frozen=True)
class LoadingState:
    """An analysis is in flight."""

    request: AnalysisRequest
    generation: int
    status = "loading"

    @property
    def language(self) -> Language:
        return self.request.language

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "generation": self.generation,
            "request": self.request.describe(),
        }


@dataclass(frozen=True)
class SucceededState:
    """The most recent analysis produced a validated result."""

    result: AnalysisResult
    language: Language
    generation: int
    status = "succeeded"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "generation": self.generation,
            "language": self.language.value,
            "result": self.result.to_wire(),
        }


@dataclass(frozen=True)
class FailedState:
    """The most recent analysis failed."""

    error: AnalysisError
    language: Language
    generation: int
    status = "failed"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "generation": self.generation,
            "language": self.language.value,
            "error": self.error.to_dict(),
        }


AnalysisState = Union[IdleState, LoadingState, SucceededState, FailedState]


def state_language(state: AnalysisState) -> Optional[Language]:
    """Return the language a state is tagged with, if any."""

    return getattr(state, "language", None)
