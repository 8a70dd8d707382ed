"""Assembly of inference requests from an uploaded image."""

from __future__ import annotations

import base64
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field

from ...utils.config import ModelConfig
from ...utils.logging import get_logger
from ..errors import InvalidInputError
from ..models.analysis import AnalysisRequest
from ..models.report import Language
from .schema_contract import prompt_for, schema_for

logger = get_logger(__name__)


class ServiceRequest(BaseModel):
    """Everything the inference service needs for one analysis."""

    model_config = ConfigDict(frozen=True)

    mime_type: str
    image_base64: str = Field(..., repr=False)
    prompt: str
    response_schema: Dict[str, Any]
    temperature: float
    language: Language

    def to_payload(self) -> Dict[str, Any]:
        """Return the ``generateContent`` request body."""

        return {
            "contents": [
                {
                    "parts": [
                        {"inline_data": {"mime_type": self.mime_type, "data": self.image_base64}},
                        {"text": self.prompt},
                    ]
                }
            ],
            "generationConfig": {
                "responseMimeType": ModelConfig.RESPONSE_MIME_TYPE,
                "responseSchema": self.response_schema,
                "temperature": self.temperature,
            },
        }


class RequestBuilder:
    """Pairs an image with the localized prompt and the response schema."""

    def __init__(self, temperature: float = ModelConfig.TEMPERATURE):
        self._temperature = temperature

    def build(self, request: AnalysisRequest) -> ServiceRequest:
        """Build the service request, rejecting non-image input first."""

        if not request.mime_type.startswith("image/"):
            logger.warning("Rejected non-image upload with mime type %s", request.mime_type)
            raise InvalidInputError(
                f"Only image files are supported for analysis (got '{request.mime_type}')."
            )

        return ServiceRequest(
            mime_type=request.mime_type,
            image_base64=base64.b64encode(request.image_bytes).decode("ascii"),
            prompt=prompt_for(request.language),
            response_schema=schema_for(),
            temperature=self._temperature,
            language=request.language,
        )


request_builder = RequestBuilder()
