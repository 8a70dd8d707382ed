"""
Inference service client for the medical report analyzer.
Sends one image + prompt + response schema to Gemini's generateContent endpoint.
Exactly one attempt per analysis: no retry, no fallback model, no cache.
"""

import uuid
from typing import Any, Dict, Optional

import httpx

from medreport.app.errors import NetworkError, ServiceError
from medreport.app.services.request_builder import ServiceRequest
from medreport.utils.config import settings
from medreport.utils.logging import get_logger, get_compliance_logger, monitor_latency

logger = get_logger(__name__)
compliance_logger = get_compliance_logger()


class InferenceService:
    """Structured-generation client for the Gemini REST API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        endpoint: Optional[str] = None,
        model: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.gemini_api_key
        self.endpoint = (endpoint or settings.gemini_endpoint).rstrip("/")
        self.model = model or settings.gemini_model
        self._client = client
        self.performance_stats = {
            "total_requests": 0,
            "successful_requests": 0,
            "failed_requests": 0,
        }

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    @property
    def url(self) -> str:
        return f"{self.endpoint}/models/{self.model}:generateContent"

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(settings.request_timeout))
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def generate(self, request: ServiceRequest) -> str:
        """Run one analysis and return the raw response text."""

        if not self.api_key:
            raise ServiceError("GEMINI_API_KEY environment variable is not set")

        self.performance_stats["total_requests"] += 1
        try:
            text = await self._call_gemini(request.to_payload())
        except ServiceError:
            self.performance_stats["failed_requests"] += 1
            raise
        self.performance_stats["successful_requests"] += 1

        compliance_logger.log_llm_interaction(
            request_id=str(uuid.uuid4()),
            model=self.model,
            prompt_length=len(request.prompt),
            response_length=len(text),
            language=request.language.value,
            mime_type=request.mime_type,
            image_bytes=len(request.image_base64) * 3 // 4,
        )
        return text

    @monitor_latency("inference_gemini", "gemini")
    async def _call_gemini(self, payload: Dict[str, Any]) -> str:
        """Call the generateContent endpoint."""
        try:
            response = await self._get_client().post(
                self.url,
                json=payload,
                headers={"x-goog-api-key": self.api_key},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"Gemini API error {e.response.status_code}: {e}")
            raise ServiceError(
                f"Inference service returned HTTP {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.RequestError as e:
            logger.error(f"Gemini API unreachable: {e}")
            raise NetworkError(f"Inference service unreachable: {e}") from e

        try:
            result = response.json()
        except ValueError as e:
            raise ServiceError("Inference service returned a non-JSON envelope") from e
        return self._extract_text(result)

    @staticmethod
    def _extract_text(result: Dict[str, Any]) -> str:
        """Concatenate the text parts of the first candidate."""

        candidates = result.get("candidates") or []
        if not candidates:
            reason = (result.get("promptFeedback") or {}).get("blockReason", "no candidates")
            logger.error("Gemini response has no candidates: %s", reason)
            raise ServiceError(f"Inference service returned no result ({reason})")

        parts = (candidates[0].get("content") or {}).get("parts") or []
        text = "".join(part.get("text", "") for part in parts if isinstance(part, dict))
        if not text:
            finish_reason = candidates[0].get("finishReason", "unknown")
            raise ServiceError(f"Inference service returned no text (finishReason={finish_reason})")
        return text


inference_service = InferenceService()
