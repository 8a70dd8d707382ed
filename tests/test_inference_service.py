import json

import httpx
import pytest

from medreport.app.errors import NetworkError, ServiceError
from medreport.app.services.request_builder import RequestBuilder
from medreport.services.inference_service import InferenceService

ENDPOINT = "https://inference.test/v1beta"


def _service(handler, api_key="test-key"):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return InferenceService(api_key=api_key, endpoint=ENDPOINT, model="gemini-test", client=client)


def _envelope(*texts):
    return {
        "candidates": [
            {
                "content": {"role": "model", "parts": [{"text": text} for text in texts]},
                "finishReason": "STOP",
            }
        ]
    }


@pytest.fixture
def service_request(png_request):
    return RequestBuilder().build(png_request)


@pytest.mark.asyncio
async def test_generate_posts_payload_and_returns_text(service_request):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["key"] = request.headers.get("x-goog-api-key")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=_envelope('{"patientSummary":', '"OK"}'))

    async with _service(handler) as service:
        text = await service.generate(service_request)

    assert text == '{"patientSummary":"OK"}'
    assert seen["url"] == f"{ENDPOINT}/models/gemini-test:generateContent"
    assert seen["key"] == "test-key"
    assert seen["body"] == service_request.to_payload()
    assert service.performance_stats["successful_requests"] == 1


@pytest.mark.asyncio
async def test_http_error_is_service_error_with_status(service_request):
    service = _service(lambda request: httpx.Response(500, json={"error": {"message": "internal"}}))

    with pytest.raises(ServiceError) as excinfo:
        await service.generate(service_request)

    assert not isinstance(excinfo.value, NetworkError)
    assert excinfo.value.status_code == 500
    assert service.performance_stats["failed_requests"] == 1
    await service.aclose()


@pytest.mark.asyncio
async def test_unreachable_service_is_network_error(service_request):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    service = _service(handler)

    with pytest.raises(NetworkError):
        await service.generate(service_request)
    await service.aclose()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {"candidates": [], "promptFeedback": {"blockReason": "SAFETY"}},
        {},
        {"candidates": [{"content": {"parts": []}, "finishReason": "MAX_TOKENS"}]},
    ],
)
async def test_envelope_without_text_is_service_error(service_request, body):
    service = _service(lambda request: httpx.Response(200, json=body))

    with pytest.raises(ServiceError):
        await service.generate(service_request)
    await service.aclose()


@pytest.mark.asyncio
async def test_non_json_envelope_is_service_error(service_request):
    service = _service(lambda request: httpx.Response(200, text="<html>gateway</html>"))

    with pytest.raises(ServiceError):
        await service.generate(service_request)
    await service.aclose()


@pytest.mark.asyncio
async def test_missing_api_key_fails_before_any_call(service_request):
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json=_envelope("{}"))

    service = _service(handler, api_key="")

    with pytest.raises(ServiceError):
        await service.generate(service_request)
    assert calls == []
    await service.aclose()
