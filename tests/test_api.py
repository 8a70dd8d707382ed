import io
import json

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from medreport.api.main import create_app
from medreport.app.errors import NetworkError

from conftest import PNG_BYTES, FakeInference, sample_payload


def _client(service=None):
    app = create_app(service=service or FakeInference(), wait_for_rendering=True)
    return TestClient(app)


def _upload(client, content=PNG_BYTES, content_type="image/png", **data):
    return client.post(
        "/api/analysis",
        files={"file": ("report.png", content, content_type)},
        data=data,
    )


@pytest.fixture
def service():
    return FakeInference(payload=sample_payload(items=3))


@pytest.fixture
def client(service):
    with _client(service) as client:
        yield client


def test_health_reports_rendering_libraries(client):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["services"]["rendering_libraries"]["ready"] is True
    assert body["services"]["analysis"]["state"] == "idle"


def test_analysis_returns_succeeded_state(client, service):
    response = _upload(client)

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "succeeded"
    assert body["language"] == "en"
    assert body["stale"] is False
    assert len(body["result"]["physicianReport"]) == 3
    assert len(service.calls) == 1
    assert service.calls[0].mime_type == "image/png"


def test_analysis_in_arabic(client, service):
    response = _upload(client, language="ar")

    assert response.status_code == 200
    assert response.json()["language"] == "ar"
    assert service.calls[0].language.value == "ar"


def test_non_image_upload_is_rejected_without_service_call(client, service):
    response = _upload(client, content=b"%PDF-1.4", content_type="application/pdf")

    assert response.status_code == 415
    assert response.json()["error"]["code"] == "invalid_input"
    assert service.calls == []
    assert client.get("/api/analysis").json()["status"] == "failed"


def test_malformed_model_output_is_bad_gateway():
    with _client(FakeInference(raw="Here is your analysis: " + json.dumps(sample_payload()))) as client:
        response = _upload(client)

    assert response.status_code == 502
    assert response.json()["error"]["code"] == "malformed_json"


def test_unreachable_service_is_unavailable():
    with _client(FakeInference(error=NetworkError("connection refused"))) as client:
        response = _upload(client)

    assert response.status_code == 503
    assert response.json()["error"]["code"] == "network_error"


def test_language_change_marks_result_stale_without_retry(client, service):
    _upload(client)

    response = client.put("/api/analysis/language", json={"language": "ar"})

    body = response.json()
    assert body["status"] == "succeeded"
    assert body["selected_language"] == "ar"
    assert body["stale"] is True
    assert len(service.calls) == 1


def test_report_endpoints_require_a_result(client):
    assert client.get("/api/reports/current").status_code == 404
    assert client.get("/api/reports/export/html").status_code == 404

    availability = client.get("/api/reports/exports").json()
    assert availability["available"] == {"pdf": False, "png": False, "html": False}


def test_current_report_markup(client):
    _upload(client)

    response = client.get("/api/reports/current", params={"theme": "dark"})

    assert response.status_code == 200
    assert 'data-theme="dark"' in response.text
    assert response.text.count('class="finding') == 3


def test_exports_available_after_analysis(client):
    _upload(client)

    body = client.get("/api/reports/exports").json()

    assert body["available"] == {"pdf": True, "png": True, "html": True}
    assert body["busy"] == {"pdf": False, "png": False, "html": False}


def test_html_download(client):
    _upload(client, language="ar")

    response = client.get("/api/reports/export/html")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert 'filename="medical-report-analysis.html"' in response.headers["content-disposition"]
    assert 'dir="rtl"' in response.text


def test_pdf_download(client):
    _upload(client)

    response = client.get("/api/reports/export/pdf", params={"theme": "dark"})

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.content.startswith(b"%PDF")


def test_png_download(client):
    _upload(client)

    response = client.get("/api/reports/export/png")

    assert response.status_code == 200
    assert response.headers["content-type"] == "image/png"
    image = Image.open(io.BytesIO(response.content))
    assert image.width == 1600


def test_unknown_export_kind_is_rejected(client):
    _upload(client)

    assert client.get("/api/reports/export/docx").status_code == 422
