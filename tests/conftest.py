import json

import pytest

from medreport.app.models.analysis import AnalysisRequest
from medreport.app.models.report import AnalysisResult, Language

# 1x1 transparent PNG
PNG_BYTES = bytes.fromhex(
    "89504e470d0a1a0a0000000d4948445200000001000000010806000000"
    "1f15c4890000000d49444154789c6360000002000100e221bc330000000049454e44ae426082"
)


def sample_payload(items: int = 1) -> dict:
    report = [
        {
            "parameter": "Glucose",
            "value": "110 mg/dL",
            "referenceRange": "70-100 mg/dL",
            "status": "moderate",
            "explanation": "Slightly elevated",
        }
    ]
    statuses = ["normal", "moderate", "severe"]
    for index in range(1, items):
        report.append(
            {
                "parameter": f"Parameter {index}",
                "value": f"{index}.0 mmol/L",
                "referenceRange": "1.0-5.0 mmol/L",
                "status": statuses[index % 3],
                "explanation": "Finding outside the reference range that should be reviewed "
                "together with the clinical picture and previous results.",
            }
        )
    return {
        "patientSummary": "OK",
        "physicianReport": report[:items],
        "recommendations": {"general": [], "nutrition": [], "physicalTherapy": []},
    }


class FakeInference:
    """Inference client returning canned text and recording the requests it got."""

    def __init__(self, payload=None, raw=None, error=None):
        self.raw = raw if raw is not None else json.dumps(payload or sample_payload())
        self.error = error
        self.calls = []

    async def generate(self, request):
        self.calls.append(request)
        if self.error is not None:
            raise self.error
        return self.raw


@pytest.fixture
def payload():
    return sample_payload()


@pytest.fixture
def result(payload):
    return AnalysisResult.model_validate(payload)


@pytest.fixture
def long_result():
    return AnalysisResult.model_validate(sample_payload(items=40))


@pytest.fixture
def png_request():
    return AnalysisRequest(image_bytes=PNG_BYTES, mime_type="image/png", language=Language.EN)
