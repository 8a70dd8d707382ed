import copy
import json

import pytest

from medreport.app.errors import MalformedJSON, MalformedOutputError, SchemaViolation
from medreport.app.models.report import AnalysisResult, Status
from medreport.app.services.response_mapper import ResponseMapper

from conftest import sample_payload

EXAMPLE_RESPONSE = (
    '{"patientSummary":"OK","physicianReport":[{"parameter":"Glucose","value":"110 mg/dL",'
    '"referenceRange":"70-100 mg/dL","status":"moderate","explanation":"Slightly elevated"}],'
    '"recommendations":{"general":[],"nutrition":[],"physicalTherapy":[]}}'
)


@pytest.fixture
def mapper():
    return ResponseMapper()


def test_parse_example_response(mapper):
    result = mapper.parse(EXAMPLE_RESPONSE)

    assert result.patient_summary == "OK"
    assert len(result.physician_report) == 1
    item = result.physician_report[0]
    assert item.parameter == "Glucose"
    assert item.value == "110 mg/dL"
    assert item.reference_range == "70-100 mg/dL"
    assert item.status is Status.MODERATE
    assert item.explanation == "Slightly elevated"
    assert result.recommendations.general == []
    assert result.patient_details is None


def test_parse_tolerates_surrounding_whitespace(mapper):
    assert mapper.parse(f"\n  {EXAMPLE_RESPONSE}\n\t") == mapper.parse(EXAMPLE_RESPONSE)


@pytest.mark.parametrize(
    "raw",
    [
        "Sure, here is the JSON: " + EXAMPLE_RESPONSE,
        f"```json\n{EXAMPLE_RESPONSE}\n```",
        EXAMPLE_RESPONSE + " Let me know if you need anything else.",
        "",
        "{",
    ],
)
def test_prose_and_fences_are_malformed_json(mapper, raw):
    with pytest.raises(MalformedJSON):
        mapper.parse(raw)


@pytest.mark.parametrize("status", ["critical", "Moderate", "NORMAL", "", "normal "])
def test_unknown_status_is_schema_violation(mapper, status):
    payload = sample_payload()
    payload["physicianReport"][0]["status"] = status

    with pytest.raises(SchemaViolation) as excinfo:
        mapper.parse(json.dumps(payload))

    assert excinfo.value.field == "physicianReport[0].status"


@pytest.mark.parametrize(
    "mutate, field",
    [
        (lambda p: p.pop("patientSummary"), "patientSummary"),
        (lambda p: p["recommendations"].pop("nutrition"), "recommendations.nutrition"),
        (lambda p: p["physicianReport"][0].pop("referenceRange"), "physicianReport[0].referenceRange"),
        (lambda p: p.update(severity="high"), "severity"),
        (lambda p: p["physicianReport"][0].update(unit="mg/dL"), "physicianReport[0].unit"),
        (lambda p: p.update(patientSummary=42), "patientSummary"),
        (lambda p: p.update(physicianReport={}), "physicianReport"),
        (lambda p: p["recommendations"].update(general=["ok", None]), "recommendations.general[1]"),
        (lambda p: p.update(patientDetails={"name": "A", "age": "40", "testDate": "2024-01-01"}),
         "patientDetails.testType"),
    ],
)
def test_structural_deviations_name_the_field(mapper, mutate, field):
    payload = sample_payload()
    mutate(payload)

    with pytest.raises(SchemaViolation) as excinfo:
        mapper.parse(json.dumps(payload))

    assert excinfo.value.field == field
    assert isinstance(excinfo.value, MalformedOutputError)


def test_top_level_must_be_an_object(mapper):
    with pytest.raises(SchemaViolation):
        mapper.parse("[]")


def test_parse_accepts_patient_details(mapper):
    payload = sample_payload()
    payload["patientDetails"] = {
        "name": "Jane Doe",
        "age": "42",
        "testDate": "2024-03-01",
        "testType": "Lipid Panel",
    }

    result = mapper.parse(json.dumps(payload))

    assert result.patient_details.test_type == "Lipid Panel"


def test_round_trip_is_field_for_field_equal(mapper):
    original = AnalysisResult.model_validate(sample_payload(items=7))

    restored = mapper.parse(json.dumps(original.to_wire()))

    assert restored == original
    assert restored.to_wire() == original.to_wire()


def test_parse_does_not_transform_content(mapper):
    payload = sample_payload(items=4)
    payload["recommendations"]["general"] = ["Drink water", "  spaced  ", "Drink water"]
    expected = copy.deepcopy(payload)

    result = mapper.parse(json.dumps(payload, ensure_ascii=False))

    assert result.to_wire() == expected


def test_parse_is_deterministic(mapper):
    bad = json.dumps({**sample_payload(), "extra": True})

    assert mapper.parse(EXAMPLE_RESPONSE) == mapper.parse(EXAMPLE_RESPONSE)
    errors = []
    for _ in range(2):
        with pytest.raises(SchemaViolation) as excinfo:
            mapper.parse(bad)
        errors.append((type(excinfo.value), excinfo.value.field, str(excinfo.value)))
    assert errors[0] == errors[1]
