"""Structural validation of raw inference output."""

from __future__ import annotations

import json
from typing import Any, Dict

from pydantic import ValidationError

from ...utils.logging import get_logger
from ..errors import MalformedJSON, SchemaViolation
from ..models.report import AnalysisResult
from .schema_contract import RESPONSE_SCHEMA

logger = get_logger(__name__)

_JSON_TYPES = {
    "object": dict,
    "array": list,
    "string": str,
}


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    for name, python_type in _JSON_TYPES.items():
        if isinstance(value, python_type):
            return name
    return type(value).__name__


def _child_path(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def validate_against_schema(value: Any, schema: Dict[str, Any], path: str = "") -> None:
    """Raise :class:`SchemaViolation` for the first deviation from ``schema``."""

    expected = schema["type"]
    if _type_name(value) != expected:
        raise SchemaViolation(path or "<root>", f"expected {expected}, got {_type_name(value)}")

    if "enum" in schema and value not in schema["enum"]:
        allowed = ", ".join(schema["enum"])
        raise SchemaViolation(path, f"'{value}' is not one of {allowed}")

    if expected == "object":
        properties = schema.get("properties", {})
        for key in schema.get("required", []):
            if key not in value:
                raise SchemaViolation(_child_path(path, key), "required field is missing")
        for key, item in value.items():
            if key not in properties:
                raise SchemaViolation(_child_path(path, key), "unexpected field")
            validate_against_schema(item, properties[key], _child_path(path, key))

    elif expected == "array":
        for index, item in enumerate(value):
            validate_against_schema(item, schema["items"], f"{path}[{index}]")


class ResponseMapper:
    """Turns the service's raw text into an :class:`AnalysisResult`."""

    def __init__(self, schema: Dict[str, Any] = RESPONSE_SCHEMA):
        self._schema = schema

    def parse(self, raw: str) -> AnalysisResult:
        """Parse and validate ``raw``; the content is returned unchanged."""

        text = (raw or "").strip()
        try:
            data = json.loads(text)
        except (json.JSONDecodeError, RecursionError) as exc:
            logger.error("Inference response is not valid JSON: %s", exc)
            raise MalformedJSON(f"Response is not a single JSON object: {exc}") from exc

        validate_against_schema(data, self._schema)

        try:
            return AnalysisResult.model_validate(data)
        except ValidationError as exc:  # pragma: no cover - descriptor and models agree
            first = exc.errors()[0]
            field = ".".join(str(part) for part in first["loc"])
            raise SchemaViolation(field, first["msg"]) from exc


response_mapper = ResponseMapper()
