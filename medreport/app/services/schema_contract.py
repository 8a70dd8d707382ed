"""Response schema and localized instructions sent with every analysis."""

from __future__ import annotations

from typing import Any, Dict

from ..models.report import Language, Status


def _string(description: str) -> Dict[str, Any]:
    return {"type": "string", "description": description}


def _string_list(description: str) -> Dict[str, Any]:
    return {"type": "array", "items": {"type": "string"}, "description": description}


# Canonical descriptor. The service-facing schema and the local validator in
# response_mapper are both derived from this object.
RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "patientDetails": {
            "type": "object",
            "description": "Patient's demographic and test information.",
            "properties": {
                "name": _string("The patient's full name as it appears on the report."),
                "age": _string("The patient's age as it appears on the report."),
                "testDate": _string("The date the medical test was conducted."),
                "testType": _string(
                    "The name or type of the medical test (e.g., 'CBC', 'Lipid Profile')."
                ),
            },
            "required": ["name", "age", "testDate", "testType"],
        },
        "patientSummary": _string(
            "A simplified, easy-to-understand summary of the key findings for the patient."
        ),
        "physicianReport": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "parameter": _string(
                        "The name of the medical parameter (e.g., Glucose, Hemoglobin)."
                    ),
                    "value": _string("The measured value with units (e.g., '110 mg/dL')."),
                    "referenceRange": _string(
                        "The normal reference range with units (e.g., '70-100 mg/dL')."
                    ),
                    "status": {
                        "type": "string",
                        "enum": [status.value for status in Status],
                        "description": "Classification of the result: 'normal', 'moderate', or 'severe'.",
                    },
                    "explanation": _string(
                        "A brief academic explanation of the finding for a physician."
                    ),
                },
                "required": ["parameter", "value", "referenceRange", "status", "explanation"],
            },
        },
        "recommendations": {
            "type": "object",
            "properties": {
                "general": _string_list("General health recommendations."),
                "nutrition": _string_list("Specific nutritional and dietary advice."),
                "physicalTherapy": _string_list(
                    "Physical therapy or exercise recommendations."
                ),
            },
            "required": ["general", "nutrition", "physicalTherapy"],
        },
    },
    "required": ["patientSummary", "physicianReport", "recommendations"],
}

LANGUAGE_INSTRUCTIONS: Dict[Language, str] = {
    Language.EN: "All text in the JSON output, including keys and values, must be in English.",
    Language.AR: "يجب أن يكون كل النص في مخرجات JSON، بما في ذلك المفاتيح والقيم، باللغة العربية.",
}

# Status literals stay in Latin script in both languages; they are enum values of the schema.
_PROMPTS: Dict[Language, str] = {
    Language.EN: """You are an expert AI in medical report analysis, trained on WHO and NIH standards.
Analyze the provided medical lab report image.
First, extract the following patient information: Name, Age, Date of the medical test, and the Type of medical test (e.g., "Complete Blood Count", "Lipid Panel"). If any of this information is not present, use a placeholder like "Not specified".

Next, identify key metrics, compare them to standard reference ranges, and classify each as 'normal', 'moderate', or 'severe' based on deviation from the norm.
Provide a simplified summary for a patient, a detailed academic report for a physician, and actionable recommendations.
You MUST provide your response as a single, valid JSON object with no surrounding text or markdown.
{language_instruction}""",
    Language.AR: """أنت خبير ذكاء اصطناعي في تحليل التقارير الطبية، ومدرب وفق معايير منظمة الصحة العالمية والمعاهد الوطنية للصحة.
حلل صورة تقرير المختبر الطبي المرفقة.
أولاً، استخرج معلومات المريض التالية: الاسم، والعمر، وتاريخ الفحص الطبي، ونوع الفحص الطبي (مثل "تعداد الدم الكامل" أو "فحص الدهون"). إذا لم تتوفر أي من هذه المعلومات، فاستخدم عبارة بديلة مثل "غير محدد".

بعد ذلك، حدد المؤشرات الرئيسية، وقارنها بالنطاقات المرجعية القياسية، وصنف كل مؤشر على أنه 'normal' أو 'moderate' أو 'severe' بحسب مقدار انحرافه عن الطبيعي.
قدم ملخصاً مبسطاً للمريض، وتقريراً أكاديمياً مفصلاً للطبيب، وتوصيات عملية.
يجب أن تكون إجابتك كائن JSON واحداً وصالحاً دون أي نص أو تنسيق markdown حوله.
{language_instruction}""",
}


def _to_service_schema(node: Dict[str, Any]) -> Dict[str, Any]:
    """Translate one JSON-schema node to the inference service's OpenAPI subset."""

    converted: Dict[str, Any] = {"type": node["type"].upper()}
    if "description" in node:
        converted["description"] = node["description"]
    if "enum" in node:
        converted["format"] = "enum"
        converted["enum"] = list(node["enum"])
    if "items" in node:
        converted["items"] = _to_service_schema(node["items"])
    if "properties" in node:
        converted["properties"] = {
            name: _to_service_schema(child) for name, child in node["properties"].items()
        }
        converted["propertyOrdering"] = list(node["properties"])
    if "required" in node:
        converted["required"] = list(node["required"])
    return converted


def schema_for() -> Dict[str, Any]:
    """Return a fresh copy of the schema descriptor sent to the inference service."""

    return _to_service_schema(RESPONSE_SCHEMA)


def prompt_for(language: Language) -> str:
    """Return the instruction text for ``language``."""

    language = Language(language)
    return _PROMPTS[language].format(language_instruction=LANGUAGE_INSTRUCTIONS[language])
