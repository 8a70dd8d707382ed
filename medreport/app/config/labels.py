"""Localized labels used when rendering a report."""

from __future__ import annotations

from typing import Dict

from ..models.report import Language

REPORT_LABELS: Dict[Language, Dict[str, str]] = {
    Language.EN: {
        "title": "AI Medical Report Analysis",
        "patientDetailsTitle": "Patient Details",
        "name": "Name",
        "age": "Age",
        "testDate": "Test Date",
        "testType": "Test Type",
        "patientSummaryTitle": "Patient Summary",
        "physicianReportTitle": "Physician Report",
        "recommendationsTitle": "Recommendations",
        "general": "General Advice",
        "nutrition": "Nutrition",
        "physicalTherapy": "Physical Therapy & Exercise",
        "parameter": "Parameter",
        "value": "Your Value",
        "referenceRange": "Reference Range",
        "status": "Status",
        "explanation": "Explanation",
        "normal": "Normal",
        "moderate": "Moderate",
        "severe": "Severe",
        "disclaimer": (
            "Disclaimer: This tool is for informational purposes only and is not "
            "a substitute for professional medical advice."
        ),
    },
    Language.AR: {
        "title": "تحليل التقرير الطبي بالذكاء الاصطناعي",
        "patientDetailsTitle": "بيانات المريض",
        "name": "الاسم",
        "age": "العمر",
        "testDate": "تاريخ الفحص",
        "testType": "نوع الفحص",
        "patientSummaryTitle": "ملخص المريض",
        "physicianReportTitle": "تقرير الطبيب",
        "recommendationsTitle": "التوصيات",
        "general": "نصائح عامة",
        "nutrition": "التغذية",
        "physicalTherapy": "العلاج الطبيعي والتمارين الرياضية",
        "parameter": "المؤشر",
        "value": "النتيجة",
        "referenceRange": "النطاق المرجعي",
        "status": "الحالة",
        "explanation": "الشرح",
        "normal": "طبيعي",
        "moderate": "متوسط",
        "severe": "شديد",
        "disclaimer": (
            "إخلاء مسؤولية: هذه الأداة مخصصة للأغراض المعلوماتية فقط "
            "وليست بديلاً عن الاستشارة الطبية المتخصصة."
        ),
    },
}


def labels_for(language: Language) -> Dict[str, str]:
    """Return the label table for ``language``."""

    return REPORT_LABELS[Language(language)]
