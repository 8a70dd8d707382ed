"""External service clients for the medical report analyzer."""

from medreport.services.inference_service import InferenceService, inference_service

__all__ = [
    "InferenceService",
    "inference_service",
]
