"""Utility modules for the medical report analyzer."""

from medreport.utils.config import settings, ModelConfig, LatencyConfig
from medreport.utils.logging import (
    get_logger,
    get_latency_logger,
    get_compliance_logger,
    monitor_latency,
    RequestContext,
)

__all__ = [
    "settings",
    "ModelConfig",
    "LatencyConfig",
    "get_logger",
    "get_latency_logger",
    "get_compliance_logger",
    "monitor_latency",
    "RequestContext",
]
