"""
Structured logging configuration for the medical report analyzer.
Provides request tracking, latency metrics, and compliance logging.
"""

import asyncio
import functools
import logging
import sys
import time
import uuid
from typing import Optional
from contextvars import ContextVar
from datetime import datetime, timezone
import json

from medreport.utils.config import settings, LatencyConfig

# Request context for tracking
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

_HANDLER_MARKER = "_medreport_handler"


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class StructuredFormatter(logging.Formatter):
    """Custom formatter for structured JSON logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as structured JSON."""
        log_entry = {
            "timestamp": _utc_timestamp(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        # Add request context if available
        if request_id := request_id_var.get():
            log_entry["request_id"] = request_id

        # Add extra fields from record
        if hasattr(record, "extra_fields"):
            log_entry.update(record.extra_fields)

        # Add exception info if present
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False, default=str)


_THRESHOLDS = {
    "inference": (
        LatencyConfig.WARNING_INFERENCE_LATENCY,
        LatencyConfig.CRITICAL_INFERENCE_LATENCY,
    ),
    "capture": (
        LatencyConfig.WARNING_CAPTURE_LATENCY,
        LatencyConfig.CRITICAL_CAPTURE_LATENCY,
    ),
    "export": (
        LatencyConfig.WARNING_EXPORT_LATENCY,
        LatencyConfig.CRITICAL_EXPORT_LATENCY,
    ),
}


def _operation_family(operation: str) -> Optional[str]:
    lowered = operation.lower()
    if "inference" in lowered or "gemini" in lowered:
        return "inference"
    if "capture" in lowered:
        return "capture"
    if "export" in lowered:
        return "export"
    return None


class LatencyLogger:
    """Specialized logger for latency tracking and performance monitoring."""

    def __init__(self, name: str = "latency"):
        self.logger = logging.getLogger(name)

    def log_latency(
        self,
        operation: str,
        duration_ms: float,
        success: bool = True,
        model: Optional[str] = None,
        **kwargs,
    ) -> None:
        """Log operation latency with context."""
        extra_fields = {
            "operation": operation,
            "duration_ms": duration_ms,
            "success": success,
            "model": model,
            **kwargs,
        }

        threshold_exceeded = kwargs.get("threshold_exceeded", False)
        warning_ms, critical_ms = _THRESHOLDS.get(
            _operation_family(operation), (1500, 3000)
        )
        if duration_ms > critical_ms:
            level = logging.ERROR
        elif threshold_exceeded or duration_ms > warning_ms:
            level = logging.WARNING
        else:
            level = logging.INFO

        message = f"{operation} completed in {duration_ms:.2f}ms"
        if threshold_exceeded:
            message += " [THRESHOLD EXCEEDED]"
        if not success:
            message += " [FAILED]"

        self.logger.log(level, message, extra={"extra_fields": extra_fields})


class ComplianceLogger:
    """Logger for compliance and audit trail requirements."""

    def __init__(self, name: str = "compliance"):
        self.logger = logging.getLogger(name)

    def log_llm_interaction(
        self,
        request_id: str,
        model: str,
        prompt_length: int,
        response_length: int,
        language: str,
        mime_type: str,
        image_bytes: int,
        **kwargs,
    ) -> None:
        """Log inference interactions without their content."""
        extra_fields = {
            "type": "llm_interaction",
            "request_id": request_id,
            "model": model,
            "prompt_length": prompt_length,
            "response_length": response_length,
            "language": language,
            "mime_type": mime_type,
            "image_bytes": image_bytes,
            "timestamp": _utc_timestamp(),
            **kwargs,
        }

        self.logger.info(
            f"LLM interaction: {model}", extra={"extra_fields": extra_fields}
        )

    def log_export(
        self,
        kind: str,
        language: str,
        theme: str,
        success: bool,
        **kwargs,
    ) -> None:
        """Log report exports for the audit trail."""
        extra_fields = {
            "type": "report_export",
            "kind": kind,
            "language": language,
            "theme": theme,
            "success": success,
            "timestamp": _utc_timestamp(),
            **kwargs,
        }

        self.logger.info(f"Report export: {kind}", extra={"extra_fields": extra_fields})


def setup_logging() -> None:
    """Configure application logging. Safe to call more than once."""
    root_logger = logging.getLogger()
    if any(getattr(h, _HANDLER_MARKER, False) for h in root_logger.handlers):
        return

    # Create formatters
    if settings.enable_structured_logging:
        formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    root_logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    setattr(console_handler, _HANDLER_MARKER, True)
    root_logger.addHandler(console_handler)

    # File handler for compliance logs
    if settings.compliance_log_file:
        file_handler = logging.FileHandler(settings.compliance_log_file)
        file_handler.setFormatter(StructuredFormatter())
        compliance_logger = logging.getLogger("compliance")
        compliance_logger.addHandler(file_handler)
        compliance_logger.setLevel(logging.INFO)


def get_logger(name: str) -> logging.Logger:
    """Get logger instance with proper configuration."""
    return logging.getLogger(name)


def get_latency_logger() -> LatencyLogger:
    """Get latency logger instance."""
    return LatencyLogger()


def get_compliance_logger() -> ComplianceLogger:
    """Get compliance logger instance."""
    return ComplianceLogger()


# Context managers for request tracking
class RequestContext:
    """Context manager for request tracking."""

    def __init__(self, request_id: Optional[str] = None):
        self.request_id = request_id or str(uuid.uuid4())
        self._tokens = []

    def __enter__(self):
        self._tokens.append(request_id_var.set(self.request_id))
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        # Restore previous context variable values using the tokens
        for token in reversed(self._tokens):
            token.var.reset(token)
        self._tokens = []


def _check_threshold(operation: str, duration_ms: float) -> bool:
    """Check if operation duration exceeds configured thresholds."""
    family = _operation_family(operation)
    if family == "inference":
        return duration_ms > settings.inference_threshold
    if family == "capture":
        return duration_ms > settings.capture_threshold
    if family == "export":
        return duration_ms > settings.export_threshold
    return False


# Performance monitoring decorator
def monitor_latency(operation: str, model: Optional[str] = None):
    """Decorator to monitor operation latency with threshold checking."""

    def decorator(func):
        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs):
            start_time = time.perf_counter()
            success = True
            try:
                return await func(*args, **kwargs)
            except Exception:
                success = False
                raise
            finally:
                _record(start_time, success)

        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs):
            start_time = time.perf_counter()
            success = True
            try:
                return func(*args, **kwargs)
            except Exception:
                success = False
                raise
            finally:
                _record(start_time, success)

        def _record(start_time: float, success: bool) -> None:
            duration_ms = (time.perf_counter() - start_time) * 1000
            get_latency_logger().log_latency(
                operation=operation,
                duration_ms=duration_ms,
                success=success,
                model=model,
                threshold_exceeded=_check_threshold(operation, duration_ms),
            )

        if asyncio.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator


# Initialize logging on module import
setup_logging()
