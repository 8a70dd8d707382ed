"""
Configuration management for the medical report analyzer.
Handles the inference API key, endpoint, latency thresholds and logging settings.
"""

from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict


class Settings(PydanticBaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore"
    )

    reload: bool = Field(False)
    host: str = Field("0.0.0.0")
    port: int = Field(8000)

    # Inference service
    gemini_api_key: Optional[str] = Field(None)
    gemini_endpoint: str = Field("https://generativelanguage.googleapis.com/v1beta")
    gemini_model: str = Field("gemini-2.5-flash")

    # No deadline unless configured; the analysis call is awaited as long as it takes
    request_timeout: Optional[float] = Field(None)

    # Latency Thresholds (ms)
    inference_threshold: int = Field(20000)
    capture_threshold: int = Field(3000)
    export_threshold: int = Field(5000)

    # Logging
    log_level: str = Field("INFO")
    enable_structured_logging: bool = Field(True)
    compliance_log_file: Optional[str] = Field(None)


# Global settings instance
settings = Settings()


class ModelConfig:
    """Model-specific configuration constants."""

    # Low temperature keeps the JSON shape stable between calls
    TEMPERATURE = 0.2

    RESPONSE_MIME_TYPE = "application/json"


class LatencyConfig:
    """Latency monitoring and alerting configuration."""

    # Warning thresholds (ms)
    WARNING_INFERENCE_LATENCY = 10000
    WARNING_CAPTURE_LATENCY = 1500
    WARNING_EXPORT_LATENCY = 2500

    # Critical thresholds (ms)
    CRITICAL_INFERENCE_LATENCY = 30000
    CRITICAL_CAPTURE_LATENCY = 5000
    CRITICAL_EXPORT_LATENCY = 8000
