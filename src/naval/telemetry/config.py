"""Telemetry configuration read from the process environment."""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import Any, Dict

from pydantic import BaseModel, Field, field_validator

_TRUTHY = {"1", "true", "yes", "on"}
LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

logger = logging.getLogger(__name__)

_FLAG_VARIABLES = {
    "enable_tracing": ("NAVAL_ENABLE_TRACING", "OTEL_TRACES_ENABLED"),
    "enable_metrics": ("NAVAL_ENABLE_METRICS", "OTEL_METRICS_ENABLED"),
    "enable_logging": ("NAVAL_ENABLE_LOGGING", "OTEL_LOGS_ENABLED"),
}

_ENDPOINT_VARIABLES = {
    "otlp_traces_endpoint": ("OTEL_EXPORTER_OTLP_TRACES_ENDPOINT", "v1/traces"),
    "otlp_metrics_endpoint": ("OTEL_EXPORTER_OTLP_METRICS_ENDPOINT", "v1/metrics"),
    "otlp_logs_endpoint": ("OTEL_EXPORTER_OTLP_LOGS_ENDPOINT", "v1/logs"),
}

_ENDPOINT_FLAGS = {
    "otlp_traces_endpoint": "enable_tracing",
    "otlp_metrics_endpoint": "enable_metrics",
    "otlp_logs_endpoint": "enable_logging",
}


class TelemetryConfig(BaseModel):
    """Runtime configuration for telemetry exporters and engine logging."""

    enable_tracing: bool = False
    enable_metrics: bool = False
    enable_logging: bool = False
    otlp_traces_endpoint: str | None = None
    otlp_metrics_endpoint: str | None = None
    otlp_logs_endpoint: str | None = None
    service_name: str = "naval"
    service_namespace: str = "game"
    log_level: str = "WARNING"
    resource_attributes: dict[str, str] = Field(default_factory=dict)

    @field_validator("log_level")
    @classmethod
    def _normalise_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"unknown log level: {value!r}")
        return level

    @classmethod
    def from_env(cls, **overrides: Any) -> "TelemetryConfig":
        """Construct config from env vars (`NAVAL_*` + `OTEL_*`)."""

        data: Dict[str, Any] = cls().model_dump()
        data.update(overrides)

        for field, names in _FLAG_VARIABLES.items():
            for name in names:
                value = os.getenv(name)
                if value is not None:
                    data[field] = value.strip().lower() in _TRUTHY
                    break

        base_endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
        for field, (name, suffix) in _ENDPOINT_VARIABLES.items():
            if data.get(field):
                continue
            endpoint = os.getenv(name)
            if not endpoint and base_endpoint:
                endpoint = f"{base_endpoint.rstrip('/')}/{suffix}"
            data[field] = endpoint or None

        if os.getenv("OTEL_SERVICE_NAME"):
            data["service_name"] = os.environ["OTEL_SERVICE_NAME"]
        if os.getenv("OTEL_SERVICE_NAMESPACE"):
            data["service_namespace"] = os.environ["OTEL_SERVICE_NAMESPACE"]
        env_level = os.getenv("NAVAL_LOG_LEVEL")
        if env_level:
            if env_level.strip().upper() in LOG_LEVELS:
                data["log_level"] = env_level
            else:
                logger.warning("Ignoring unknown NAVAL_LOG_LEVEL %r", env_level)

        resource_env = os.getenv("OTEL_RESOURCE_ATTRIBUTES")
        if resource_env:
            attrs = dict(data.get("resource_attributes", {}))
            for part in resource_env.split(","):
                key, sep, value = part.partition("=")
                if sep:
                    attrs[key.strip()] = value.strip()
            data["resource_attributes"] = attrs

        # A configured endpoint switches its exporter on.
        for field, flag in _ENDPOINT_FLAGS.items():
            if data.get(field):
                data[flag] = True

        return cls(**data)

    def resource_dict(self) -> dict[str, str]:
        """Attributes for the OpenTelemetry ``Resource`` of every provider."""
        attributes = {
            "service.name": self.service_name,
            "service.namespace": self.service_namespace,
        }
        attributes.update(self.resource_attributes)
        return attributes


@lru_cache(maxsize=1)
def load_telemetry_config() -> TelemetryConfig:
    """Load and cache telemetry config from the environment."""

    return TelemetryConfig.from_env()


def init_telemetry(config: TelemetryConfig | None = None) -> TelemetryConfig:
    """Initialise telemetry subsystems lazily."""

    from .logger import apply_log_level, init_logging
    from .metrics import init_metrics
    from .tracer import init_tracing

    resolved = config or load_telemetry_config()
    apply_log_level(resolved)

    if resolved.enable_tracing:
        init_tracing(resolved)
    if resolved.enable_metrics:
        init_metrics(resolved)
    if resolved.enable_logging:
        init_logging(resolved)
    return resolved
