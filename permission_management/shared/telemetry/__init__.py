"""Telemetry: logging setup and OpenTelemetry tracing helpers."""

from permission_management.shared.telemetry.logging import setup_logging
from permission_management.shared.telemetry.tracing import add_span_attributes, traced

__all__ = ["add_span_attributes", "setup_logging", "traced"]
