"""Shared cross-cutting code: telemetry (logging, tracing) and utilities."""
