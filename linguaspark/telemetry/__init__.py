"""Telemetry helpers: call context and quality reporting."""
