"""Process-level setup: logging and telemetry."""
