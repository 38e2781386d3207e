"""Runtime services: telemetry and the key read layer."""
