"""Optional Prometheus instrumentation."""
