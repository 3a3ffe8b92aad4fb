"""Core domain: models, ports, readiness gate and configuration."""
