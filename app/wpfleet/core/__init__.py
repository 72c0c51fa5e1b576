"""Core services: configuration, registry, run guard and orchestration."""
