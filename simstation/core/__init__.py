"""Simulator state: models, registry, orchestration and controllers."""
