from __future__ import annotations


class EngineError(Exception):
    pass


class InvalidScenarioError(EngineError):
    """Raised for scenario parameters the models cannot give a meaning to (e.g. negative horizons)."""
