"""
Interventions Module

Decides when to inject an intervention into the simulation and owns the
single active intervention slot.

Usage:
    service = get_service()

    # Submission path: decision engine, then activation
    result = service.submit_events([{"handVx": 2.5, "ballVy": -0.3}])

    # Polling path: active intervention, restore command, or nothing
    result = service.poll_interventions()
    result.interventions  # [] or [{...}]
"""

from core.interventions.config import InterventionConfig
from core.interventions.engine import DecisionEngine
from core.interventions.history import InterventionHistory
from core.interventions.lifecycle import LifecycleManager
from core.interventions.service import InterventionService, get_service

__all__ = [
    "InterventionConfig",
    "DecisionEngine",
    "InterventionHistory",
    "LifecycleManager",
    "InterventionService",
    "get_service",
]
