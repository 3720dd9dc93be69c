"""
Intervention Server Clients Module
"""

from core.clients.intervention_client import InterventionClient, get_client

__all__ = [
    "InterventionClient",
    "get_client",
]
