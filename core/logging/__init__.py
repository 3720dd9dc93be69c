"""
Intervention Server Logging Module

Request-scoped logging on top of the standard logging module.
"""

from core.logging.intervention_logger import (
    InterventionLogger,
    configure_logging,
    get_logger,
)

__all__ = [
    "InterventionLogger",
    "configure_logging",
    "get_logger",
]
