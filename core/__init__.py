"""
Intervention Server Core Module

Transport-agnostic core: decision engine, intervention lifecycle and
boundary operations.
"""

from core.context import RequestContext
from core.config import Settings, get_settings
from core.result import ServiceResult, ResultStatus

__all__ = [
    "RequestContext",
    "Settings",
    "get_settings",
    "ServiceResult",
    "ResultStatus",
]
