"""
Intervention Server Adapters Module

Transport layer adapters for HTTP.
"""

# HTTP adapter functions are imported lazily to avoid the Flask dependency
# when the core is used directly

__all__ = [
    "handle_request",
    "handle_health",
    "handle_process_events",
    "handle_get_interventions",
    "handle_force_intervention",
    "handle_debug_history",
    "create_app",
]


def __getattr__(name):
    """Lazy import HTTP handlers to avoid Flask dependency in CLI mode."""
    if name == "create_app":
        from adapters.flask_app import create_app
        return create_app
    if name in __all__:
        from adapters import http
        return getattr(http, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
