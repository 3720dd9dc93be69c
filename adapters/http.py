"""
HTTP Adapter

Routes HTTP requests to the intervention service and serializes results.
"""

import logging
from typing import Callable, Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from flask import Request

from core.context import RequestContext
from core.interventions.service import InterventionService, get_service
from core.result import ServiceResult

logger = logging.getLogger(__name__)

# Type alias for HTTP response
HttpResponse = Tuple[dict, int]

FORCE_PREFIX = "/force_intervention/"


def _respond(result: ServiceResult) -> HttpResponse:
    return result.to_dict(), result.http_status


def _context(request: "Request", operation: str) -> RequestContext:
    return RequestContext.for_http(
        operation=operation,
        client_addr=request.remote_addr,
        correlation_id=request.headers.get("X-Correlation-ID"),
    )


def handle_request(
    request: "Request",
    service: Optional[InterventionService] = None,
) -> HttpResponse:
    """
    Main HTTP request router.

    Routes:
        GET  /health - Health check
        POST /process_events - Submit observation events
        GET  /get_interventions - Poll for the current intervention
        GET  /force_intervention/<type> - Force an intervention (?duration=ms)
        GET  /debug/history - Intervention history and cooldown status

    Args:
        request: Flask request object
        service: Intervention service (process-wide service if not provided)

    Returns:
        Tuple of (response_dict, status_code)
    """
    service = service or get_service()
    path = request.path.rstrip("/")

    # Route to appropriate handler
    routes: dict[str, Tuple[str, Callable[["Request", InterventionService], HttpResponse]]] = {
        "/health": ("GET", handle_health),
        "/process_events": ("POST", handle_process_events),
        "/get_interventions": ("GET", handle_get_interventions),
        "/debug/history": ("GET", handle_debug_history),
    }

    # Also handle root path
    if path == "":
        return handle_health(request, service)

    if path.startswith(FORCE_PREFIX):
        route = ("GET", handle_force_intervention)
    else:
        route = routes.get(path)

    if route is None:
        available = list(routes.keys()) + [FORCE_PREFIX + "<type>"]
        return {"error": f"Unknown path: {path}", "available": available}, 404

    method, handler = route
    if request.method != method:
        return {"error": f"Method {request.method} not allowed for {path}"}, 405

    return handler(request, service)


def handle_health(request: "Request", service: InterventionService) -> HttpResponse:
    """
    Health check endpoint.

    Returns:
        Health status and intervention tunables
    """
    return _respond(service.health(_context(request, "health")))


def handle_process_events(request: "Request", service: InterventionService) -> HttpResponse:
    """
    Submit observation events endpoint.

    Request body:
        {
            "events": [{"handVx": 1.2, "handVy": 0.0, "ballVx": -3.1, "ballVy": 0.4}, ...]
        }

    Returns:
        {"interventions": [] | [proposal]}
    """
    data = request.get_json(force=True, silent=True)
    events = data.get("events") if isinstance(data, dict) else None

    ctx = _context(request, "submit_events")
    return _respond(service.submit_events(events, ctx))


def handle_get_interventions(request: "Request", service: InterventionService) -> HttpResponse:
    """
    Poll endpoint.

    Returns:
        {"interventions": [] | [active intervention | restore command]}
    """
    return _respond(service.poll_interventions(_context(request, "poll_interventions")))


def handle_force_intervention(request: "Request", service: InterventionService) -> HttpResponse:
    """
    Force an intervention endpoint (operator testing).

    Path:
        /force_intervention/<hand|ball|collision>?duration=8000

    Returns:
        {"success": true, "intervention": proposal}
    """
    kind = request.path.rstrip("/")[len(FORCE_PREFIX):]
    duration = request.args.get("duration")

    ctx = _context(request, "force_intervention")
    return _respond(service.force_intervention(kind, duration, ctx))


def handle_debug_history(request: "Request", service: InterventionService) -> HttpResponse:
    """
    Debug endpoint to view intervention history and cooldown status.

    Returns:
        {"current": ..., "history": [...], "cooldown": {...}}
    """
    return _respond(service.debug_snapshot(_context(request, "debug_snapshot")))
