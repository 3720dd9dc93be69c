"""
Flask Application

Wraps the HTTP adapter in a Flask app with CORS enabled, for local runs
and WSGI servers.
"""

from typing import Optional

from flask import Flask, request
from flask_cors import CORS

from adapters.http import handle_request
from core.config import Settings, get_settings
from core.interventions.service import InterventionService, get_service
from core.logging import configure_logging


def create_app(
    service: Optional[InterventionService] = None,
    settings: Optional[Settings] = None,
) -> Flask:
    """
    Create the Flask app.

    Args:
        service: Intervention service (process-wide service if not provided)
        settings: Settings (uses get_settings() if not provided)

    Returns:
        Configured Flask app
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = Flask("intervention_server")
    app.config["INTERVENTION_SERVICE"] = service or get_service()
    origins = settings.get_cors_origins()
    CORS(app, origins=origins, send_wildcard=origins == ["*"])

    @app.route("/", defaults={"path": ""}, methods=["GET", "POST"])
    @app.route("/<path:path>", methods=["GET", "POST"])
    def dispatch(path: str):
        return handle_request(request, app.config["INTERVENTION_SERVICE"])

    return app
