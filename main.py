"""
Intervention Server entry points.

intervention_server() is the HTTP Cloud Function target; running this module
starts the Flask server on HOST:PORT.
"""

from functools import lru_cache

from flask import Flask

from core.config import get_settings


@lru_cache()
def get_app() -> Flask:
    """Shared Flask app (routing and CORS) for the Cloud Function target."""
    from adapters.flask_app import create_app

    return create_app()


def intervention_server(request):
    """HTTP Cloud Function entry point.

    The incoming request is dispatched through the Flask app so CORS
    preflight and response headers match the standalone server.
    """
    app = get_app()
    with app.request_context(request.environ):
        return app.full_dispatch_request()


if __name__ == "__main__":
    from adapters.flask_app import create_app

    settings = get_settings()
    settings.validate_for_server()
    app = create_app(settings=settings)
    app.run(host=settings.host, port=settings.port, threaded=True)
