"""
Intervention Server HTTP Client

Thin client for the intervention server API, used by the local CLI and by
Python simulation clients.
"""

import logging
from functools import lru_cache
from typing import Any, Optional

import requests

from core.config import Settings, get_settings

logger = logging.getLogger(__name__)


class InterventionClient:
    """
    HTTP client for the intervention server.

    Usage:
        client = InterventionClient("http://localhost:5001")
        client.submit_events([{"handVx": 2.0}])
        client.poll()
        client.force("hand", duration=8000)
    """

    def __init__(self, base_url: str, timeout: float = 10):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _request(self, method: str, path: str, **kwargs) -> dict:
        """Send a request and return the decoded JSON body."""
        url = f"{self.base_url}{path}"
        try:
            response = requests.request(method, url, timeout=self.timeout, **kwargs)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Intervention server request failed: {method} {path}: {e}")
            raise
        return response.json()

    def health(self) -> dict:
        return self._request("GET", "/health")

    def submit_events(self, events: list[dict]) -> list[dict]:
        """Submit observation events; returns the triggered interventions."""
        body = self._request("POST", "/process_events", json={"events": events})
        return body.get("interventions", [])

    def poll(self) -> list[dict]:
        """Current intervention or restore command (empty list when idle)."""
        body = self._request("GET", "/get_interventions")
        return body.get("interventions", [])

    def force(self, kind: str, duration: Optional[int] = None) -> dict:
        """Force an intervention of the given kind (hand, ball, collision)."""
        params: dict[str, Any] = {}
        if duration is not None:
            params["duration"] = duration
        return self._request("GET", f"/force_intervention/{kind}", params=params)

    def debug_history(self) -> dict:
        return self._request("GET", "/debug/history")


@lru_cache(maxsize=1)
def _cached_client(base_url: str) -> InterventionClient:
    return InterventionClient(base_url)


def get_client(settings: Optional[Settings] = None) -> InterventionClient:
    """
    Get a cached client for the configured server URL.

    Args:
        settings: Optional settings (uses get_settings() if not provided)
    """
    if settings is None:
        settings = get_settings()
    return _cached_client(settings.server_url)
