"""
Pytest Fixtures for Intervention Server Tests

Provides a controllable clock, manual expiry timers, scripted random
sources and a service wired to them.
"""

import random

import pytest
from unittest.mock import Mock, patch

import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.clock import Clock
from core.config import Settings
from core.interventions.config import InterventionConfig
from core.interventions.engine import DecisionEngine
from core.interventions.lifecycle import LifecycleManager
from core.interventions.service import InterventionService


START_MS = 1_700_000_000_000


class FakeClock(Clock):
    """Clock that only moves when told to."""

    def __init__(self, start: int = START_MS):
        self.now = start

    def now_ms(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class FakeTimer:
    """threading.Timer stand-in that fires only when the test says so."""

    def __init__(self, interval, function, args=None, kwargs=None):
        self.interval = interval
        self.function = function
        self.args = args or ()
        self.kwargs = kwargs or {}
        self.daemon = False
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        """Run the callback, even if cancelled (a cancel can lose the race)."""
        self.function(*self.args, **self.kwargs)


class FakeTimerFactory:
    """Records every timer the lifecycle manager arms."""

    def __init__(self):
        self.timers: list[FakeTimer] = []

    def __call__(self, interval, function, args=None, kwargs=None):
        timer = FakeTimer(interval, function, args=args, kwargs=kwargs)
        self.timers.append(timer)
        return timer

    @property
    def last(self) -> FakeTimer:
        return self.timers[-1]


class ScriptedRandom(random.Random):
    """
    Random source returning scripted values.

    random() pops from `values` (then falls back to 0.99, which never fires a
    trigger); choice() pops from `choices` (then picks the first element);
    uniform() returns `offset` plus the midpoint.
    """

    def __init__(self, values=None, choices=None, offset=0.0):
        super().__init__(0)
        self.values = list(values or [])
        self.choices = list(choices or [])
        self.offset = offset

    def random(self):
        return self.values.pop(0) if self.values else 0.99

    def choice(self, seq):
        if self.choices:
            return self.choices.pop(0)
        return seq[0]

    def uniform(self, a, b):
        return (a + b) / 2 + self.offset


@pytest.fixture
def clock():
    """Fake clock starting at a fixed instant."""
    return FakeClock()


@pytest.fixture
def timers():
    """Manual timer factory."""
    return FakeTimerFactory()


@pytest.fixture
def config():
    """Default intervention tunables."""
    return InterventionConfig()


@pytest.fixture
def scripted_rng():
    """Scripted random source; tests append values before use."""
    return ScriptedRandom()


@pytest.fixture
def lifecycle(config, clock, timers):
    """Lifecycle manager on the fake clock and timers."""
    return LifecycleManager(config, clock=clock, timer_factory=timers)


@pytest.fixture
def engine(config, scripted_rng):
    """Decision engine on the scripted random source."""
    return DecisionEngine(config, rng=scripted_rng)


@pytest.fixture
def service(config, engine, lifecycle):
    """Service wired to the fake clock, timers and scripted random source."""
    return InterventionService(config, engine=engine, lifecycle=lifecycle)


@pytest.fixture
def settings():
    """Settings with defaults (no environment)."""
    return Settings()


@pytest.fixture
def app(service, settings):
    """Flask app around the test service."""
    from adapters.flask_app import create_app

    with patch("adapters.flask_app.configure_logging"):
        flask_app = create_app(service=service, settings=settings)
    flask_app.testing = True
    return flask_app


@pytest.fixture
def http_client(app):
    """Flask test client."""
    return app.test_client()


@pytest.fixture
def mock_response():
    """Factory for a mock requests.Response."""
    def _make(json_body=None, status_code=200):
        response = Mock()
        response.status_code = status_code
        response.json.return_value = json_body if json_body is not None else {}
        response.raise_for_status.return_value = None
        return response

    return _make


@pytest.fixture
def sample_events():
    """Observation events: first two still, last one moving."""
    return [
        {"handVx": 0.0, "handVy": 0.2, "ballVx": 0.0, "ballVy": 0.0},
        {"handVx": 0.5, "handVy": -0.5, "ballVx": 0.1, "ballVy": 0.0},
        {"handVx": 2.5, "handVy": 0.0, "ballVx": -0.3, "ballVy": 0.0},
    ]


@pytest.fixture
def still_events():
    """Observation events with no velocity above the threshold."""
    return [
        {"handVx": 0.5, "handVy": 1.0, "ballVx": -1.0, "ballVy": 0.0},
        {"handVx": 0.0, "handVy": 0.0},
    ]
