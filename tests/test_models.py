"""
Tests for core models and the history log
"""

from core.interventions import catalog
from core.interventions.history import InterventionHistory
from core.models import (
    ActiveIntervention,
    Event,
    HistoryRecord,
    InterventionKind,
    RestoreCommand,
)


class TestEvent:
    """Tests for Event parsing."""

    def test_from_dict(self):
        event = Event.from_dict({"handVx": "1.5", "ballVy": -2, "extra": "ignored"})

        assert event.hand_vx == 1.5
        assert event.ball_vy == -2.0
        assert event.hand_vy is None
        assert event.to_dict() == {"handVx": 1.5, "ballVy": -2.0}

    def test_booleans_are_not_velocities(self):
        assert Event.from_dict({"handVx": True}).hand_vx is None


class TestActiveIntervention:
    """Tests for ActiveIntervention."""

    def test_wire_format(self):
        proposal = catalog.forced_proposal(InterventionKind.HAND_POSITION, 3000)
        active = ActiveIntervention.start(proposal, now=1000)

        wire = active.to_dict()

        assert wire["type"] == "handPosition"
        assert wire["x"] == 200 and wire["y"] == 150
        assert wire["timestamp"] == 1000
        assert wire["expiresAt"] == 4000
        assert wire["active"] is True
        assert wire["id"] == active.id

    def test_expiry(self):
        proposal = catalog.forced_proposal(InterventionKind.COLLISION, 100)
        active = ActiveIntervention.start(proposal, now=0)

        assert not active.is_expired(99)
        assert active.is_expired(100)
        assert active.remaining_ms(40) == 60
        assert active.restore_command() == RestoreCommand(InterventionKind.COLLISION)


class TestHistory:
    """Tests for InterventionHistory."""

    def test_restore_records_are_stamped(self):
        history = InterventionHistory()
        history.append(RestoreCommand(InterventionKind.BALL_POSITION), timestamp=77)

        assert history.to_list() == [{
            "type": "restore",
            "node": "restore",
            "originalType": "ballPosition",
            "originalNode": "ballPosition",
            "forceRestore": True,
            "timestamp": 77,
            "isRestoreCommand": True,
        }]

    def test_unbounded_when_limit_zero(self):
        history = InterventionHistory(limit=0)
        for i in range(1500):
            history.append(RestoreCommand(), timestamp=i)

        assert history.limit is None
        assert len(history) == 1500
        assert history.total_appended == 1500

    def test_interventions_serialize_live(self):
        proposal = catalog.forced_proposal(InterventionKind.HAND_POSITION, 10)
        active = ActiveIntervention.start(proposal, now=0)
        record = HistoryRecord(entry=active, timestamp=0)

        active.active = False

        assert record.to_dict()["active"] is False
        assert not record.is_restore
