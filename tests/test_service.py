"""
Tests for the Intervention Service boundary operations
"""

from unittest.mock import Mock, patch

import pytest

from core.context import RequestContext
from core.models import InterventionKind
from core.result import ResultStatus


class TestSubmitEvents:
    """Tests for submit_events."""

    def test_rejects_non_list(self, service):
        """Non-list payloads are rejected without touching state."""
        before = service.debug_snapshot().payload

        result = service.submit_events("not-a-list")

        assert result.status == ResultStatus.REJECTED
        assert result.http_status == 400
        assert result.to_dict() == {
            "error": "Invalid event data format",
            "interventions": [],
        }
        assert service.debug_snapshot().payload == before

    def test_rejects_missing_events(self, service):
        result = service.submit_events(None)

        assert result.status == ResultStatus.REJECTED

    def test_empty_list_is_valid(self, service, scripted_rng):
        """An empty batch still gets the unconditional roll."""
        scripted_rng.values = [0.9]

        result = service.submit_events([])

        assert result.success
        assert result.interventions == []

    def test_trigger_activates_proposal(self, service, scripted_rng, clock):
        """A fired trigger is activated and returned in wire format."""
        scripted_rng.values = [0.1]
        scripted_rng.choices = [InterventionKind.COLLISION]

        result = service.submit_events([{"handVx": 0.0}])

        assert result.success
        assert result.interventions == [{
            "type": "collision",
            "node": "collision",
            "action": "prevent",
            "duration": 5000,
            "reason": "Testing causal effect of prevented collisions",
        }]
        current = service.debug_snapshot().payload["current"]
        assert current["type"] == "collision"
        assert current["active"] is True
        assert current["expiresAt"] == clock.now + 5000

    def test_no_trigger_while_active(self, service, scripted_rng):
        """Submissions during an active intervention return nothing."""
        service.force_intervention("hand")
        scripted_rng.values = [0.0]

        result = service.submit_events([])

        assert result.interventions == []
        assert scripted_rng.values == [0.0]

    def test_no_trigger_during_cooldown(self, service, scripted_rng, clock, timers):
        """Organic triggers are suppressed until the cooldown elapses."""
        service.force_intervention("ball", 1000)
        clock.advance(1000)
        timers.last.fire()

        scripted_rng.values = [0.0]
        clock.advance(4999)
        assert service.submit_events([]).interventions == []

        clock.advance(1)
        assert len(service.submit_events([]).interventions) == 1

    def test_lifecycle_refusal_returns_empty(self, service, engine):
        """If activation loses a race, nothing is reported as triggered."""
        service.lifecycle.activate = Mock(return_value=None)
        engine.decide = Mock(return_value=Mock())

        result = service.submit_events([])

        assert result.success
        assert result.interventions == []

    def test_internal_fault_keeps_state(self, service, engine):
        """Unexpected faults surface as a generic failure; the slot stays empty."""
        engine.decide = Mock(side_effect=RuntimeError("boom"))

        result = service.submit_events([{"handVx": 3}])

        assert result.status == ResultStatus.FAILURE
        assert result.http_status == 500
        assert result.to_dict() == {
            "error": "Server error processing events",
            "interventions": [],
        }
        assert service.debug_snapshot().payload["current"] is None

    def test_request_id_from_context(self, service):
        ctx = RequestContext.for_http(operation="submit_events")

        result = service.submit_events([], ctx)

        assert result.request_id == ctx.request_id


class TestPollInterventions:
    """Tests for poll_interventions."""

    def test_idle(self, service):
        assert service.poll_interventions().to_dict() == {"interventions": []}

    def test_force_then_expire_scenario(self, service, scripted_rng, clock):
        """Force, poll active, poll restore, organic trigger suppressed by cooldown."""
        service.force_intervention("hand", 1000)

        polled = service.poll_interventions().interventions
        assert len(polled) == 1
        assert polled[0]["type"] == "handPosition"
        assert polled[0]["active"] is True

        clock.advance(1001)
        polled = service.poll_interventions().interventions
        assert len(polled) == 1
        assert polled[0]["type"] == "restore"
        assert polled[0]["originalType"] == "handPosition"
        assert polled[0]["forceRestore"] is True

        scripted_rng.values = [0.0, 0.0]
        assert service.submit_events([{"handVx": 5}]).interventions == []

    def test_restore_observable_in_grace_window(self, service, clock, timers):
        """Every ended intervention yields a restore before the grace window closes."""
        service.force_intervention("collision", 2000)
        clock.advance(2000)
        timers.last.fire()

        clock.advance(1500)
        polled = service.poll_interventions().interventions

        assert polled[0]["type"] == "restore"
        assert polled[0]["originalType"] == "collision"

    def test_poll_fault(self, service):
        service.lifecycle.poll = Mock(side_effect=RuntimeError("boom"))

        result = service.poll_interventions()

        assert result.status == ResultStatus.FAILURE
        assert result.to_dict()["interventions"] == []


class TestForceIntervention:
    """Tests for force_intervention."""

    @pytest.mark.parametrize("name, kind", [
        ("hand", "handPosition"),
        ("ball", "ballPosition"),
        ("collision", "collision"),
        ("handPosition", "handPosition"),
    ])
    def test_kinds(self, service, name, kind):
        result = service.force_intervention(name, 8000)

        assert result.success
        assert result.payload["success"] is True
        assert result.payload["intervention"]["type"] == kind
        assert result.payload["intervention"]["duration"] == 8000
        assert result.payload["intervention"]["reason"] == "Manual test intervention"

    def test_default_duration(self, service):
        result = service.force_intervention("ball")

        assert result.payload["intervention"]["duration"] == 5000
        assert result.payload["intervention"]["x"] == 150

    def test_duration_from_query_string(self, service):
        result = service.force_intervention("hand", "2500")

        assert result.payload["intervention"]["duration"] == 2500

    def test_unknown_kind_rejected(self, service):
        """Unrecognized kinds are rejected with no state change."""
        result = service.force_intervention("foot")

        assert result.status == ResultStatus.REJECTED
        assert result.to_dict()["error"] == "Invalid intervention type"
        assert service.debug_snapshot().payload["history"] == []

    @pytest.mark.parametrize("duration", ["abc", "0", -5, True])
    def test_bad_duration_rejected(self, service, duration):
        result = service.force_intervention("hand", duration)

        assert result.status == ResultStatus.REJECTED
        assert service.debug_snapshot().payload["current"] is None

    def test_at_most_one_active_across_forces(self, service, scripted_rng):
        """Interleaved forces and submissions never leave two active interventions."""
        scripted_rng.values = [0.0] * 10
        service.force_intervention("hand")
        service.submit_events([])
        service.force_intervention("collision")
        service.submit_events([])

        history = service.debug_snapshot().payload["history"]
        assert len(history) == 2
        assert sum(1 for h in history if h.get("active")) == 1


class TestDebugAndHealth:
    """Tests for debug_snapshot and health."""

    def test_snapshot_cooldown(self, service, clock, timers):
        service.force_intervention("hand", 1000)
        clock.advance(1000)
        timers.last.fire()
        clock.advance(1400)

        cooldown = service.debug_snapshot().payload["cooldown"]

        assert cooldown == {"active": True, "remainingMs": 3600, "remainingSec": 4}

    def test_health(self, service):
        payload = service.health().payload

        assert payload["status"] == "healthy"
        assert payload["intervention_active"] is False
        assert payload["intervention_types"] == ["handPosition", "ballPosition", "collision"]
        assert payload["config"]["cooldown_ms"] == 5000


class TestGetService:
    """Tests for the process-wide service."""

    def test_built_from_settings(self, settings):
        from core.interventions import service as service_module

        settings.cooldown_ms = 1234
        service_module.get_service.cache_clear()
        try:
            with patch.object(service_module, "get_settings", return_value=settings):
                built = service_module.get_service()
            assert built.config.cooldown_ms == 1234
            assert service_module.get_service() is built
        finally:
            service_module.get_service.cache_clear()
