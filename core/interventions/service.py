"""
Intervention Service

Boundary operations invoked by the transport adapters. Composes the
decision engine and the lifecycle manager, validates input and maps
failures onto rejections (caller error) or failures (internal fault).
"""

import logging
import random
from functools import lru_cache
from typing import Any, Optional

from core.clock import Clock
from core.config import get_settings
from core.context import RequestContext
from core.errors import InvalidInputError, InvalidKindError
from core.interventions import catalog
from core.interventions.config import InterventionConfig
from core.interventions.engine import DecisionEngine
from core.interventions.lifecycle import LifecycleManager, TimerFactory
from core.logging.intervention_logger import get_logger
from core.models import ActiveIntervention, Event, RestoreCommand
from core.result import ServiceResult

logger = logging.getLogger(__name__)

SERVICE_NAME = "intervention-server"


class InterventionService:
    """
    Process-wide intervention coordination.

    Usage:
        service = InterventionService()
        service.submit_events([{"handVx": 2.5}])
        service.poll_interventions()
        service.force_intervention("hand", 8000)
        service.debug_snapshot()
    """

    def __init__(
        self,
        config: Optional[InterventionConfig] = None,
        clock: Optional[Clock] = None,
        timer_factory: Optional[TimerFactory] = None,
        rng: Optional[random.Random] = None,
        engine: Optional[DecisionEngine] = None,
        lifecycle: Optional[LifecycleManager] = None,
    ):
        self.config = config or InterventionConfig()
        self.engine = engine or DecisionEngine(self.config, rng=rng)
        self.lifecycle = lifecycle or LifecycleManager(
            self.config,
            clock=clock,
            timer_factory=timer_factory,
        )

    def _context(self, ctx: Optional[RequestContext], operation: str) -> RequestContext:
        return ctx or RequestContext(operation=operation, triggered_by="direct")

    # =========================================================================
    # Submission
    # =========================================================================

    def submit_events(
        self,
        events: Any,
        ctx: Optional[RequestContext] = None,
    ) -> ServiceResult:
        """
        Feed a batch of events to the decision engine and activate its proposal.

        Args:
            events: List of event objects from the client
            ctx: Request context

        Returns:
            ServiceResult with {"interventions": [] | [proposal]}
        """
        ctx = self._context(ctx, "submit_events")
        log = get_logger(ctx)

        if not isinstance(events, (list, tuple)):
            log.error("Invalid event data format received")
            return ServiceResult.rejected(
                "Invalid event data format",
                payload={"interventions": []},
                request_id=ctx.request_id,
            )

        try:
            parsed = [Event.from_dict(e) for e in events]
            state = self.lifecycle.engine_state()
            proposal = self.engine.decide(parsed, state)

            if proposal is None:
                if state.is_active:
                    log.suppressed("intervention already active")
                elif state.in_cooldown:
                    log.suppressed(f"cooldown has {state.cooldown_remaining_ms}ms left")
                else:
                    log.suppressed("no trigger fired")
                return ServiceResult.ok({"interventions": []}, request_id=ctx.request_id)

            intervention = self.lifecycle.activate(proposal)
            if intervention is None:
                log.suppressed("lifecycle refused activation")
                return ServiceResult.ok({"interventions": []}, request_id=ctx.request_id)

            log.activated(intervention)
            return ServiceResult.ok(
                {"interventions": [proposal.to_dict()]},
                request_id=ctx.request_id,
            )

        except Exception:
            log.exception("ERROR processing events")
            return ServiceResult.fail(
                "Server error processing events",
                payload={"interventions": []},
                request_id=ctx.request_id,
            )

    # =========================================================================
    # Polling
    # =========================================================================

    def poll_interventions(self, ctx: Optional[RequestContext] = None) -> ServiceResult:
        """
        Return what the client should be doing right now.

        Returns:
            ServiceResult with {"interventions": [] | [intervention | restore]}
        """
        ctx = self._context(ctx, "poll_interventions")
        log = get_logger(ctx)

        try:
            outcome = self.lifecycle.poll()
        except Exception:
            log.exception("ERROR polling interventions")
            return ServiceResult.fail(
                "Server error polling interventions",
                payload={"interventions": []},
                request_id=ctx.request_id,
            )

        if outcome is None:
            log.debug("No active interventions")
            return ServiceResult.ok({"interventions": []}, request_id=ctx.request_id)

        if isinstance(outcome, RestoreCommand):
            log.restore_sent(outcome)
        elif isinstance(outcome, ActiveIntervention):
            log.debug(
                f"Sending active intervention: {outcome.kind.node} "
                f"{outcome.proposal.action.value}"
            )
        return ServiceResult.ok(
            {"interventions": [outcome.to_dict()]},
            request_id=ctx.request_id,
        )

    # =========================================================================
    # Administrative
    # =========================================================================

    def _parse_duration(self, duration: Any) -> int:
        """Duration in ms; None or empty means the configured default."""
        if duration is None or duration == "":
            return self.config.default_duration_ms
        if isinstance(duration, bool):
            raise InvalidInputError(f"Invalid duration: {duration}")
        try:
            value = int(duration)
        except (TypeError, ValueError):
            raise InvalidInputError(f"Invalid duration: {duration}")
        if value <= 0:
            raise InvalidInputError(f"Duration must be positive: {value}")
        return value

    def force_intervention(
        self,
        kind: str,
        duration: Any = None,
        ctx: Optional[RequestContext] = None,
    ) -> ServiceResult:
        """
        Force an intervention, bypassing the decision engine and the cooldown.

        Args:
            kind: hand, ball, collision (or a canonical kind name)
            duration: Duration in ms (defaults to the configured duration)
            ctx: Request context

        Returns:
            ServiceResult with {"success": True, "intervention": proposal}
        """
        ctx = self._context(ctx, "force_intervention")
        log = get_logger(ctx)

        try:
            resolved = catalog.resolve_force_kind(kind)
        except InvalidKindError as e:
            log.warning(str(e))
            return ServiceResult.rejected(
                "Invalid intervention type",
                payload={"available": ["hand", "ball", "collision"]},
                request_id=ctx.request_id,
            )

        try:
            value = self._parse_duration(duration)
        except InvalidInputError as e:
            log.warning(str(e))
            return ServiceResult.rejected(str(e), request_id=ctx.request_id)

        try:
            intervention = self.lifecycle.force_activate(resolved, value)
        except Exception:
            log.exception(f"ERROR forcing {resolved.value} intervention")
            return ServiceResult.fail(
                "Server error forcing intervention",
                payload={"success": False},
                request_id=ctx.request_id,
            )

        log.activated(intervention, forced=True)
        return ServiceResult.ok(
            {"success": True, "intervention": intervention.proposal.to_dict()},
            request_id=ctx.request_id,
        )

    def debug_snapshot(self, ctx: Optional[RequestContext] = None) -> ServiceResult:
        """Current intervention, history and cooldown status."""
        ctx = self._context(ctx, "debug_snapshot")
        get_logger(ctx).debug("Debug endpoint accessed - returning intervention history")
        return ServiceResult.ok(self.lifecycle.inspect(), request_id=ctx.request_id)

    def health(self, ctx: Optional[RequestContext] = None) -> ServiceResult:
        """Liveness plus the active tunables."""
        ctx = self._context(ctx, "health")
        return ServiceResult.ok(
            {
                "status": "healthy",
                "service": SERVICE_NAME,
                "intervention_active": self.lifecycle.is_active(),
                "intervention_types": [k.value for k in catalog.KINDS],
                "config": self.config.to_dict(),
            },
            request_id=ctx.request_id,
        )

    def shutdown(self) -> None:
        self.lifecycle.shutdown()


@lru_cache(maxsize=1)
def get_service() -> InterventionService:
    """
    Get the process-wide InterventionService (cached).

    Built from settings on first use.
    """
    settings = get_settings()
    config = InterventionConfig.from_settings(settings)
    logger.info(f"Intervention cooldown period: {config.cooldown_ms / 1000:g} seconds")
    return InterventionService(config)
