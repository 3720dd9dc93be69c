"""
Lifecycle Manager

Owns the single "current intervention" slot and the cooldown clock.

States:
    Empty   -> no intervention; new ones may start once cooldown has elapsed
    Active  -> one intervention is running until its expiresAt
    (JustExpired is the transition point Active -> Empty)

Two independent triggers end an intervention: the expiry timer, and a poll
that observes the deadline has passed. Both go through _end() under the
lock and compare identity tokens, so whichever runs first wins and the other
is a no-op.

Restore delivery is the polling path's job. A poll that ends the intervention
returns its restore command directly. When the timer wins, the restore is
parked and the next poll inside the grace window delivers it. Further polls
inside the grace window get a generic restore.
"""

import logging
import threading
from dataclasses import replace
from typing import Any, Callable, Optional, Union

from core.clock import Clock, SystemClock, ms_to_seconds
from core.interventions import catalog
from core.interventions.config import InterventionConfig
from core.interventions.history import InterventionHistory
from core.models import (
    ActiveIntervention,
    EngineState,
    InterventionKind,
    InterventionProposal,
    RestoreCommand,
)

logger = logging.getLogger(__name__)

# threading.Timer-compatible: factory(interval_seconds, function, args=...)
TimerFactory = Callable[..., Any]

PollOutcome = Union[ActiveIntervention, RestoreCommand, None]


class LifecycleManager:
    """
    Thread-safe owner of the intervention slot.

    Every read and write of {slot, last end time, parked restore, history,
    armed timer} happens under one lock. The raw slot is never handed out;
    callers receive the intervention object only as the result of an
    operation.
    """

    def __init__(
        self,
        config: Optional[InterventionConfig] = None,
        clock: Optional[Clock] = None,
        timer_factory: Optional[TimerFactory] = None,
    ):
        self.config = config or InterventionConfig()
        self._clock = clock or SystemClock()
        self._timer_factory = timer_factory or threading.Timer

        self._lock = threading.RLock()
        self._current: Optional[ActiveIntervention] = None
        self._last_end: Optional[int] = None
        self._pending_restore: Optional[RestoreCommand] = None
        self._timer: Optional[Any] = None
        self._history = InterventionHistory(self.config.history_limit)

    # =========================================================================
    # Internal helpers (caller holds the lock)
    # =========================================================================

    def _cooldown_remaining(self, now: int) -> int:
        if self._last_end is None:
            return 0
        return max(0, self.config.cooldown_ms - (now - self._last_end))

    def _in_grace_window(self, now: int) -> bool:
        if self._last_end is None:
            return False
        return now - self._last_end < self.config.grace_window_ms

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _arm_timer(self, intervention: ActiveIntervention) -> None:
        self._cancel_timer()
        timer = self._timer_factory(
            intervention.proposal.duration / 1000.0,
            self._expire_from_timer,
            args=(intervention.id,),
        )
        timer.daemon = True
        self._timer = timer
        timer.start()

    def _install(self, intervention: ActiveIntervention, now: int) -> None:
        self._current = intervention
        self._pending_restore = None
        self._history.append(intervention, now)
        self._arm_timer(intervention)

    def _end(self, now: int) -> ActiveIntervention:
        """Active -> Empty. Arms the cooldown."""
        ended = self._current
        ended.active = False
        self._current = None
        self._last_end = now
        return ended

    # =========================================================================
    # Operations
    # =========================================================================

    def engine_state(self) -> EngineState:
        """Snapshot of the state the decision engine needs."""
        with self._lock:
            now = self._clock.now_ms()
            remaining = self._cooldown_remaining(now)
            current = self._current
            return EngineState(
                is_active=current is not None and current.active,
                in_cooldown=remaining > 0,
                cooldown_remaining_ms=remaining,
                active_kind=current.kind if current else None,
                active_remaining_ms=current.remaining_ms(now) if current else 0,
            )

    def is_active(self) -> bool:
        with self._lock:
            return self._current is not None

    def activate(self, proposal: InterventionProposal) -> Optional[ActiveIntervention]:
        """
        Start an organically-triggered intervention.

        Only succeeds when the slot is empty and the cooldown has elapsed;
        otherwise a no-op returning None.
        """
        with self._lock:
            now = self._clock.now_ms()
            if self._current is not None:
                logger.info(
                    f"Activation refused: {self._current.kind.value} already active"
                )
                return None
            remaining = self._cooldown_remaining(now)
            if remaining > 0:
                logger.info(f"Activation refused: cooldown has {remaining}ms left")
                return None

            intervention = ActiveIntervention.start(proposal, now)
            self._install(intervention, now)
            logger.debug(
                f"INTERVENTION ACTIVATED: {proposal.kind.node} {proposal.action.value} "
                f"- active for {proposal.duration / 1000:g}s"
            )
            return replace(intervention)

    def force_activate(self, kind: InterventionKind, duration: int) -> ActiveIntervention:
        """
        Administrative override: start an intervention regardless of state.

        Any running intervention is superseded without a restore command and
        its timer is cancelled.
        """
        proposal = catalog.forced_proposal(kind, duration)
        with self._lock:
            now = self._clock.now_ms()
            if self._current is not None:
                logger.info(f"Superseding active intervention {self._current.kind.value}")
                self._current.active = False
            intervention = ActiveIntervention.start(proposal, now)
            self._install(intervention, now)
            logger.debug(f"FORCED INTERVENTION CREATED: {kind.value} for {duration / 1000:g}s")
            return replace(intervention)

    def _expire_from_timer(self, intervention_id: str) -> None:
        """Timer callback. Stale timers (superseded or already expired) are no-ops."""
        with self._lock:
            current = self._current
            if current is None or current.id != intervention_id:
                logger.debug(f"Ignoring stale expiry timer for {intervention_id}")
                return
            now = self._clock.now_ms()
            ended = self._end(now)
            self._timer = None
            self._pending_restore = ended.restore_command()
            logger.info(f"INTERVENTION EXPIRED: {ended.kind.value} on {ended.kind.node}")

    def poll(self) -> PollOutcome:
        """
        What the client should be doing right now.

        Returns:
            The active intervention, a restore command, or None
        """
        with self._lock:
            now = self._clock.now_ms()
            current = self._current

            if current is not None and not current.is_expired(now):
                return replace(current)

            if current is not None:
                ended = self._end(now)
                self._cancel_timer()
                command = ended.restore_command()
                self._history.append(command, now)
                logger.debug(
                    f"EXPIRED INTERVENTION DETECTED: {ended.kind.node} - sending restore command"
                )
                return command

            if not self._in_grace_window(now):
                self._pending_restore = None
                return None

            if self._pending_restore is not None:
                command = self._pending_restore
                self._pending_restore = None
                self._history.append(command, now)
                logger.debug(
                    f"Delivering restore for {command.original_kind.value} expired by timer"
                )
                return command

            return RestoreCommand()

    def inspect(self) -> dict:
        """Read-only snapshot for observability."""
        with self._lock:
            now = self._clock.now_ms()
            remaining = self._cooldown_remaining(now)
            return {
                "current": self._current.to_dict() if self._current else None,
                "history": self._history.to_list(),
                "cooldown": {
                    "active": remaining > 0,
                    "remainingMs": remaining,
                    "remainingSec": ms_to_seconds(remaining),
                },
            }

    def shutdown(self) -> None:
        """Cancel any armed expiry timer."""
        with self._lock:
            self._cancel_timer()
