"""
Decision Engine

Decides whether a batch of observation events should trigger a new
intervention. Two independent triggers:

- an unconditional roll that picks any kind at random, and
- a lower-probability roll that only applies when recent events show movement.

The engine never proposes while an intervention is active or during cooldown.
The lifecycle manager re-checks both conditions when it activates.
"""

import logging
import random
from typing import Optional, Sequence

from core.clock import ms_to_seconds
from core.interventions import catalog
from core.interventions.config import InterventionConfig
from core.models import EngineState, Event, InterventionProposal

logger = logging.getLogger(__name__)


class DecisionEngine:
    """
    Produces zero or one InterventionProposal per batch of events.

    The random source is injected so tests can seed or script the rolls.
    """

    def __init__(
        self,
        config: Optional[InterventionConfig] = None,
        rng: Optional[random.Random] = None,
    ):
        self.config = config or InterventionConfig()
        self._rng = rng or random.Random(self.config.random_seed)

    def decide(
        self,
        events: Sequence[Event],
        state: EngineState,
    ) -> Optional[InterventionProposal]:
        """
        Decide whether to propose an intervention.

        Args:
            events: Observation events, oldest first
            state: Current lifecycle state

        Returns:
            A proposal, or None when nothing should be triggered
        """
        if state.is_active:
            logger.debug(
                f"Active intervention in progress: {state.active_kind.value if state.active_kind else '?'}, "
                f"expires in {ms_to_seconds(state.active_remaining_ms)}s"
            )
            return None

        if state.in_cooldown:
            logger.debug(
                f"In cooldown period, waiting {ms_to_seconds(state.cooldown_remaining_ms)}s "
                f"before next possible intervention"
            )
            return None

        logger.debug(f"Processing {len(events)} events for potential interventions")

        if self._rng.random() < self.config.random_trigger_probability:
            kind = self._rng.choice(catalog.KINDS)
            logger.info(f"INTERVENTION TRIGGER: Creating {kind.value} intervention")
            return catalog.random_proposal(
                kind,
                duration=self.config.default_duration_ms,
                rng=self._rng,
                jitter=self.config.position_jitter,
            )

        if self.movement_detected(events) and (
            self._rng.random() < self.config.movement_trigger_probability
        ):
            logger.info("INTERVENTION TRIGGER: Movement detected, creating hand position intervention")
            return catalog.movement_proposal(self.config.default_duration_ms)

        return None

    def movement_detected(self, events: Sequence[Event]) -> bool:
        """True if any of the most recent events moves faster than the threshold."""
        recent = list(events)[-self.config.movement_window:]
        return any(e.has_movement(self.config.velocity_threshold) for e in recent)
