"""
Intervention Configuration

Dataclass for the timing and trigger tunables of the intervention lifecycle.
"""

from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from core.config import Settings


@dataclass(frozen=True)
class InterventionConfig:
    """
    Configuration for the decision engine and lifecycle manager.

    Attributes:
        cooldown_ms: Quiescent period after an intervention ends
        grace_window_ms: Period after an end during which restores are re-sent
        default_duration_ms: Duration of organic and default forced interventions
        random_trigger_probability: Chance of the unconditional trigger
        movement_trigger_probability: Chance of the movement-conditioned trigger
        velocity_threshold: Velocity magnitude that counts as movement
        movement_window: Number of most recent events inspected for movement
        position_jitter: Max symmetric offset applied to random target positions
        history_limit: Max history records kept (0 = unbounded)
        random_seed: Seed for the trigger random source (None = OS entropy)
    """

    cooldown_ms: int = 5000
    grace_window_ms: int = 2000
    default_duration_ms: int = 5000
    random_trigger_probability: float = 0.5
    movement_trigger_probability: float = 0.3
    velocity_threshold: float = 1.0
    movement_window: int = 3
    position_jitter: float = 50.0
    history_limit: int = 1000
    random_seed: Optional[int] = None

    @classmethod
    def from_settings(cls, settings: "Settings") -> "InterventionConfig":
        return cls(
            cooldown_ms=settings.cooldown_ms,
            grace_window_ms=settings.grace_window_ms,
            default_duration_ms=settings.default_duration_ms,
            random_trigger_probability=settings.random_trigger_probability,
            movement_trigger_probability=settings.movement_trigger_probability,
            velocity_threshold=settings.velocity_threshold,
            movement_window=settings.movement_window,
            position_jitter=settings.position_jitter,
            history_limit=settings.history_limit,
            random_seed=settings.random_seed,
        )

    def to_dict(self) -> dict:
        return {
            "cooldown_ms": self.cooldown_ms,
            "grace_window_ms": self.grace_window_ms,
            "default_duration_ms": self.default_duration_ms,
            "random_trigger_probability": self.random_trigger_probability,
            "movement_trigger_probability": self.movement_trigger_probability,
            "velocity_threshold": self.velocity_threshold,
            "movement_window": self.movement_window,
            "position_jitter": self.position_jitter,
            "history_limit": self.history_limit,
        }
