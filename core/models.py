"""
Core Models for the Intervention Lifecycle

This module defines the value objects shared by the decision engine,
the lifecycle manager and the transport adapters:
1. Observation events submitted by the simulation client
2. Intervention proposals produced by the decision engine
3. The active intervention slot and the restore command sent when it ends
4. History records kept for observability
"""

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union


# =============================================================================
# Intervention Kinds & Actions
# =============================================================================

class InterventionKind(str, Enum):
    """What the intervention overrides in the scene."""
    HAND_POSITION = "handPosition"
    BALL_POSITION = "ballPosition"
    COLLISION = "collision"

    @property
    def node(self) -> str:
        """Scene node the intervention targets (same name as the kind)."""
        return self.value


class InterventionAction(str, Enum):
    """How the override is applied."""
    FIX = "fix"          # Pin an object at a target position
    PREVENT = "prevent"  # Suppress a behavior (collisions)


RESTORE_TYPE = "restore"


# =============================================================================
# Observation Events
# =============================================================================

VELOCITY_FIELDS = {
    "hand_vx": "handVx",
    "hand_vy": "handVy",
    "ball_vx": "ballVx",
    "ball_vy": "ballVy",
}


def _as_float(value: Any) -> Optional[float]:
    """Read a velocity component, treating missing or non-numeric values as absent."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class Event:
    """
    One observation sample from the simulation client.

    Attributes:
        hand_vx: Hand velocity on the x axis
        hand_vy: Hand velocity on the y axis
        ball_vx: Ball velocity on the x axis
        ball_vy: Ball velocity on the y axis
    """
    hand_vx: Optional[float] = None
    hand_vy: Optional[float] = None
    ball_vx: Optional[float] = None
    ball_vy: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Any) -> "Event":
        """Build an event from a client JSON object. Non-objects become empty events."""
        if not isinstance(data, dict):
            return cls()
        return cls(**{
            attr: _as_float(data.get(key))
            for attr, key in VELOCITY_FIELDS.items()
        })

    def velocities(self) -> list[float]:
        """Present velocity components, in hand-then-ball order."""
        values = [self.hand_vx, self.hand_vy, self.ball_vx, self.ball_vy]
        return [v for v in values if v is not None]

    def has_movement(self, threshold: float) -> bool:
        """True when any component's magnitude is strictly above threshold."""
        return any(abs(v) > threshold for v in self.velocities())

    def to_dict(self) -> dict:
        return {
            key: getattr(self, attr)
            for attr, key in VELOCITY_FIELDS.items()
            if getattr(self, attr) is not None
        }


# =============================================================================
# Proposals, Active Interventions & Restore Commands
# =============================================================================

@dataclass(frozen=True)
class InterventionProposal:
    """
    A candidate intervention, not yet committed to the lifecycle state.

    Attributes:
        kind: What is overridden
        action: fix or prevent
        duration: How long the intervention stays active (ms)
        reason: Human-readable explanation shown to the client
        x: Target x coordinate (position kinds only)
        y: Target y coordinate (position kinds only)
    """
    kind: InterventionKind
    action: InterventionAction
    duration: int
    reason: str = ""
    x: Optional[float] = None
    y: Optional[float] = None

    def to_dict(self) -> dict:
        """Convert to the wire format the simulation client understands."""
        result = {
            "type": self.kind.value,
            "node": self.kind.node,
            "action": self.action.value,
        }
        if self.x is not None:
            result["x"] = self.x
        if self.y is not None:
            result["y"] = self.y
        result["duration"] = self.duration
        result["reason"] = self.reason
        return result


@dataclass
class ActiveIntervention:
    """
    The single process-wide intervention slot.

    The id is an identity token: expiry timers compare it against the live
    slot so a timer from a superseded intervention is a no-op.
    """
    proposal: InterventionProposal
    timestamp: int
    expires_at: int
    active: bool = True
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @classmethod
    def start(cls, proposal: InterventionProposal, now: int) -> "ActiveIntervention":
        """Create an intervention that starts now and lasts proposal.duration."""
        return cls(
            proposal=proposal,
            timestamp=now,
            expires_at=now + proposal.duration,
        )

    @property
    def kind(self) -> InterventionKind:
        return self.proposal.kind

    def is_expired(self, now: int) -> bool:
        return self.expires_at <= now

    def remaining_ms(self, now: int) -> int:
        return max(0, self.expires_at - now)

    def restore_command(self) -> "RestoreCommand":
        """Restore command that reverts this intervention on the client."""
        return RestoreCommand(original_kind=self.kind)

    def to_dict(self) -> dict:
        result = self.proposal.to_dict()
        result.update({
            "id": self.id,
            "timestamp": self.timestamp,
            "active": self.active,
            "expiresAt": self.expires_at,
        })
        return result


@dataclass(frozen=True)
class RestoreCommand:
    """
    One-shot signal telling the client to revert any applied override.

    original_kind is None for the generic restore re-sent during the grace
    window.
    """
    original_kind: Optional[InterventionKind] = None
    force_restore: bool = True

    def to_dict(self) -> dict:
        result = {
            "type": RESTORE_TYPE,
            "node": RESTORE_TYPE,
        }
        if self.original_kind is not None:
            result["originalType"] = self.original_kind.value
            result["originalNode"] = self.original_kind.node
        result["forceRestore"] = self.force_restore
        return result


# =============================================================================
# History & Engine State
# =============================================================================

@dataclass(frozen=True)
class HistoryRecord:
    """
    Entry of the append-only history log.

    Interventions are serialized live so their active flag reflects later
    expiry.
    """
    entry: Union[ActiveIntervention, RestoreCommand]
    timestamp: int

    @property
    def is_restore(self) -> bool:
        return isinstance(self.entry, RestoreCommand)

    def to_dict(self) -> dict:
        result = self.entry.to_dict()
        if self.is_restore:
            result["timestamp"] = self.timestamp
            result["isRestoreCommand"] = True
        return result


@dataclass(frozen=True)
class EngineState:
    """Lifecycle snapshot handed to the decision engine."""
    is_active: bool = False
    in_cooldown: bool = False
    cooldown_remaining_ms: int = 0
    active_kind: Optional[InterventionKind] = None
    active_remaining_ms: int = 0
