"""
Intervention Catalog

Fixed parameter sets for every intervention kind, used by the decision
engine (organic triggers) and by the administrative force path.
"""

import random
from dataclasses import dataclass
from typing import Optional

from core.errors import InvalidKindError
from core.models import InterventionAction, InterventionKind, InterventionProposal


@dataclass(frozen=True)
class KindTemplate:
    """
    Parameters for one intervention kind.

    Attributes:
        action: fix or prevent
        random_reason: Reason attached to unconditional random triggers
        base_x: Base target x for random triggers (position kinds only)
        base_y: Base target y for random triggers (position kinds only)
        force_x: Target x for forced interventions
        force_y: Target y for forced interventions
    """
    action: InterventionAction
    random_reason: str
    base_x: Optional[float] = None
    base_y: Optional[float] = None
    force_x: Optional[float] = None
    force_y: Optional[float] = None

    @property
    def has_position(self) -> bool:
        return self.base_x is not None and self.base_y is not None


TEMPLATES: dict[InterventionKind, KindTemplate] = {
    InterventionKind.HAND_POSITION: KindTemplate(
        action=InterventionAction.FIX,
        random_reason="Testing causal effect of fixed hand position",
        base_x=200, base_y=150,
        force_x=200, force_y=150,
    ),
    InterventionKind.BALL_POSITION: KindTemplate(
        action=InterventionAction.FIX,
        random_reason="Testing causal effect of fixed ball position",
        base_x=100, base_y=100,
        force_x=150, force_y=100,
    ),
    InterventionKind.COLLISION: KindTemplate(
        action=InterventionAction.PREVENT,
        random_reason="Testing causal effect of prevented collisions",
    ),
}

# Kinds in the order the random trigger picks from
KINDS: tuple[InterventionKind, ...] = tuple(TEMPLATES)

MOVEMENT_REASON = "Movement-triggered intervention"
FORCE_REASON = "Manual test intervention"

# Administrative names accepted by the force path
FORCE_ALIASES: dict[str, InterventionKind] = {
    "hand": InterventionKind.HAND_POSITION,
    "ball": InterventionKind.BALL_POSITION,
    "collision": InterventionKind.COLLISION,
    **{kind.value: kind for kind in InterventionKind},
}


def resolve_force_kind(name: str) -> InterventionKind:
    """
    Map an administrative kind name to an InterventionKind.

    Raises:
        InvalidKindError: If the name is not recognized
    """
    kind = FORCE_ALIASES.get(name) if isinstance(name, str) else None
    if kind is None:
        raise InvalidKindError(str(name))
    return kind


def random_proposal(
    kind: InterventionKind,
    duration: int,
    rng: random.Random,
    jitter: float = 50.0,
) -> InterventionProposal:
    """Proposal for the unconditional trigger: base position plus symmetric jitter."""
    template = TEMPLATES[kind]
    x = y = None
    if template.has_position:
        x = template.base_x + rng.uniform(-jitter, jitter)
        y = template.base_y + rng.uniform(-jitter, jitter)
    return InterventionProposal(
        kind=kind,
        action=template.action,
        duration=duration,
        reason=template.random_reason,
        x=x,
        y=y,
    )


def movement_proposal(duration: int) -> InterventionProposal:
    """Proposal for the movement-conditioned trigger: hand fixed at its default position."""
    template = TEMPLATES[InterventionKind.HAND_POSITION]
    return InterventionProposal(
        kind=InterventionKind.HAND_POSITION,
        action=template.action,
        duration=duration,
        reason=MOVEMENT_REASON,
        x=template.base_x,
        y=template.base_y,
    )


def forced_proposal(kind: InterventionKind, duration: int) -> InterventionProposal:
    """Proposal for an operator-forced intervention."""
    template = TEMPLATES[kind]
    return InterventionProposal(
        kind=kind,
        action=template.action,
        duration=duration,
        reason=FORCE_REASON,
        x=template.force_x,
        y=template.force_y,
    )
