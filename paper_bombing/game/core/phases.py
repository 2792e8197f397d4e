"""Phase transition table for the game session."""

from __future__ import annotations

from dataclasses import dataclass

from paper_bombing.game.core.models import Phase


@dataclass(frozen=True, slots=True)
class PhaseTransition:
    """Transition definition; ``source=None`` matches any phase."""

    trigger: str
    source: Phase | None
    target: Phase


class PhaseFlow:
    """Deterministic transition table for resolving the next phase from a trigger."""

    def __init__(self, transitions: tuple[PhaseTransition, ...]) -> None:
        self._transitions = transitions

    def resolve(self, current: Phase, trigger: str) -> Phase | None:
        for transition in self._transitions:
            if transition.trigger != trigger:
                continue
            if transition.source is not None and transition.source is not current:
                continue
            return transition.target
        return None


RESET = "reset"
BEGIN_PLACEMENT = "begin_placement"
PLACEMENT_COMPLETE = "placement_complete"
FLEET_DESTROYED = "fleet_destroyed"


def default_phase_transitions() -> tuple[PhaseTransition, ...]:
    return (
        PhaseTransition(trigger=RESET, source=None, target=Phase.SETUP),
        PhaseTransition(trigger=BEGIN_PLACEMENT, source=Phase.SETUP, target=Phase.PLACEMENT),
        PhaseTransition(trigger=PLACEMENT_COMPLETE, source=Phase.PLACEMENT, target=Phase.BATTLE),
        PhaseTransition(trigger=FLEET_DESTROYED, source=Phase.BATTLE, target=Phase.FINISHED),
    )


PHASE_FLOW = PhaseFlow(default_phase_transitions())
