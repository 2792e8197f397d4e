"""Typed read-only state exposed to rendering and feedback collaborators."""

from __future__ import annotations

from dataclasses import dataclass

from paper_bombing.game.core.models import AttackRecord, Phase, Player, UnitKind


@dataclass(frozen=True, slots=True)
class UnitView:
    """Unit as drawn on a board."""

    unit_id: str
    kind: UnitKind
    row: int
    col: int
    width: int
    height: int
    health: int
    max_health: int
    destroyed: bool

    @property
    def health_ratio(self) -> float:
        return self.health / self.max_health


@dataclass(frozen=True, slots=True)
class BoardView:
    """One board from the viewer's perspective."""

    owner: Player
    size: int
    units: tuple[UnitView, ...]
    hits: tuple[AttackRecord, ...]
    remaining_units: int


@dataclass(frozen=True, slots=True)
class PaletteEntry:
    """Units of one kind still waiting to be placed."""

    kind: UnitKind
    remaining: int
    width: int
    height: int
    health: int


@dataclass(frozen=True, slots=True)
class SessionView:
    """View-ready snapshot of a game session."""

    phase: Phase
    viewer: Player
    active_player: Player
    placing_player: Player
    turn_count: int
    units_left: dict[Player, int]
    winner: Player | None
    status: str
    own_board: BoardView
    enemy_board: BoardView
    palette: tuple[PaletteEntry, ...]
    placed: int
    required: int
    dot_size: int
    preview_enabled: bool
    sound_enabled: bool
