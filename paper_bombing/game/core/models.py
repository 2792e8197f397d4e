"""Core domain models used by game logic."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, StrEnum


class UnitKind(StrEnum):
    """Unit kinds available to both players."""

    SOLDIER = "soldier"
    TANK = "tank"
    ARTILLERY = "artillery"
    BUNKER = "bunker"
    PLANE = "plane"


UNIT_KIND_ORDER: tuple[UnitKind, ...] = (
    UnitKind.SOLDIER,
    UnitKind.TANK,
    UnitKind.ARTILLERY,
    UnitKind.BUNKER,
    UnitKind.PLANE,
)


class Player(IntEnum):
    """Seat identifier; player one always acts first."""

    ONE = 1
    TWO = 2

    @property
    def opponent(self) -> Player:
        return Player.TWO if self is Player.ONE else Player.ONE


class Phase(StrEnum):
    """Top-level game stage."""

    SETUP = "setup"
    PLACEMENT = "placement"
    BATTLE = "battle"
    FINISHED = "finished"


class PlacementResult(StrEnum):
    """Result of placing or rotating a unit."""

    PLACED = "placed"
    OUT_OF_BOUNDS = "out_of_bounds"
    OVERLAP = "overlap"
    ROSTER_FULL = "roster_full"
    DAMAGED = "damaged"
    UNKNOWN_UNIT = "unknown_unit"
    INVALID = "invalid"

    @property
    def ok(self) -> bool:
        return self is PlacementResult.PLACED


class AttackOutcome(StrEnum):
    """Result of attacking a single cell."""

    HIT = "hit"
    MISS = "miss"
    ALREADY_ATTACKED = "already_attacked"
    INVALID = "invalid"

    @property
    def resolved(self) -> bool:
        """Return whether the attack consumed a turn."""
        return self in (AttackOutcome.HIT, AttackOutcome.MISS)


@dataclass(frozen=True, slots=True)
class Coord:
    """Board coordinate."""

    row: int
    col: int


@dataclass(frozen=True, slots=True)
class Rect:
    """Axis-aligned cell rectangle: origin plus width (columns) and height (rows)."""

    row: int
    col: int
    width: int
    height: int

    def contains(self, row: int, col: int) -> bool:
        return self.row <= row < self.row + self.height and self.col <= col < self.col + self.width

    def cells(self) -> list[Coord]:
        """Compute covered cells in row-major order."""
        return [
            Coord(r, c)
            for r in range(self.row, self.row + self.height)
            for c in range(self.col, self.col + self.width)
        ]

    def swapped(self) -> Rect:
        return Rect(self.row, self.col, self.height, self.width)


@dataclass(slots=True)
class Unit:
    """A placed unit with footprint and health."""

    unit_id: str
    kind: UnitKind
    row: int
    col: int
    width: int
    height: int
    health: int
    max_health: int
    destroyed: bool = False
    rotated: bool = False

    @property
    def footprint(self) -> Rect:
        return Rect(self.row, self.col, self.width, self.height)

    @property
    def damaged(self) -> bool:
        return self.health < self.max_health


@dataclass(frozen=True, slots=True)
class AttackRecord:
    """One entry of a board's hit log."""

    row: int
    col: int
    outcome: AttackOutcome
    unit_id: str | None = None


@dataclass(frozen=True, slots=True)
class AttackResult:
    """Outcome of an attack against a board."""

    outcome: AttackOutcome
    row: int
    col: int
    unit_id: str | None = None
    destroyed: bool = False
