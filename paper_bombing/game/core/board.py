"""Board state representation and mutation helpers."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from paper_bombing.game.core.config import DEFAULT_GRID_SIZE
from paper_bombing.game.core.models import (
    AttackOutcome,
    AttackRecord,
    AttackResult,
    PlacementResult,
    Rect,
    Unit,
    UnitKind,
)
from paper_bombing.game.core.placement import placement_verdict

SHOT_NONE = 0
SHOT_MISS = 1
SHOT_HIT = 2


@dataclass(slots=True)
class Board:
    """One player's grid, units and received-attack log.

    ``units`` and ``hits`` are the source of truth. ``occupancy`` maps each cell
    to ``index + 1`` of the live unit covering it (0 for empty) and ``shots``
    marks attacked cells; both are rebuilt from the lists.
    """

    size: int = DEFAULT_GRID_SIZE
    units: list[Unit] = field(default_factory=list)
    hits: list[AttackRecord] = field(default_factory=list)
    occupancy: np.ndarray = field(
        default_factory=lambda: np.zeros((0, 0), dtype=np.int32), init=False, repr=False, compare=False
    )
    shots: np.ndarray = field(
        default_factory=lambda: np.zeros((0, 0), dtype=np.int8), init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        if self.size < 1:
            raise ValueError("Board size must be positive.")
        self.rebuild_index()

    def rebuild_index(self) -> None:
        """Recompute occupancy and shot grids from units and hit log."""
        self.occupancy = np.zeros((self.size, self.size), dtype=np.int32)
        self.shots = np.zeros((self.size, self.size), dtype=np.int8)
        for index, unit in enumerate(self.units, start=1):
            if not unit.destroyed:
                self._mark(unit, index)
        for record in self.hits:
            self.shots[record.row, record.col] = SHOT_HIT if record.outcome is AttackOutcome.HIT else SHOT_MISS

    def in_bounds(self, row: int, col: int) -> bool:
        """Return whether the cell is on the board."""
        return 0 <= row < self.size and 0 <= col < self.size

    def live_units(self) -> list[Unit]:
        return [unit for unit in self.units if not unit.destroyed]

    def unit_by_id(self, unit_id: str) -> Unit | None:
        for unit in self.units:
            if unit.unit_id == unit_id:
                return unit
        return None

    def count_kind(self, kind: UnitKind) -> int:
        return sum(1 for unit in self.units if unit.kind is kind)

    def placement_verdict(self, rect: Rect, *, ignore_id: str | None = None) -> PlacementResult:
        return placement_verdict(self.size, self.units, rect, ignore_id=ignore_id)

    def can_place(self, rect: Rect) -> bool:
        """Return whether a footprint is in bounds and clear of live units."""
        return self.placement_verdict(rect).ok

    def place_unit(self, unit: Unit) -> PlacementResult:
        """Add a unit if its footprint validates; otherwise leave the board unchanged."""
        verdict = self.placement_verdict(unit.footprint)
        if not verdict.ok:
            return verdict
        self.units.append(unit)
        self._mark(unit, len(self.units))
        return PlacementResult.PLACED

    def rotate_unit(self, unit_id: str) -> PlacementResult:
        """Swap width and height of an undamaged live unit in place."""
        unit = self.unit_by_id(unit_id)
        if unit is None or unit.destroyed:
            return PlacementResult.UNKNOWN_UNIT
        if unit.damaged or self._has_been_hit(unit_id):
            return PlacementResult.DAMAGED
        rotated = unit.footprint.swapped()
        verdict = self.placement_verdict(rotated, ignore_id=unit_id)
        if not verdict.ok:
            return verdict
        index = self.units.index(unit) + 1
        self._unmark(unit)
        unit.width, unit.height = rotated.width, rotated.height
        unit.rotated = not unit.rotated
        self._mark(unit, index)
        return PlacementResult.PLACED

    def clear_units(self) -> None:
        """Remove every unit from the board."""
        self.units.clear()
        self.occupancy.fill(0)

    def was_attacked(self, row: int, col: int) -> bool:
        """Return whether this cell was previously targeted."""
        return self.in_bounds(row, col) and bool(self.shots[row, col] != SHOT_NONE)

    def attack(self, row: int, col: int) -> AttackResult:
        """Resolve an attack on one cell and append it to the hit log."""
        if not self.in_bounds(row, col):
            return AttackResult(AttackOutcome.INVALID, row, col)
        if self.was_attacked(row, col):
            return AttackResult(AttackOutcome.ALREADY_ATTACKED, row, col)

        index = int(self.occupancy[row, col])
        if index == 0:
            self.shots[row, col] = SHOT_MISS
            self.hits.append(AttackRecord(row, col, AttackOutcome.MISS))
            return AttackResult(AttackOutcome.MISS, row, col)

        unit = self.units[index - 1]
        unit.health -= 1
        if unit.health <= 0:
            unit.health = 0
            unit.destroyed = True
            self._unmark(unit)
        self.shots[row, col] = SHOT_HIT
        self.hits.append(AttackRecord(row, col, AttackOutcome.HIT, unit.unit_id))
        return AttackResult(AttackOutcome.HIT, row, col, unit_id=unit.unit_id, destroyed=unit.destroyed)

    def remaining_units(self) -> int:
        """Count units that are not destroyed."""
        return sum(1 for unit in self.units if not unit.destroyed)

    def all_units_destroyed(self) -> bool:
        return self.remaining_units() == 0

    def _has_been_hit(self, unit_id: str) -> bool:
        return any(record.unit_id == unit_id for record in self.hits)

    def _mark(self, unit: Unit, index: int) -> None:
        self.occupancy[unit.row : unit.row + unit.height, unit.col : unit.col + unit.width] = index

    def _unmark(self, unit: Unit) -> None:
        self.occupancy[unit.row : unit.row + unit.height, unit.col : unit.col + unit.width] = 0
