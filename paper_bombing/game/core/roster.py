"""Roster helpers: unit construction from configuration and ordering."""

from __future__ import annotations

from paper_bombing.game.core.board import Board
from paper_bombing.game.core.config import GameConfig, UnitSpec
from paper_bombing.game.core.models import UNIT_KIND_ORDER, Rect, Unit, UnitKind


def footprint_for(spec: UnitSpec, row: int, col: int, *, rotated: bool = False) -> Rect:
    """Configured footprint at an origin, with width and height swapped when rotated."""
    if rotated:
        return Rect(row, col, spec.height, spec.width)
    return Rect(row, col, spec.width, spec.height)


def create_unit(unit_id: str, kind: UnitKind, spec: UnitSpec, row: int, col: int, *, rotated: bool = False) -> Unit:
    """Create a full-health unit using the configured footprint."""
    rect = footprint_for(spec, row, col, rotated=rotated)
    return Unit(
        unit_id=unit_id,
        kind=kind,
        row=row,
        col=col,
        width=rect.width,
        height=rect.height,
        health=spec.health,
        max_health=spec.health,
        rotated=rotated,
    )


def largest_first(config: GameConfig) -> list[UnitKind]:
    """Kinds with a non-zero count, largest footprint first."""
    kinds = [kind for kind in UNIT_KIND_ORDER if config.spec_for(kind).count > 0]
    return sorted(kinds, key=lambda kind: config.spec_for(kind).area, reverse=True)


def missing_counts(board: Board, config: GameConfig) -> dict[UnitKind, int]:
    """Units of each kind still to be placed on a board."""
    return {
        kind: max(0, config.spec_for(kind).count - board.count_kind(kind))
        for kind in UNIT_KIND_ORDER
    }
