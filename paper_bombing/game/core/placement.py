"""Placement validation: bounds and overlap checks against live units."""

from __future__ import annotations

from collections.abc import Iterable

from paper_bombing.game.core.models import PlacementResult, Rect, Unit


def rects_overlap(a: Rect, b: Rect) -> bool:
    """Return whether two rectangles share any cell; touching edges do not count."""
    return not (
        a.col + a.width <= b.col
        or b.col + b.width <= a.col
        or a.row + a.height <= b.row
        or b.row + b.height <= a.row
    )


def in_bounds(size: int, rect: Rect) -> bool:
    """Return whether the rectangle lies fully within an N×N grid."""
    if rect.width < 1 or rect.height < 1:
        return False
    return rect.row >= 0 and rect.col >= 0 and rect.row + rect.height <= size and rect.col + rect.width <= size


def placement_verdict(
    size: int,
    units: Iterable[Unit],
    candidate: Rect,
    *,
    ignore_id: str | None = None,
) -> PlacementResult:
    """Classify a candidate footprint against the grid and existing units.

    Destroyed units and the unit named by ``ignore_id`` are skipped.
    """
    if not in_bounds(size, candidate):
        return PlacementResult.OUT_OF_BOUNDS
    for unit in units:
        if unit.destroyed or unit.unit_id == ignore_id:
            continue
        if rects_overlap(unit.footprint, candidate):
            return PlacementResult.OVERLAP
    return PlacementResult.PLACED


def can_place(
    size: int,
    units: Iterable[Unit],
    candidate: Rect,
    *,
    ignore_id: str | None = None,
) -> bool:
    """Return whether a candidate footprint is a legal placement."""
    return placement_verdict(size, units, candidate, ignore_id=ignore_id).ok
