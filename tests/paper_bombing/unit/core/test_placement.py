from paper_bombing.game.core.models import PlacementResult, Rect, Unit, UnitKind
from paper_bombing.game.core.placement import can_place, in_bounds, placement_verdict, rects_overlap


def _unit(unit_id: str, row: int, col: int, width: int, height: int, destroyed: bool = False) -> Unit:
    health = 0 if destroyed else 1
    return Unit(unit_id, UnitKind.BUNKER, row, col, width, height, health, 1, destroyed=destroyed)


def test_rects_overlap_shared_cell() -> None:
    assert rects_overlap(Rect(0, 0, 2, 2), Rect(1, 1, 2, 2))


def test_edge_adjacent_rects_do_not_overlap() -> None:
    assert not rects_overlap(Rect(0, 0, 2, 2), Rect(2, 0, 2, 2))
    assert not rects_overlap(Rect(0, 0, 2, 2), Rect(0, 2, 2, 2))
    assert not rects_overlap(Rect(0, 0, 1, 1), Rect(1, 1, 1, 1))


def test_in_bounds() -> None:
    assert in_bounds(4, Rect(0, 0, 4, 4))
    assert in_bounds(4, Rect(2, 2, 2, 2))
    assert not in_bounds(4, Rect(3, 3, 2, 2))
    assert not in_bounds(4, Rect(-1, 0, 1, 1))
    assert not in_bounds(4, Rect(0, 0, 0, 1))


def test_out_of_bounds_candidate_on_small_board() -> None:
    assert placement_verdict(4, [], Rect(3, 3, 2, 2)) is PlacementResult.OUT_OF_BOUNDS


def test_overlap_then_adjacent_candidates() -> None:
    units = [_unit("x", 0, 0, 2, 2)]
    assert placement_verdict(4, units, Rect(1, 1, 2, 2)) is PlacementResult.OVERLAP
    assert placement_verdict(4, units, Rect(2, 0, 2, 2)) is PlacementResult.PLACED


def test_destroyed_units_are_ignored() -> None:
    units = [_unit("x", 0, 0, 2, 2, destroyed=True)]
    assert can_place(4, units, Rect(0, 0, 2, 2))


def test_ignore_id_skips_named_unit() -> None:
    units = [_unit("x", 0, 0, 2, 1)]
    assert not can_place(4, units, Rect(0, 0, 1, 2))
    assert can_place(4, units, Rect(0, 0, 1, 2), ignore_id="x")
