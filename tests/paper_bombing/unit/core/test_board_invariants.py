"""Property-based checks of board invariants under arbitrary action sequences."""

from hypothesis import given, settings
from hypothesis import strategies as st

from paper_bombing.game.core.board import Board
from paper_bombing.game.core.models import AttackOutcome, Unit, UnitKind
from paper_bombing.game.core.placement import in_bounds, rects_overlap

BOARD_SIZE = 6

placements = st.tuples(
    st.integers(min_value=-1, max_value=BOARD_SIZE),
    st.integers(min_value=-1, max_value=BOARD_SIZE),
    st.integers(min_value=1, max_value=3),
    st.integers(min_value=1, max_value=3),
    st.integers(min_value=1, max_value=3),
)
cells = st.tuples(
    st.integers(min_value=0, max_value=BOARD_SIZE - 1),
    st.integers(min_value=0, max_value=BOARD_SIZE - 1),
)


def _live_units_valid(board: Board) -> bool:
    live = board.live_units()
    for index, unit in enumerate(live):
        if not in_bounds(board.size, unit.footprint):
            return False
        for other in live[index + 1 :]:
            if rects_overlap(unit.footprint, other.footprint):
                return False
    return True


@given(st.lists(placements, max_size=25))
def test_successful_placements_never_overlap_or_leave_grid(candidates) -> None:
    board = Board(size=BOARD_SIZE)
    for index, (row, col, width, height, health) in enumerate(candidates):
        unit = Unit(f"u{index}", UnitKind.TANK, row, col, width, height, health, health)
        board.place_unit(unit)
        assert _live_units_valid(board)


@settings(max_examples=50)
@given(st.lists(placements, max_size=12), st.lists(cells, max_size=40))
def test_health_is_monotonic_and_cells_attacked_once(candidates, attacks) -> None:
    board = Board(size=BOARD_SIZE)
    for index, (row, col, width, height, health) in enumerate(candidates):
        board.place_unit(Unit(f"u{index}", UnitKind.TANK, row, col, width, height, health, health))

    previous = {unit.unit_id: unit.health for unit in board.units}
    attacked: set[tuple[int, int]] = set()
    for row, col in attacks:
        result = board.attack(row, col)
        if (row, col) in attacked:
            assert result.outcome is AttackOutcome.ALREADY_ATTACKED
        else:
            assert result.outcome in (AttackOutcome.HIT, AttackOutcome.MISS)
        attacked.add((row, col))

        for unit in board.units:
            assert 0 <= unit.health <= previous[unit.unit_id] <= unit.max_health
            assert unit.destroyed == (unit.health == 0)
            if previous[unit.unit_id] == 0:
                assert unit.destroyed
            previous[unit.unit_id] = unit.health

    logged = [(record.row, record.col) for record in board.hits]
    assert len(logged) == len(set(logged)) == len(attacked)
    assert board.remaining_units() == len(board.live_units())
