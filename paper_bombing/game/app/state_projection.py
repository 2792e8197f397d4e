"""Session to view-state projection helpers."""

from __future__ import annotations

from paper_bombing.game.app.ui_state import BoardView, PaletteEntry, SessionView, UnitView
from paper_bombing.game.core.board import Board
from paper_bombing.game.core.models import UNIT_KIND_ORDER, Phase, Player, Unit
from paper_bombing.game.core.roster import missing_counts
from paper_bombing.game.core.session import GameSession


def viewer_for(session: GameSession) -> Player:
    """The player whose own board is shown: the placer, otherwise the attacker."""
    if session.phase is Phase.PLACEMENT:
        return session.placing_player
    return session.active_player


def unit_view(unit: Unit) -> UnitView:
    return UnitView(
        unit_id=unit.unit_id,
        kind=unit.kind,
        row=unit.row,
        col=unit.col,
        width=unit.width,
        height=unit.height,
        health=unit.health,
        max_health=unit.max_health,
        destroyed=unit.destroyed,
    )


def own_board_view(owner: Player, board: Board) -> BoardView:
    """Owner's board: every unit plus every attack received."""
    return BoardView(
        owner=owner,
        size=board.size,
        units=tuple(unit_view(unit) for unit in board.units),
        hits=tuple(board.hits),
        remaining_units=board.remaining_units(),
    )


def enemy_board_view(owner: Player, board: Board) -> BoardView:
    """Opponent's board: attacks plus destroyed units only."""
    return BoardView(
        owner=owner,
        size=board.size,
        units=tuple(unit_view(unit) for unit in board.units if unit.destroyed),
        hits=tuple(board.hits),
        remaining_units=board.remaining_units(),
    )


def build_palette(session: GameSession, player: Player) -> tuple[PaletteEntry, ...]:
    """Kinds still to place for a player, in roster order."""
    missing = missing_counts(session.board(player), session.config)
    entries: list[PaletteEntry] = []
    for kind in UNIT_KIND_ORDER:
        if missing[kind] <= 0:
            continue
        spec = session.config.spec_for(kind)
        entries.append(PaletteEntry(kind, missing[kind], spec.width, spec.height, spec.health))
    return tuple(entries)


def build_session_view(session: GameSession) -> SessionView:
    """Build SessionView from the current session state."""
    viewer = viewer_for(session)
    opponent = viewer.opponent
    palette = build_palette(session, viewer) if session.phase is Phase.PLACEMENT else ()
    return SessionView(
        phase=session.phase,
        viewer=viewer,
        active_player=session.active_player,
        placing_player=session.placing_player,
        turn_count=session.turn_count,
        units_left={player: session.remaining_units(player) for player in Player},
        winner=session.winner,
        status=session.last_message,
        own_board=own_board_view(viewer, session.board(viewer)),
        enemy_board=enemy_board_view(opponent, session.board(opponent)),
        palette=palette,
        placed=session.placed_count(viewer),
        required=session.roster_size,
        dot_size=session.config.dot_size,
        preview_enabled=session.config.preview_enabled,
        sound_enabled=session.config.sound_enabled,
    )
