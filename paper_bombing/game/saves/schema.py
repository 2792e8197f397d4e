"""Save-game snapshot schema and validation helpers."""

from __future__ import annotations

from collections.abc import Mapping

from paper_bombing.game.core.board import Board
from paper_bombing.game.core.config import GameConfig, config_from_payload, config_to_payload
from paper_bombing.game.core.ids import UnitIdSequence
from paper_bombing.game.core.models import (
    AttackOutcome,
    AttackRecord,
    Phase,
    Player,
    Unit,
    UnitKind,
)
from paper_bombing.game.core.placement import in_bounds, rects_overlap
from paper_bombing.game.core.session import GameSession, PlacementState

SNAPSHOT_VERSION = 1


def session_to_payload(session: GameSession) -> dict[str, object]:
    """Convert a session to a JSON-serializable snapshot."""
    return {
        "version": SNAPSHOT_VERSION,
        "phase": session.phase.value,
        "active_player": session.active_player.value,
        "turn_count": session.turn_count,
        "winner": session.winner.value if session.winner is not None else None,
        "settings": config_to_payload(session.config),
        "boards": {str(player.value): board_to_payload(session.board(player)) for player in Player},
        "placement": {
            "active_placer": session.placement.active_placer.value,
            "player1_done": session.placement.player1_done,
            "player2_done": session.placement.player2_done,
        },
        "last_message": session.last_message,
        "history": list(session.history),
    }


def board_to_payload(board: Board) -> dict[str, object]:
    return {
        "size": board.size,
        "units": [
            {
                "id": unit.unit_id,
                "kind": unit.kind.value,
                "row": unit.row,
                "col": unit.col,
                "width": unit.width,
                "height": unit.height,
                "health": unit.health,
                "max_health": unit.max_health,
                "destroyed": unit.destroyed,
                "rotated": unit.rotated,
            }
            for unit in board.units
        ],
        "hits": [_record_to_payload(record) for record in board.hits],
    }


def payload_to_session(payload: object, id_sequence: UnitIdSequence | None = None) -> GameSession:
    """Convert a loaded snapshot into a session.

    Every field and board invariant is checked before anything is built; any
    violation raises ``ValueError``.
    """
    if not isinstance(payload, Mapping):
        raise ValueError("Snapshot must be an object.")
    version = _int(payload, "version")
    if version != SNAPSHOT_VERSION:
        raise ValueError("Unsupported snapshot version.")

    phase = _enum(Phase, payload.get("phase"), "phase")
    active_player = _player(payload.get("active_player"), "active_player")
    turn_count = _int(payload, "turn_count")
    if turn_count < 0:
        raise ValueError("Snapshot turn_count must be non-negative.")
    raw_winner = payload.get("winner")
    winner = None if raw_winner is None else _player(raw_winner, "winner")

    raw_settings = payload.get("settings")
    if not isinstance(raw_settings, Mapping):
        raise ValueError("Snapshot settings must be an object.")
    config = config_from_payload(raw_settings)

    raw_boards = payload.get("boards")
    if not isinstance(raw_boards, Mapping):
        raise ValueError("Snapshot boards must be an object.")
    boards: dict[Player, Board] = {}
    for player in Player:
        raw_board = raw_boards.get(str(player.value))
        if raw_board is None:
            raise ValueError(f"Snapshot is missing board {player.value}.")
        boards[player] = payload_to_board(raw_board)
        if boards[player].size != config.grid_size:
            raise ValueError("Snapshot board size does not match settings.")

    placement = _placement(payload.get("placement"))
    last_message = payload.get("last_message", "")
    if not isinstance(last_message, str):
        raise ValueError("Snapshot last_message must be a string.")
    history = payload.get("history", [])
    if not isinstance(history, list) or not all(isinstance(item, str) for item in history):
        raise ValueError("Snapshot history must be a list of strings.")

    _check_session_consistency(
        config=config,
        phase=phase,
        winner=winner,
        active_player=active_player,
        placement=placement,
        boards=boards,
        turn_count=turn_count,
    )
    return GameSession.from_state(
        config=config,
        phase=phase,
        boards=boards,
        active_player=active_player,
        placement=placement,
        turn_count=turn_count,
        winner=winner,
        last_message=last_message,
        history=history,
        id_sequence=id_sequence,
    )


def payload_to_board(raw: object) -> Board:
    """Validate and build one board from its payload."""
    if not isinstance(raw, Mapping):
        raise ValueError("Board must be an object.")
    size = _int(raw, "size")
    if size < 1:
        raise ValueError("Board size must be positive.")
    raw_units = raw.get("units")
    raw_hits = raw.get("hits")
    if not isinstance(raw_units, list) or not isinstance(raw_hits, list):
        raise ValueError("Board units and hits must be lists.")

    units = [_unit(item) for item in raw_units]
    seen_ids: set[str] = set()
    for unit in units:
        if unit.unit_id in seen_ids:
            raise ValueError(f"Duplicate unit id: {unit.unit_id}.")
        seen_ids.add(unit.unit_id)
        if not in_bounds(size, unit.footprint):
            raise ValueError(f"Unit {unit.unit_id} is out of bounds.")
    live = [unit for unit in units if not unit.destroyed]
    for index, unit in enumerate(live):
        for other in live[index + 1 :]:
            if rects_overlap(unit.footprint, other.footprint):
                raise ValueError(f"Units {unit.unit_id} and {other.unit_id} overlap.")

    hits = [_record(item) for item in raw_hits]
    by_id = {unit.unit_id: unit for unit in units}
    hits_taken = dict.fromkeys(by_id, 0)
    seen_cells: set[tuple[int, int]] = set()
    for record in hits:
        if not (0 <= record.row < size and 0 <= record.col < size):
            raise ValueError("Hit record is out of bounds.")
        if (record.row, record.col) in seen_cells:
            raise ValueError("Duplicate hit record for one cell.")
        seen_cells.add((record.row, record.col))
        if record.outcome is AttackOutcome.HIT:
            target = by_id.get(record.unit_id) if record.unit_id is not None else None
            if target is None:
                raise ValueError("Hit record references an unknown unit.")
            if not target.footprint.contains(record.row, record.col):
                raise ValueError(f"Hit record at ({record.row}, {record.col}) is outside unit {target.unit_id}.")
            hits_taken[target.unit_id] += 1
        elif any(unit.footprint.contains(record.row, record.col) for unit in live):
            raise ValueError(f"Miss record at ({record.row}, {record.col}) lies on a live unit.")
    for unit in units:
        if unit.max_health - unit.health != hits_taken[unit.unit_id]:
            raise ValueError(f"Unit {unit.unit_id} health does not match its hit records.")
    return Board(size=size, units=units, hits=hits)


def _check_session_consistency(
    *,
    config: GameConfig,
    phase: Phase,
    winner: Player | None,
    active_player: Player,
    placement: PlacementState,
    boards: dict[Player, Board],
    turn_count: int,
) -> None:
    if phase is Phase.FINISHED:
        if winner is None:
            raise ValueError("Finished snapshot must name a winner.")
        if boards[winner.opponent].remaining_units() != 0:
            raise ValueError("Snapshot winner's opponent still has units.")
    elif winner is not None:
        raise ValueError("Only finished snapshots may name a winner.")
    total_hits = sum(len(board.hits) for board in boards.values())
    if total_hits != turn_count:
        raise ValueError("Snapshot turn_count does not match the hit logs.")

    for player, board in boards.items():
        for kind in UnitKind:
            if board.count_kind(kind) > config.spec_for(kind).count:
                raise ValueError(f"Board {player.value} holds too many {kind.value} units.")

    if phase in (Phase.SETUP, Phase.PLACEMENT):
        _check_placement_state(phase, active_player, placement, boards, turn_count, config.roster_size)
        return

    if not (placement.player1_done and placement.player2_done):
        raise ValueError("Battle snapshot must have both players done placing.")
    for player, board in boards.items():
        if len(board.units) != config.roster_size:
            raise ValueError(f"Board {player.value} does not hold the full roster.")
    # Player one attacks on even turn counts; a finished game keeps its last attacker active.
    if phase is Phase.BATTLE:
        expected = Player.ONE if turn_count % 2 == 0 else Player.TWO
        if any(board.remaining_units() == 0 for board in boards.values()):
            raise ValueError("Battle snapshot has a board without live units.")
    else:
        expected = Player.ONE if turn_count % 2 == 1 else Player.TWO
        if winner is not expected:
            raise ValueError("Snapshot winner did not make the last attack.")
    if active_player is not expected:
        raise ValueError("Snapshot active_player does not match the turn order.")
    if len(boards[Player.TWO].hits) != (turn_count + 1) // 2:
        raise ValueError("Snapshot hit logs do not alternate between players.")


def _check_placement_state(
    phase: Phase,
    active_player: Player,
    placement: PlacementState,
    boards: dict[Player, Board],
    turn_count: int,
    roster_size: int,
) -> None:
    if turn_count != 0:
        raise ValueError("Snapshot before battle must have no attacks.")
    if placement.player2_done:
        raise ValueError("Snapshot before battle cannot have player 2 done placing.")
    if phase is Phase.SETUP:
        if placement.player1_done or any(board.units for board in boards.values()):
            raise ValueError("Setup snapshot must have empty boards.")
        return
    placer = Player.TWO if placement.player1_done else Player.ONE
    if placement.active_placer is not placer or active_player is not placer:
        raise ValueError("Snapshot placer does not match placement progress.")
    if placement.player1_done and len(boards[Player.ONE].units) != roster_size:
        raise ValueError("Board 1 is marked done without the full roster.")
    if not placement.player1_done and boards[Player.TWO].units:
        raise ValueError("Board 2 has units before player 1 finished placing.")


def _unit(raw: object) -> Unit:
    if not isinstance(raw, Mapping):
        raise ValueError("Each unit must be an object.")
    try:
        unit_id = raw["id"]
        if not isinstance(unit_id, str) or not unit_id:
            raise ValueError("Unit id must be a non-empty string.")
        unit = Unit(
            unit_id=unit_id,
            kind=UnitKind(str(raw["kind"])),
            row=_int(raw, "row"),
            col=_int(raw, "col"),
            width=_int(raw, "width"),
            height=_int(raw, "height"),
            health=_int(raw, "health"),
            max_health=_int(raw, "max_health"),
            destroyed=_bool(raw, "destroyed"),
            rotated=_bool(raw, "rotated", default=False),
        )
    except (KeyError, TypeError) as exc:
        raise ValueError("Malformed unit entry in snapshot.") from exc
    if unit.max_health < 1 or not 0 <= unit.health <= unit.max_health:
        raise ValueError(f"Unit {unit.unit_id} has invalid health.")
    if unit.destroyed != (unit.health == 0):
        raise ValueError(f"Unit {unit.unit_id} destroyed flag disagrees with health.")
    return unit


def _record(raw: object) -> AttackRecord:
    if not isinstance(raw, Mapping):
        raise ValueError("Each hit record must be an object.")
    outcome = _enum(AttackOutcome, raw.get("result"), "result")
    if not outcome.resolved:
        raise ValueError("Hit record result must be hit or miss.")
    unit_id = raw.get("unit_id")
    if unit_id is not None and not isinstance(unit_id, str):
        raise ValueError("Hit record unit_id must be a string.")
    if outcome is AttackOutcome.MISS:
        unit_id = None
    return AttackRecord(row=_int(raw, "row"), col=_int(raw, "col"), outcome=outcome, unit_id=unit_id)


def _record_to_payload(record: AttackRecord) -> dict[str, object]:
    payload: dict[str, object] = {"row": record.row, "col": record.col, "result": record.outcome.value}
    if record.unit_id is not None:
        payload["unit_id"] = record.unit_id
    return payload


def _placement(raw: object) -> PlacementState:
    if not isinstance(raw, Mapping):
        raise ValueError("Snapshot placement must be an object.")
    return PlacementState(
        active_placer=_player(raw.get("active_placer"), "active_placer"),
        player1_done=_bool(raw, "player1_done"),
        player2_done=_bool(raw, "player2_done"),
    )


def _player(raw: object, name: str) -> Player:
    if isinstance(raw, bool) or not isinstance(raw, (int, str)):
        raise ValueError(f"Snapshot {name} must be 1 or 2.")
    try:
        return Player(int(raw))
    except ValueError as exc:
        raise ValueError(f"Snapshot {name} must be 1 or 2.") from exc


def _enum[E](enum_type: type[E], raw: object, name: str) -> E:
    try:
        return enum_type(str(raw))
    except ValueError as exc:
        raise ValueError(f"Snapshot {name} has unknown value: {raw!r}.") from exc


def _int(payload: Mapping[str, object], key: str) -> int:
    raw = payload.get(key)
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise ValueError(f"Field '{key}' must be an integer.")
    return raw


def _bool(payload: Mapping[str, object], key: str, default: bool | None = None) -> bool:
    raw = payload.get(key, default)
    if not isinstance(raw, bool):
        raise ValueError(f"Field '{key}' must be a boolean.")
    return raw
