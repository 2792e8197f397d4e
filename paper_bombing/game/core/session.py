"""Game session: phases, placement turns, battle turns and win detection."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field

from paper_bombing.game.core import phases
from paper_bombing.game.core.auto_placement import AutoPlacementResult, auto_place
from paper_bombing.game.core.board import Board
from paper_bombing.game.core.config import GameConfig
from paper_bombing.game.core.ids import UnitIdSequence
from paper_bombing.game.core.models import (
    AttackOutcome,
    Phase,
    PlacementResult,
    Player,
    UnitKind,
)
from paper_bombing.game.core.roster import create_unit, footprint_for

logger = logging.getLogger(__name__)

_PLACEMENT_REASONS: dict[PlacementResult, str] = {
    PlacementResult.OUT_OF_BOUNDS: "out of bounds",
    PlacementResult.OVERLAP: "overlaps another unit",
    PlacementResult.ROSTER_FULL: "no more units of that kind",
    PlacementResult.DAMAGED: "unit already took damage",
    PlacementResult.UNKNOWN_UNIT: "unknown unit",
    PlacementResult.INVALID: "not accepted in this phase",
}


@dataclass(slots=True)
class PlacementState:
    """Which player is placing and who has finished."""

    active_placer: Player = Player.ONE
    player1_done: bool = False
    player2_done: bool = False

    def is_done(self, player: Player) -> bool:
        return self.player1_done if player is Player.ONE else self.player2_done

    def mark_done(self, player: Player) -> None:
        if player is Player.ONE:
            self.player1_done = True
        else:
            self.player2_done = True


@dataclass(frozen=True, slots=True)
class PlacementOutcome:
    """Result of a placement-phase action."""

    result: PlacementResult
    status: str
    unit_id: str | None = None

    @property
    def success(self) -> bool:
        return self.result.ok


@dataclass(frozen=True, slots=True)
class AdvanceOutcome:
    """Result of trying to finish the active player's placement."""

    success: bool
    placed: int
    required: int
    phase: Phase
    status: str


@dataclass(frozen=True, slots=True)
class AutoPlaceOutcome:
    """Result of auto-placing the active placer's roster."""

    result: AutoPlacementResult
    status: str
    accepted: bool = True

    @property
    def success(self) -> bool:
        return self.accepted and self.result.success


@dataclass(frozen=True, slots=True)
class BattleTurnResult:
    """Result of one attack as seen by feedback collaborators."""

    outcome: AttackOutcome
    row: int
    col: int
    attacker: Player
    status: str
    turn_count: int
    unit_id: str | None = None
    destroyed: bool = False
    winner: Player | None = None


class GameSession:
    """Runtime game session owning both players' boards.

    Lifecycle: construct (phase ``setup``), ``start_new_game`` to enter
    placement, mutate through the placement and battle methods, then snapshot
    or restore through ``paper_bombing.game.saves.schema``.
    """

    def __init__(self, config: GameConfig | None = None, id_sequence: UnitIdSequence | None = None) -> None:
        self.config = config if config is not None else GameConfig()
        self.id_sequence = id_sequence if id_sequence is not None else UnitIdSequence()
        self.phase = Phase.SETUP
        self.boards: dict[Player, Board] = _fresh_boards(self.config.grid_size)
        self.active_player = Player.ONE
        self.placement = PlacementState()
        self.turn_count = 0
        self.winner: Player | None = None
        self.last_message = "Start a new game."
        self.history: list[str] = []

    @classmethod
    def from_state(
        cls,
        *,
        config: GameConfig,
        phase: Phase,
        boards: dict[Player, Board],
        active_player: Player,
        placement: PlacementState,
        turn_count: int,
        winner: Player | None,
        last_message: str = "",
        history: list[str] | None = None,
        id_sequence: UnitIdSequence | None = None,
    ) -> GameSession:
        """Rebuild a session from already-validated state."""
        session = cls(config, id_sequence)
        session.phase = phase
        session.boards = {Player.ONE: boards[Player.ONE], Player.TWO: boards[Player.TWO]}
        session.active_player = active_player
        session.placement = placement
        session.turn_count = turn_count
        session.winner = winner
        session.last_message = last_message
        session.history = list(history or [])
        session.id_sequence.advance_past(
            unit.unit_id for board in session.boards.values() for unit in board.units
        )
        return session

    # Read-only helpers

    @property
    def roster_size(self) -> int:
        return self.config.roster_size

    @property
    def placing_player(self) -> Player:
        return self.placement.active_placer

    def board(self, player: Player) -> Board:
        return self.boards[player]

    def remaining_units(self, player: Player) -> int:
        return self.boards[player].remaining_units()

    def placed_count(self, player: Player) -> int:
        return len(self.boards[player].live_units())

    # Lifecycle

    def reset(self) -> None:
        """Return to an empty ``setup`` state with the current configuration."""
        self._transition(phases.RESET)
        self.boards = _fresh_boards(self.config.grid_size)
        self.active_player = Player.ONE
        self.placement = PlacementState()
        self.turn_count = 0
        self.winner = None
        self.history = []
        self.id_sequence.reset()
        self.last_message = "Start a new game."

    def start_new_game(self, config: GameConfig | None = None) -> None:
        """Rebuild both boards and begin placement with player one."""
        if config is not None:
            self.config = config
        self.reset()
        self._transition(phases.BEGIN_PLACEMENT)
        size = self.config.grid_size
        self._announce(f"New game on a {size}x{size} grid. Player 1: place your units.")

    # Placement phase

    def place_unit(self, kind: UnitKind, row: int, col: int, *, rotated: bool = False) -> PlacementOutcome:
        """Place one configured unit on the active placer's board."""
        if self.phase is not Phase.PLACEMENT:
            return self._reject_placement(PlacementResult.INVALID)
        try:
            kind = UnitKind(kind)
        except ValueError:
            return self._reject_placement(PlacementResult.INVALID)
        board = self.boards[self.placing_player]
        spec = self.config.spec_for(kind)
        if board.count_kind(kind) >= spec.count:
            return self._reject_placement(PlacementResult.ROSTER_FULL)
        verdict = board.placement_verdict(footprint_for(spec, row, col, rotated=rotated))
        if not verdict.ok:
            return self._reject_placement(verdict)
        unit = create_unit(self.id_sequence(), kind, spec, row, col, rotated=rotated)
        board.place_unit(unit)
        status = f"Player {self.placing_player.value} placed {kind.value} at ({row}, {col})."
        self._announce(status)
        return PlacementOutcome(PlacementResult.PLACED, status, unit.unit_id)

    def rotate_unit(self, unit_id: str) -> PlacementOutcome:
        """Swap the footprint of one of the active placer's units."""
        if self.phase is not Phase.PLACEMENT:
            return self._reject_placement(PlacementResult.INVALID)
        result = self.boards[self.placing_player].rotate_unit(unit_id)
        if not result.ok:
            return self._reject_placement(result)
        status = f"Rotated {unit_id}."
        self._announce(status)
        return PlacementOutcome(PlacementResult.PLACED, status, unit_id)

    def clear_placement(self) -> PlacementOutcome:
        """Remove every unit from the active placer's board."""
        if self.phase is not Phase.PLACEMENT:
            return self._reject_placement(PlacementResult.INVALID)
        self.boards[self.placing_player].clear_units()
        status = f"Player {self.placing_player.value} cleared their board."
        self._announce(status)
        return PlacementOutcome(PlacementResult.PLACED, status)

    def auto_place(self, rng: random.Random, attempts: int | None = None) -> AutoPlaceOutcome:
        """Replace the active placer's units with a random full roster."""
        if self.phase is not Phase.PLACEMENT:
            status = "Auto-placement is only available during placement."
            logger.debug("auto_place_rejected phase=%s", self.phase.value)
            return AutoPlaceOutcome(AutoPlacementResult(), status, accepted=False)
        board = self.boards[self.placing_player]
        board.clear_units()
        if attempts is None:
            result = auto_place(board, self.config, rng, self.id_sequence)
        else:
            result = auto_place(board, self.config, rng, self.id_sequence, attempts=attempts)
        if result.failed_kind is not None:
            status = f"Could not fit every {result.failed_kind.value}; place the rest manually."
        else:
            status = f"Player {self.placing_player.value} units placed randomly."
        self._announce(status)
        return AutoPlaceOutcome(result, status)

    def advance_placement(self) -> AdvanceOutcome:
        """Finish the active placer's turn once the full roster is on the board."""
        required = self.roster_size
        if self.phase is not Phase.PLACEMENT:
            return AdvanceOutcome(False, 0, required, self.phase, "Placement is not in progress.")
        player = self.placing_player
        placed = self.placed_count(player)
        if placed != required:
            status = f"Place all units first ({placed}/{required})."
            self.last_message = status
            logger.debug("advance_rejected player=%d placed=%d required=%d", player.value, placed, required)
            return AdvanceOutcome(False, placed, required, self.phase, status)

        self.placement.mark_done(player)
        if player is Player.ONE:
            self.placement.active_placer = Player.TWO
            self.active_player = Player.TWO
            status = "Player 2: place your units."
        else:
            self._transition(phases.PLACEMENT_COMPLETE)
            self.active_player = Player.ONE
            status = "Battle started. Player 1 attacks first."
        self._announce(status)
        return AdvanceOutcome(True, placed, required, self.phase, status)

    # Battle phase

    def attack(self, row: int, col: int) -> BattleTurnResult:
        """Resolve the active player's attack on the opponent's board."""
        attacker = self.active_player
        if self.phase is not Phase.BATTLE:
            logger.debug("attack_rejected phase=%s", self.phase.value)
            return self._turn_result(AttackOutcome.INVALID, row, col, attacker, "No attacks accepted now.")

        target = self.boards[attacker.opponent]
        result = target.attack(row, col)
        if result.outcome is AttackOutcome.INVALID:
            return self._turn_result(result.outcome, row, col, attacker, "Target is outside the grid.")
        if result.outcome is AttackOutcome.ALREADY_ATTACKED:
            return self._turn_result(result.outcome, row, col, attacker, "Cell already attacked. Choose another.")

        self.turn_count += 1
        detail = self._describe(result.outcome, result.unit_id, result.destroyed, target)
        status = f"Player {attacker.value} attacked ({row}, {col}): {detail}."
        self._announce(status)

        if target.remaining_units() == 0:
            self._transition(phases.FLEET_DESTROYED)
            self.winner = attacker
            status = f"Player {attacker.value} wins after {self.turn_count} attacks."
            self._announce(status)
        else:
            self.active_player = attacker.opponent

        return BattleTurnResult(
            outcome=result.outcome,
            row=row,
            col=col,
            attacker=attacker,
            status=status,
            turn_count=self.turn_count,
            unit_id=result.unit_id,
            destroyed=result.destroyed,
            winner=self.winner,
        )

    # Internals

    def _transition(self, trigger: str) -> None:
        target = phases.PHASE_FLOW.resolve(self.phase, trigger)
        if target is None:
            raise RuntimeError(f"No transition for '{trigger}' from {self.phase.value}.")
        if target is not self.phase:
            logger.info("phase_transition from=%s to=%s trigger=%s", self.phase.value, target.value, trigger)
        self.phase = target

    def _announce(self, status: str) -> None:
        self.last_message = status
        self.history.append(status)

    def _reject_placement(self, result: PlacementResult) -> PlacementOutcome:
        status = f"Invalid placement: {_PLACEMENT_REASONS[result]}."
        logger.debug("placement_rejected result=%s phase=%s", result.value, self.phase.value)
        return PlacementOutcome(result, status)

    def _turn_result(
        self, outcome: AttackOutcome, row: int, col: int, attacker: Player, status: str
    ) -> BattleTurnResult:
        return BattleTurnResult(
            outcome=outcome,
            row=row,
            col=col,
            attacker=attacker,
            status=status,
            turn_count=self.turn_count,
            winner=self.winner,
        )

    @staticmethod
    def _describe(outcome: AttackOutcome, unit_id: str | None, destroyed: bool, board: Board) -> str:
        if outcome is AttackOutcome.MISS:
            return "miss"
        unit = board.unit_by_id(unit_id) if unit_id is not None else None
        kind = unit.kind.value if unit is not None else "unit"
        return f"destroyed {kind}" if destroyed else f"damaged {kind}"


def _fresh_boards(size: int) -> dict[Player, Board]:
    return {Player.ONE: Board(size=size), Player.TWO: Board(size=size)}
