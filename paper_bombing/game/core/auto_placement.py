"""Randomized roster placement."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field

from paper_bombing.game.core.board import Board
from paper_bombing.game.core.config import GameConfig
from paper_bombing.game.core.ids import UnitIdFactory
from paper_bombing.game.core.models import Rect, UnitKind
from paper_bombing.game.core.roster import create_unit, largest_first, missing_counts

logger = logging.getLogger(__name__)

DEFAULT_ATTEMPTS = 200


@dataclass(frozen=True, slots=True)
class AutoPlacementResult:
    """Ids placed by this run and the kind that could not be seated, if any."""

    placed: list[str] = field(default_factory=list)
    failed_kind: UnitKind | None = None

    @property
    def success(self) -> bool:
        return self.failed_kind is None


def auto_place(
    board: Board,
    config: GameConfig,
    rng: random.Random,
    id_factory: UnitIdFactory,
    attempts: int = DEFAULT_ATTEMPTS,
) -> AutoPlacementResult:
    """Seat every unit still missing from the board at random valid positions.

    Each unit gets up to ``attempts`` random origins, with a coin flip for
    orientation. On exhaustion the run stops and reports the kind; units placed
    before that stay on the board.
    """
    placed: list[str] = []
    missing = missing_counts(board, config)
    for kind in largest_first(config):
        spec = config.spec_for(kind)
        for _ in range(missing[kind]):
            origin = _random_origin(board, spec.width, spec.height, rng, attempts)
            if origin is None:
                logger.warning("auto_place_failed kind=%s placed=%d", kind.value, len(placed))
                return AutoPlacementResult(placed=placed, failed_kind=kind)
            row, col, rotated = origin
            unit = create_unit(id_factory(), kind, spec, row, col, rotated=rotated)
            board.place_unit(unit)
            placed.append(unit.unit_id)
    return AutoPlacementResult(placed=placed)


def _random_origin(
    board: Board, width: int, height: int, rng: random.Random, attempts: int
) -> tuple[int, int, bool] | None:
    for _ in range(attempts):
        rotated = rng.random() < 0.5
        w, h = (height, width) if rotated else (width, height)
        if w > board.size or h > board.size:
            continue
        row = rng.randrange(board.size - h + 1)
        col = rng.randrange(board.size - w + 1)
        if board.can_place(Rect(row, col, w, h)):
            return row, col, rotated
    return None
