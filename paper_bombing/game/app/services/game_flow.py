"""Game flow orchestration with autosave, separated from any UI."""

from __future__ import annotations

import logging
import random

from paper_bombing.game.app.state_projection import build_session_view
from paper_bombing.game.app.ui_state import SessionView
from paper_bombing.game.core.config import GameConfig
from paper_bombing.game.core.models import UnitKind
from paper_bombing.game.core.session import (
    AdvanceOutcome,
    AutoPlaceOutcome,
    BattleTurnResult,
    GameSession,
    PlacementOutcome,
)
from paper_bombing.game.saves.service import AUTOSAVE_SLOT, SaveService, SettingsService

logger = logging.getLogger(__name__)


class GameFlowService:
    """Single entry point for collaborators: mutations, autosave and views.

    Every accepted mutation is followed by a snapshot write to the autosave
    slot; rejected actions leave both the session and the save untouched.
    """

    def __init__(
        self,
        *,
        save_service: SaveService,
        settings_service: SettingsService,
        rng: random.Random,
        session: GameSession | None = None,
        slot: str = AUTOSAVE_SLOT,
    ) -> None:
        self._saves = save_service
        self._settings = settings_service
        self._rng = rng
        self._slot = slot
        self._settings_config = settings_service.load_settings()
        self._session = session if session is not None else GameSession(self._settings_config)

    @property
    def session(self) -> GameSession:
        return self._session

    @property
    def settings(self) -> GameConfig:
        return self._settings_config

    def can_continue(self) -> bool:
        return self._saves.has_save(self._slot)

    def view(self) -> SessionView:
        return build_session_view(self._session)

    def new_game(self, config: GameConfig | None = None) -> SessionView:
        """Discard the autosave and start placement with current or given settings."""
        self._saves.clear_save(self._slot)
        self._session.start_new_game(config if config is not None else self._settings_config)
        self._autosave()
        return self.view()

    def continue_game(self) -> str | None:
        """Restore the autosave; returns a warning when it could not be used."""
        result = self._saves.load_game(self._slot, fallback_config=self._settings_config)
        self._session = result.session
        return result.warning

    def update_settings(self, config: GameConfig) -> None:
        """Persist settings; they take effect on the next new game."""
        self._settings.save_settings(config)
        self._settings_config = config
        logger.info("settings_saved grid_size=%d roster=%d", config.grid_size, config.roster_size)

    def place_unit(self, kind: UnitKind, row: int, col: int, *, rotated: bool = False) -> PlacementOutcome:
        outcome = self._session.place_unit(kind, row, col, rotated=rotated)
        if outcome.success:
            self._autosave()
        return outcome

    def rotate_unit(self, unit_id: str) -> PlacementOutcome:
        outcome = self._session.rotate_unit(unit_id)
        if outcome.success:
            self._autosave()
        return outcome

    def clear_placement(self) -> PlacementOutcome:
        outcome = self._session.clear_placement()
        if outcome.success:
            self._autosave()
        return outcome

    def auto_place(self) -> AutoPlaceOutcome:
        outcome = self._session.auto_place(self._rng)
        if outcome.accepted:
            self._autosave()
        return outcome

    def advance_placement(self) -> AdvanceOutcome:
        outcome = self._session.advance_placement()
        if outcome.success:
            self._autosave()
        return outcome

    def attack(self, row: int, col: int) -> BattleTurnResult:
        result = self._session.attack(row, col)
        if result.outcome.resolved:
            self._autosave()
        return result

    def _autosave(self) -> None:
        try:
            self._saves.save_game(self._session, self._slot)
        except OSError:
            logger.exception("autosave_failed slot=%s", self._slot)
