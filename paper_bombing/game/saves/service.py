"""Save-game and settings use cases."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass

from paper_bombing.game.core.config import GameConfig, config_from_payload, config_to_payload
from paper_bombing.game.core.ids import UnitIdSequence
from paper_bombing.game.core.session import GameSession
from paper_bombing.game.saves.repository import SaveRepository
from paper_bombing.game.saves.schema import payload_to_session, session_to_payload

logger = logging.getLogger(__name__)

AUTOSAVE_SLOT = "autosave"
SETTINGS_SLOT = "settings"


@dataclass(frozen=True, slots=True)
class LoadResult:
    """Loaded session, or a fresh one plus the reason the save was discarded."""

    session: GameSession
    warning: str | None = None

    @property
    def restored(self) -> bool:
        return self.warning is None


class SaveService:
    """Snapshot persistence with fall-back-to-setup on bad data."""

    def __init__(self, repository: SaveRepository) -> None:
        self._repository = repository

    def list_saves(self) -> list[str]:
        return self._repository.list_names()

    def has_save(self, slot: str = AUTOSAVE_SLOT) -> bool:
        return self._repository.exists(slot)

    def save_game(self, session: GameSession, slot: str = AUTOSAVE_SLOT) -> None:
        """Persist a full session snapshot."""
        self._repository.save_payload(slot, session_to_payload(session))

    def load_game(
        self,
        slot: str = AUTOSAVE_SLOT,
        *,
        fallback_config: GameConfig | None = None,
        id_sequence: UnitIdSequence | None = None,
    ) -> LoadResult:
        """Restore a session; never raises for missing or malformed data."""
        try:
            payload = self._repository.load_payload(slot)
            session = payload_to_session(payload, id_sequence=id_sequence)
        except FileNotFoundError:
            return LoadResult(GameSession(fallback_config, id_sequence), warning=f"No saved game in '{slot}'.")
        except (OSError, json.JSONDecodeError, UnicodeDecodeError, ValueError) as exc:
            logger.warning("Discarding malformed save '%s': %s", slot, exc)
            return LoadResult(
                GameSession(fallback_config, id_sequence),
                warning=f"Saved game '{slot}' is unreadable and was discarded: {exc}",
            )
        logger.info("save_loaded slot=%s phase=%s turn=%d", slot, session.phase.value, session.turn_count)
        return LoadResult(session)

    def clear_save(self, slot: str = AUTOSAVE_SLOT) -> None:
        self._repository.delete(slot)


class SettingsService:
    """Settings persistence merged over documented defaults."""

    def __init__(self, repository: SaveRepository) -> None:
        self._repository = repository

    def save_settings(self, config: GameConfig) -> None:
        self._repository.save_payload(SETTINGS_SLOT, config_to_payload(config))

    def load_settings(self) -> GameConfig:
        """Load stored settings, falling back to defaults when absent or invalid."""
        try:
            payload = self._repository.load_payload(SETTINGS_SLOT)
        except FileNotFoundError:
            return GameConfig()
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.warning("Ignoring unreadable settings: %s", exc)
            return GameConfig()
        if not isinstance(payload, dict):
            logger.warning("Ignoring settings payload of type %s", type(payload).__name__)
            return GameConfig()
        try:
            return config_from_payload(payload)
        except ValueError as exc:
            logger.warning("Ignoring invalid settings: %s", exc)
            return GameConfig()
