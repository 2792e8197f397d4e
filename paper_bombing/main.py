"""Application entry point: bootstrap infra and resume or start a game headlessly."""

import logging
import random

from paper_bombing.game.app.services.game_flow import GameFlowService
from paper_bombing.game.infra.app_data import apply_runtime_path_defaults
from paper_bombing.game.infra.config import apply_env_overrides, load_default_env_files
from paper_bombing.game.infra.logging import setup_logging, shutdown_logging
from paper_bombing.game.saves.repository import SaveRepository
from paper_bombing.game.saves.service import SaveService, SettingsService

logger = logging.getLogger(__name__)


def main() -> None:
    """Resume the autosave (or start a new game) and log its status."""
    load_default_env_files()
    paths = apply_runtime_path_defaults()
    setup_logging()
    logger.info(
        "app_data_paths root=%s logs=%s saves=%s config=%s",
        paths["root"],
        paths["logs"],
        paths["saves"],
        paths["config"],
    )
    flow = GameFlowService(
        save_service=SaveService(SaveRepository(paths["saves"])),
        settings_service=SettingsService(SaveRepository(paths["config"])),
        rng=random.Random(),
    )
    if flow.can_continue():
        warning = flow.continue_game()
        if warning is not None:
            logger.warning("continue_failed reason=%s", warning)
            flow.new_game(apply_env_overrides(flow.settings))
    else:
        flow.new_game(apply_env_overrides(flow.settings))

    view = flow.view()
    logger.info(
        "session phase=%s active_player=%d turn=%d units_left=%s status=%s",
        view.phase.value,
        view.active_player.value,
        view.turn_count,
        {player.value: left for player, left in view.units_left.items()},
        view.status,
    )
    shutdown_logging()


if __name__ == "__main__":
    main()
