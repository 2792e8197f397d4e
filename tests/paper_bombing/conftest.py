from __future__ import annotations

import random
from collections.abc import Callable

import pytest

from paper_bombing.game.core.config import GameConfig, UnitSpec
from paper_bombing.game.core.models import Phase, UnitKind
from paper_bombing.game.core.session import GameSession
from paper_bombing.game.saves.repository import SaveRepository
from paper_bombing.game.saves.service import SaveService, SettingsService


def make_config(grid_size: int = 6, **counts: int) -> GameConfig:
    """Default footprints and health with only the given kinds in the roster."""
    base = GameConfig()
    units = {
        kind: UnitSpec(counts.get(kind.value, 0), spec.health, spec.width, spec.height)
        for kind, spec in base.units.items()
    }
    return GameConfig(grid_size=grid_size, units=units)


def start_battle(session: GameSession) -> GameSession:
    """Place soldier at (0, 0) and tank at (2, 0) for both players, then advance."""
    session.start_new_game()
    for _ in range(2):
        session.place_unit(UnitKind.SOLDIER, 0, 0)
        session.place_unit(UnitKind.TANK, 2, 0)
        session.advance_placement()
    assert session.phase is Phase.BATTLE
    return session


@pytest.fixture
def small_config() -> GameConfig:
    return make_config(grid_size=6, soldier=1, tank=1)


@pytest.fixture
def config_factory() -> Callable[..., GameConfig]:
    return make_config


@pytest.fixture
def seeded_rng() -> random.Random:
    return random.Random(1337)


@pytest.fixture
def session_in_battle(small_config: GameConfig) -> GameSession:
    return start_battle(GameSession(small_config))


@pytest.fixture
def save_service(tmp_path) -> SaveService:
    return SaveService(SaveRepository(tmp_path / "saves"))


@pytest.fixture
def settings_service(tmp_path) -> SettingsService:
    return SettingsService(SaveRepository(tmp_path / "config"))
