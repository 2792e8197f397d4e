"""Env-file loading and environment overrides for game settings."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from paper_bombing.game.core.config import GameConfig
from paper_bombing.game.infra.app_data import resolve_config_dir

logger = logging.getLogger(__name__)

ENV_FILE_NAMES = (".env", ".env.local")


def parse_env_lines(lines: Iterable[str]) -> dict[str, str]:
    """Parse ``KEY=VALUE`` lines; blanks, comments and lines without ``=`` are skipped.

    An optional ``export`` prefix is accepted and matching outer quotes are
    stripped from values.
    """
    values: dict[str, str] = {}
    for raw_line in lines:
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = (part.strip() for part in line.split("=", 1))
        key = key.removeprefix("export ").strip()
        if not key:
            continue
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"":
            value = value[1:-1]
        values[key] = value
    return values


def load_env_file(path: Path | str, *, override_existing: bool = True) -> dict[str, str]:
    """Apply one env file to ``os.environ`` and return the pairs it applied.

    A missing file is skipped.
    """
    env_path = Path(path)
    if not env_path.is_file():
        return {}
    applied: dict[str, str] = {}
    for key, value in parse_env_lines(env_path.read_text(encoding="utf-8").splitlines()).items():
        if override_existing or key not in os.environ:
            os.environ[key] = value
            applied[key] = value
    logger.debug("env_file_loaded path=%s keys=%d", env_path, len(applied))
    return applied


def load_default_env_files(
    *, override_existing: bool = True, paths: Iterable[Path | str] | None = None
) -> None:
    """Load ``.env`` then ``.env.local`` from the app-data config directory.

    Later files win when ``override_existing`` is set.
    """
    if paths is None:
        config_dir = resolve_config_dir()
        paths = [config_dir / name for name in ENV_FILE_NAMES]
    for path in paths:
        load_env_file(path, override_existing=override_existing)


def apply_env_overrides(config: GameConfig) -> GameConfig:
    """Apply ``PAPER_BOMBING_GRID_SIZE`` to loaded settings when set and valid."""
    raw = os.getenv("PAPER_BOMBING_GRID_SIZE", "").strip()
    if not raw:
        return config
    try:
        return config.with_grid_size(int(raw))
    except ValueError as exc:
        logger.warning("Ignoring PAPER_BOMBING_GRID_SIZE=%r: %s", raw, exc)
        return config
