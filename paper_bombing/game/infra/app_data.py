"""App-data directory layout: logs, saves and config under one root."""

from __future__ import annotations

import os
from pathlib import Path

PACKAGE_ROOT = Path(__file__).resolve().parents[2]


def resolve_app_data_root() -> Path:
    """``PAPER_BOMBING_APP_DATA_DIR`` (relative to the package root) or ``<package>/appdata``."""
    configured = os.getenv("PAPER_BOMBING_APP_DATA_DIR", "").strip()
    if not configured:
        return PACKAGE_ROOT / "appdata"
    return _under(PACKAGE_ROOT, configured)


def resolve_logs_dir() -> Path:
    return resolve_app_data_root() / "logs"


def resolve_saves_dir() -> Path:
    return resolve_app_data_root() / "saves"


def resolve_config_dir() -> Path:
    """Directory holding env files and stored settings."""
    return resolve_app_data_root() / "config"


def ensure_app_data_dirs() -> dict[str, Path]:
    """Create app-data directories and return resolved paths."""
    paths = {
        "root": resolve_app_data_root(),
        "logs": resolve_logs_dir(),
        "saves": resolve_saves_dir(),
        "config": resolve_config_dir(),
    }
    for path in paths.values():
        path.mkdir(parents=True, exist_ok=True)
    return paths


def apply_runtime_path_defaults() -> dict[str, Path]:
    """Pin ``PAPER_BOMBING_LOG_DIR`` and ``PAPER_BOMBING_SAVES_DIR`` to absolute, existing directories.

    Unset variables take the app-data defaults; relative ones are resolved
    against the app-data root.
    """
    paths = ensure_app_data_dirs()
    for key, var_name in (("logs", "PAPER_BOMBING_LOG_DIR"), ("saves", "PAPER_BOMBING_SAVES_DIR")):
        raw = os.getenv(var_name, "").strip()
        directory = _under(paths["root"], raw) if raw else paths[key]
        directory.mkdir(parents=True, exist_ok=True)
        os.environ[var_name] = str(directory)
        paths[key] = directory
    return paths


def _under(base: Path, raw: str) -> Path:
    candidate = Path(raw)
    return candidate if candidate.is_absolute() else base / candidate
