from __future__ import annotations

import os
from pathlib import Path

from paper_bombing.game.infra.app_data import (
    apply_runtime_path_defaults,
    ensure_app_data_dirs,
    resolve_app_data_root,
)


def test_resolve_app_data_root_prefers_configured_dir(monkeypatch, tmp_path) -> None:
    custom = tmp_path / "custom_root"
    monkeypatch.setenv("PAPER_BOMBING_APP_DATA_DIR", str(custom))
    assert resolve_app_data_root() == custom


def test_resolve_app_data_root_defaults_to_game_root_appdata(monkeypatch) -> None:
    monkeypatch.delenv("PAPER_BOMBING_APP_DATA_DIR", raising=False)
    root = resolve_app_data_root()
    assert root.name == "appdata"
    assert root.parent.name == "paper_bombing"


def test_ensure_app_data_dirs_creates_layout(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("PAPER_BOMBING_APP_DATA_DIR", str(tmp_path / "data"))
    paths = ensure_app_data_dirs()
    assert set(paths) == {"root", "logs", "saves", "config"}
    assert all(path.is_dir() for path in paths.values())


def test_apply_runtime_path_defaults_sets_unified_paths(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("PAPER_BOMBING_APP_DATA_DIR", str(tmp_path / "paper_data"))
    monkeypatch.delenv("PAPER_BOMBING_LOG_DIR", raising=False)
    monkeypatch.delenv("PAPER_BOMBING_SAVES_DIR", raising=False)

    paths = apply_runtime_path_defaults()

    assert Path(paths["logs"]).name == "logs"
    assert Path(paths["saves"]).name == "saves"
    assert Path(paths["config"]).exists()
    assert os.environ["PAPER_BOMBING_LOG_DIR"] == str(paths["logs"])
    assert os.environ["PAPER_BOMBING_SAVES_DIR"] == str(paths["saves"])


def test_apply_runtime_path_defaults_normalizes_relative_env_paths(monkeypatch, tmp_path) -> None:
    root = tmp_path / "appdata_root"
    monkeypatch.setenv("PAPER_BOMBING_APP_DATA_DIR", str(root))
    monkeypatch.setenv("PAPER_BOMBING_LOG_DIR", "run_logs")
    monkeypatch.setenv("PAPER_BOMBING_SAVES_DIR", "slots")

    paths = apply_runtime_path_defaults()

    assert Path(paths["logs"]) == root / "run_logs"
    assert Path(paths["saves"]) == root / "slots"
    assert Path(paths["logs"]).exists()
    assert Path(paths["saves"]).exists()
