"""Persistence layer for saved games and settings."""

from __future__ import annotations

import json
from pathlib import Path


class SaveRepository:
    """JSON file repository keyed by slot name."""

    def __init__(self, root: Path) -> None:
        self._root = root
        self._root.mkdir(parents=True, exist_ok=True)

    @property
    def root(self) -> Path:
        return self._root

    def list_names(self) -> list[str]:
        """List available slot names."""
        return sorted((path.stem for path in self._root.glob("*.json")), key=str.lower)

    def exists(self, name: str) -> bool:
        return self._path_for(name).exists()

    def load_payload(self, name: str) -> object:
        """Load a slot payload; raises ``FileNotFoundError`` for a missing slot."""
        path = self._path_for(name)
        if not path.exists():
            raise FileNotFoundError(f"Save '{name}' not found.")
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)

    def save_payload(self, name: str, payload: dict[str, object]) -> Path:
        """Write a slot payload, replacing any previous content."""
        path = self._path_for(name)
        with path.open("w", encoding="utf-8") as handle:
            json.dump(payload, handle, indent=2)
        return path

    def delete(self, name: str) -> None:
        """Delete a slot if it exists."""
        path = self._path_for(name)
        if path.exists():
            path.unlink()

    def _path_for(self, name: str) -> Path:
        return self._root / f"{_normalize_for_filename(_validate_name(name))}.json"


def _validate_name(name: str) -> str:
    cleaned = name.strip()
    if not cleaned:
        raise ValueError("Save name cannot be empty.")
    return cleaned


def _normalize_for_filename(name: str) -> str:
    chars: list[str] = []
    for char in name:
        if char.isalnum() or char in {"-", "_"}:
            chars.append(char)
        else:
            chars.append("_")
    normalized = "".join(chars).strip("_")
    return normalized or "save"
