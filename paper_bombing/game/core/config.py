"""Game configuration: grid size and per-kind unit roster."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace

from paper_bombing.game.core.models import UNIT_KIND_ORDER, UnitKind

DEFAULT_GRID_SIZE = 12
MIN_GRID_SIZE = 6
MAX_GRID_SIZE = 20
DEFAULT_DOT_SIZE = 14
MIN_DOT_SIZE = 6
MAX_DOT_SIZE = 40


@dataclass(frozen=True, slots=True)
class UnitSpec:
    """Configured count, health and footprint for one unit kind."""

    count: int
    health: int
    width: int
    height: int

    @property
    def area(self) -> int:
        return self.width * self.height


DEFAULT_UNIT_SPECS: dict[UnitKind, UnitSpec] = {
    UnitKind.SOLDIER: UnitSpec(count=4, health=1, width=1, height=1),
    UnitKind.TANK: UnitSpec(count=3, health=2, width=2, height=1),
    UnitKind.ARTILLERY: UnitSpec(count=2, health=2, width=3, height=1),
    UnitKind.BUNKER: UnitSpec(count=1, health=3, width=2, height=2),
    UnitKind.PLANE: UnitSpec(count=1, health=2, width=1, height=3),
}


@dataclass(frozen=True, slots=True)
class GameConfig:
    """Validated game settings shared by both players."""

    grid_size: int = DEFAULT_GRID_SIZE
    units: dict[UnitKind, UnitSpec] = field(default_factory=lambda: dict(DEFAULT_UNIT_SPECS))
    dot_size: int = DEFAULT_DOT_SIZE
    preview_enabled: bool = True
    sound_enabled: bool = True

    @property
    def roster_size(self) -> int:
        """Total number of units each player must place."""
        return sum(spec.count for spec in self.units.values())

    def spec_for(self, kind: UnitKind) -> UnitSpec:
        return self.units[kind]

    def with_grid_size(self, grid_size: int) -> GameConfig:
        return replace(self, grid_size=_bounded("grid_size", grid_size, MIN_GRID_SIZE, MAX_GRID_SIZE))


def config_to_payload(config: GameConfig) -> dict[str, object]:
    """Convert configuration to a JSON-serializable payload."""
    return {
        "grid_size": config.grid_size,
        "dot_size": config.dot_size,
        "preview_enabled": config.preview_enabled,
        "sound_enabled": config.sound_enabled,
        "units": {
            kind.value: {
                "count": spec.count,
                "health": spec.health,
                "width": spec.width,
                "height": spec.height,
            }
            for kind, spec in config.units.items()
        },
    }


def config_from_payload(payload: Mapping[str, object] | None) -> GameConfig:
    """Build configuration from a possibly partial payload.

    Missing keys fall back to defaults; present values are validated and a
    ``ValueError`` is raised when one has the wrong type or is out of range.
    Unknown keys and unknown unit kinds are ignored.
    """
    if payload is None:
        return GameConfig()
    if not isinstance(payload, Mapping):
        raise ValueError("Settings must be an object.")

    grid_size = _bounded(
        "grid_size", _int_field(payload, "grid_size", DEFAULT_GRID_SIZE), MIN_GRID_SIZE, MAX_GRID_SIZE
    )
    dot_size = _bounded(
        "dot_size", _int_field(payload, "dot_size", DEFAULT_DOT_SIZE), MIN_DOT_SIZE, MAX_DOT_SIZE
    )
    preview_enabled = _bool_field(payload, "preview_enabled", True)
    sound_enabled = _bool_field(payload, "sound_enabled", True)

    raw_units = payload.get("units", {})
    if raw_units is None:
        raw_units = {}
    if not isinstance(raw_units, Mapping):
        raise ValueError("Settings units must be an object.")

    units: dict[UnitKind, UnitSpec] = {}
    for kind in UNIT_KIND_ORDER:
        default = DEFAULT_UNIT_SPECS[kind]
        raw_spec = raw_units.get(kind.value)
        if raw_spec is None:
            units[kind] = default
            continue
        if not isinstance(raw_spec, Mapping):
            raise ValueError(f"Settings for unit '{kind.value}' must be an object.")
        units[kind] = UnitSpec(
            count=_bounded(f"{kind.value}.count", _int_field(raw_spec, "count", default.count), 0, None),
            health=_bounded(f"{kind.value}.health", _int_field(raw_spec, "health", default.health), 1, None),
            width=_bounded(f"{kind.value}.width", _int_field(raw_spec, "width", default.width), 1, grid_size),
            height=_bounded(f"{kind.value}.height", _int_field(raw_spec, "height", default.height), 1, grid_size),
        )
        if units[kind].health > units[kind].area:
            raise ValueError(f"Setting '{kind.value}.health' exceeds its footprint of {units[kind].area} cells.")

    config = GameConfig(
        grid_size=grid_size,
        units=units,
        dot_size=dot_size,
        preview_enabled=preview_enabled,
        sound_enabled=sound_enabled,
    )
    if config.roster_size < 1:
        raise ValueError("Roster must contain at least one unit.")
    return config


def _int_field(payload: Mapping[str, object], key: str, default: int) -> int:
    raw = payload.get(key, default)
    if isinstance(raw, bool) or not isinstance(raw, (int, str)):
        raise ValueError(f"Setting '{key}' must be int-compatible.")
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"Setting '{key}' must be int-compatible.") from exc


def _bool_field(payload: Mapping[str, object], key: str, default: bool) -> bool:
    raw = payload.get(key, default)
    if not isinstance(raw, bool):
        raise ValueError(f"Setting '{key}' must be a boolean.")
    return raw


def _bounded(name: str, value: int, low: int, high: int | None) -> int:
    if value < low or (high is not None and value > high):
        upper = "" if high is None else f"..{high}"
        raise ValueError(f"Setting '{name}' out of range ({low}{upper}): {value}.")
    return value
