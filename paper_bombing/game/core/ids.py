"""Deterministic unit identifier generation."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable

type UnitIdFactory = Callable[[], str]


class UnitIdSequence:
    """Monotonic ``<prefix><n>`` identifier generator."""

    def __init__(self, start: int = 1, prefix: str = "u") -> None:
        if start < 1:
            raise ValueError("Id sequence must start at 1 or above.")
        self._next = start
        self._prefix = prefix
        self._pattern = re.compile(rf"^{re.escape(prefix)}(\d+)$")

    @property
    def prefix(self) -> str:
        return self._prefix

    def peek(self) -> int:
        return self._next

    def __call__(self) -> str:
        value = f"{self._prefix}{self._next}"
        self._next += 1
        return value

    def reset(self, start: int = 1) -> None:
        self._next = start

    def advance_past(self, existing: Iterable[str]) -> None:
        """Move the counter beyond every numeric id already in use."""
        highest = 0
        for unit_id in existing:
            match = self._pattern.match(unit_id)
            if match is not None:
                highest = max(highest, int(match.group(1)))
        self._next = max(self._next, highest + 1)
