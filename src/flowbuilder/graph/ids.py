"""Collision-resistant identifiers for tasks and actions."""

from __future__ import annotations

import time
from collections.abc import Callable

_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def _base36(value: int) -> str:
    if value < 0:
        raise ValueError(f"Cannot encode negative value: {value}")
    if value == 0:
        return "0"
    out: list[str] = []
    while value:
        value, rem = divmod(value, 36)
        out.append(_DIGITS[rem])
    return "".join(reversed(out))


class IdGenerator:
    """Generate ids unique within one process.

    Each id is ``prefix + base36(wall-clock ms) + base36(counter)``. The counter
    starts at 1 and strictly increases on every call, so two calls never return
    the same string even when the clock does not advance. Ids are not
    guaranteed unique across independent processes.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._seq = 1

    @property
    def counter(self) -> int:
        """Value the next call will encode."""

        return self._seq

    def generate(self, prefix: str = "n") -> str:
        seq = self._seq
        self._seq += 1
        millis = int(self._clock() * 1000)
        return f"{prefix}{_base36(millis)}{_base36(seq)}"
