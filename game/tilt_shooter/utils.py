"""
Utility functions for game mechanics
"""

from __future__ import annotations
import itertools
import random
from typing import Optional


def clamp(x: float, lo: float, hi: float) -> float:
    """Clamp value between low and high bounds"""
    return lo if x < lo else hi if x > hi else x


def rects_overlap(ax, ay, aw, ah, bx, by, bw, bh) -> bool:
    """Check if two axis-aligned rectangles overlap (touching edges do not count)"""
    return ax < bx + bw and ax + aw > bx and ay < by + bh and ay + ah > by


def make_rng(seed: Optional[int] = None) -> random.Random:
    """Create an isolated random source; seeded sources give reproducible spawns"""
    return random.Random(seed)


class IdGenerator:
    """Monotonic entity identifiers, unique for the lifetime of a session"""

    def __init__(self, start: int = 1):
        self._counter = itertools.count(start)
        self._last: Optional[int] = None

    def next(self) -> int:
        value = next(self._counter)
        assert self._last is None or value > self._last, "identifier went backwards"
        self._last = value
        return value
