"""
XP to level mapping.

A curve is a table of thresholds where ``thresholds[i]`` is the XP needed to
reach level ``i + 1``. The first threshold is always 0 and the last one is
the maximum XP; reaching it means reaching the maximum level.
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import List, Tuple

from readsy.config import settings

FIBONACCI = "fibonacci"
LINEAR = "linear"
CURVE_KINDS = (FIBONACCI, LINEAR)

# Seeds of the default table: 0, 100, 200, then each step is the sum of the previous two
_FIBONACCI_SEEDS = (0, 100, 200)
# Coins for reaching level n (index = level); continues as c(n) = c(n-1) + c(n-2)
_LEVEL_UP_COIN_SEEDS = (0, 5, 5)


@dataclass(frozen=True)
class LevelProgress:
    """Where a given amount of XP sits on a level curve."""

    xp: int
    level: int
    max_level: int
    level_start_xp: int
    xp_into_level: int
    xp_required: int
    xp_to_next_level: int
    progress: float

    @property
    def is_max_level(self) -> bool:
        return self.level >= self.max_level

    def to_dict(self) -> dict:
        return {
            "xp": self.xp,
            "level": self.level,
            "max_level": self.max_level,
            "level_start_xp": self.level_start_xp,
            "xp_into_level": self.xp_into_level,
            "xp_required": self.xp_required,
            "xp_to_next_level": self.xp_to_next_level,
            "progress": self.progress,
            "is_max_level": self.is_max_level,
        }


class LevelCurve:
    """Monotonic XP -> level mapping bounded by a maximum level and XP."""

    def __init__(self, thresholds):
        thresholds = tuple(int(t) for t in thresholds)
        if len(thresholds) < 2:
            raise ValueError("A level curve needs at least two levels")
        if thresholds[0] != 0:
            raise ValueError("Level 1 must start at 0 XP")
        if any(b <= a for a, b in zip(thresholds, thresholds[1:])):
            raise ValueError("Level thresholds must be strictly increasing")
        self.thresholds: Tuple[int, ...] = thresholds

    @classmethod
    def fibonacci(cls, max_level: int, max_xp: int) -> "LevelCurve":
        raw = list(_FIBONACCI_SEEDS[:max_level])
        while len(raw) < max_level:
            raw.append(raw[-1] + raw[-2])
        if raw[-1] == max_xp:
            return cls(raw)
        scale = max_xp / raw[-1]
        scaled = [round(value * scale) for value in raw]
        # Rounding can collapse neighbours on small maxima
        for i in range(1, len(scaled)):
            scaled[i] = max(scaled[i], scaled[i - 1] + 1)
        if scaled[-1] != max_xp:
            raise ValueError(f"Cannot fit {max_level} levels into {max_xp} XP")
        return cls(scaled)

    @classmethod
    def linear(cls, max_level: int, max_xp: int) -> "LevelCurve":
        if max_xp < max_level - 1:
            raise ValueError(f"Cannot fit {max_level} levels into {max_xp} XP")
        step = max_xp / (max_level - 1)
        return cls(round(i * step) for i in range(max_level))

    @classmethod
    def from_config(cls, kind: str, max_level: int, max_xp: int) -> "LevelCurve":
        if max_level < 2:
            raise ValueError("GAMIFICATION_MAX_LEVEL must be at least 2")
        kind = kind.lower()
        if kind == FIBONACCI:
            return cls.fibonacci(max_level, max_xp)
        if kind == LINEAR:
            return cls.linear(max_level, max_xp)
        raise ValueError(f"Unknown level curve '{kind}', expected one of {CURVE_KINDS}")

    @property
    def max_level(self) -> int:
        return len(self.thresholds)

    @property
    def max_xp(self) -> int:
        return self.thresholds[-1]

    def xp_for_level(self, level: int) -> int:
        """XP needed to reach ``level``."""
        if not 1 <= level <= self.max_level:
            raise ValueError(f"Level must be between 1 and {self.max_level}")
        return self.thresholds[level - 1]

    def level_for_xp(self, xp: int) -> int:
        if xp < 0:
            raise ValueError("XP cannot be negative")
        level = 1
        while level < self.max_level and xp >= self.thresholds[level]:
            level += 1
        return level

    def progress(self, xp: int) -> LevelProgress:
        level = self.level_for_xp(xp)
        start = self.thresholds[level - 1]
        if level >= self.max_level:
            return LevelProgress(
                xp=xp,
                level=level,
                max_level=self.max_level,
                level_start_xp=start,
                xp_into_level=xp - start,
                xp_required=0,
                xp_to_next_level=0,
                progress=1.0,
            )
        span = self.thresholds[level] - start
        into = xp - start
        return LevelProgress(
            xp=xp,
            level=level,
            max_level=self.max_level,
            level_start_xp=start,
            xp_into_level=into,
            xp_required=span,
            xp_to_next_level=span - into,
            progress=into / span,
        )

    def __repr__(self) -> str:
        return f"LevelCurve({list(self.thresholds)!r})"


def level_up_coins(level: int) -> int:
    """Coins credited when a user reaches ``level``."""
    if level < 0:
        raise ValueError("Level cannot be negative")
    coins = list(_LEVEL_UP_COIN_SEEDS)
    while len(coins) <= level:
        coins.append(coins[-1] + coins[-2])
    return coins[level]


def level_rewards(curve: LevelCurve) -> List[dict]:
    """Reward table: XP required and coins for every level of the curve."""
    return [
        {
            "level": level,
            "xp_required": curve.xp_for_level(level),
            "coins_rewarded": level_up_coins(level),
        }
        for level in range(1, curve.max_level + 1)
    ]


@lru_cache()
def get_level_curve() -> LevelCurve:
    """Curve built from the gamification settings."""
    return LevelCurve.from_config(
        settings.GAMIFICATION_LEVEL_CURVE,
        settings.GAMIFICATION_MAX_LEVEL,
        settings.GAMIFICATION_MAX_XP,
    )
