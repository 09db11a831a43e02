"""
Gamification rules: levels, coins, streaks and seasons.
"""

from readsy.gamification.leveling import (
    LevelCurve,
    LevelProgress,
    get_level_curve,
    level_rewards,
    level_up_coins,
)
from readsy.gamification.activity import (
    CHALLENGE_COINS_OPTIONS,
    CHALLENGE_XP_OPTIONS,
    checkin_xp,
    next_streak,
)
from readsy.gamification.seasons import SeasonWindow, next_season, season_for

__all__ = [
    "LevelCurve",
    "LevelProgress",
    "get_level_curve",
    "level_rewards",
    "level_up_coins",
    "CHALLENGE_COINS_OPTIONS",
    "CHALLENGE_XP_OPTIONS",
    "checkin_xp",
    "next_streak",
    "SeasonWindow",
    "next_season",
    "season_for",
]
