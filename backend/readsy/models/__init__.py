"""
Database models for the Readsy API.

All SQLAlchemy models are imported here so they register with Base.metadata.
"""

from readsy.models.user import User
from readsy.models.season import Season, SeasonReward
from readsy.models.leaderboard import LeaderboardEntry
from readsy.models.achievement import Achievement, UserAchievement

__all__ = [
    "User",
    "Season",
    "SeasonReward",
    "LeaderboardEntry",
    "Achievement",
    "UserAchievement",
]
