"""
Reading activity rules: check-in XP and daily streaks.
"""

from datetime import date, datetime
from typing import Optional, Union

from readsy.config import settings

# XP and coin values offered when creating challenges
CHALLENGE_XP_OPTIONS = (10, 20, 30, 50, 80, 130, 210, 340, 550)
CHALLENGE_COINS_OPTIONS = (0, 5, 10, 15, 25, 30)


def checkin_xp(
    pages_read: int,
    minutes_spent: int,
    base_xp: Optional[int] = None,
    xp_per_page: Optional[int] = None,
    xp_per_minute: Optional[int] = None,
) -> int:
    """XP earned by a single reading check-in."""
    if pages_read < 0 or minutes_spent < 0:
        raise ValueError("Pages and minutes cannot be negative")
    if base_xp is None:
        base_xp = settings.GAMIFICATION_BASE_XP_PER_CHECKIN
    if xp_per_page is None:
        xp_per_page = settings.GAMIFICATION_XP_PER_PAGE
    if xp_per_minute is None:
        xp_per_minute = settings.GAMIFICATION_XP_PER_MINUTE
    return base_xp + pages_read * xp_per_page + minutes_spent * xp_per_minute


def _as_date(value: Union[date, datetime]) -> date:
    return value.date() if isinstance(value, datetime) else value


def next_streak(
    current_streak: int,
    last_checkin: Optional[Union[date, datetime]],
    today: Union[date, datetime],
) -> int:
    """
    Streak after a check-in made on ``today``.

    Same day keeps the streak, the day after extends it, anything older
    (or no previous check-in) starts over at 1.
    """
    if last_checkin is None:
        return 1
    gap = (_as_date(today) - _as_date(last_checkin)).days
    if gap <= 0:
        return max(current_streak, 1)
    if gap == 1:
        return current_streak + 1
    return 1
