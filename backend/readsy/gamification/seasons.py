"""
Season calendar.

Seasons follow the astronomical seasons of the year:

    Spring  Mar 21 - Jun 21
    Summer  Jun 21 - Sep 23
    Fall    Sep 23 - Dec 21
    Winter  Dec 21 - Mar 21 (next year)

A season is named after the year it starts in, so January belongs to the
previous year's Winter.
"""

from dataclasses import dataclass
from datetime import date

# (name, display name, start (month, day), end (month, day))
_SEASONS = (
    ("Spring", "Spring", (3, 21), (6, 21)),
    ("Summer", "Summer", (6, 21), (9, 23)),
    ("Fall", "Fall", (9, 23), (12, 21)),
)
_WINTER_START = (12, 21)
_WINTER_END = (3, 21)


@dataclass(frozen=True)
class SeasonWindow:
    name: str
    display_name: str
    start_date: date
    end_date: date

    def contains(self, day: date) -> bool:
        """End date is exclusive; it is the next season's start."""
        return self.start_date <= day < self.end_date


def season_for(day: date) -> SeasonWindow:
    """Season that contains ``day``."""
    year = day.year
    for name, display, (sm, sd), (em, ed) in _SEASONS:
        window = SeasonWindow(
            name=f"{year}-{name}",
            display_name=f"{display} {year}",
            start_date=date(year, sm, sd),
            end_date=date(year, em, ed),
        )
        if window.contains(day):
            return window
    start_year = year if (day.month, day.day) >= _WINTER_START else year - 1
    return SeasonWindow(
        name=f"{start_year}-Winter",
        display_name=f"Winter {start_year}",
        start_date=date(start_year, *_WINTER_START),
        end_date=date(start_year + 1, *_WINTER_END),
    )


def next_season(window: SeasonWindow) -> SeasonWindow:
    """Season that starts when ``window`` ends."""
    return season_for(window.end_date)
