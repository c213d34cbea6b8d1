"""Season lookup from fixed calendar boundaries.

Northern hemisphere:
  Winter: Dec 1 - Feb 28/29
  Spring: Mar 1 - May 31
  Summer: Jun 1 - Aug 31
  Autumn: Sep 1 - Nov 30
Southern hemisphere is the opposite season.
"""

from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import Optional, Union


class Season(str, Enum):
    WINTER = "Winter"
    SPRING = "Spring"
    SUMMER = "Summer"
    AUTUMN = "Autumn"


class Hemisphere(str, Enum):
    NORTHERN = "Northern"
    SOUTHERN = "Southern"


OPPOSITE_SEASON = {
    Season.WINTER: Season.SUMMER,
    Season.SUMMER: Season.WINTER,
    Season.SPRING: Season.AUTUMN,
    Season.AUTUMN: Season.SPRING,
}


def parse_hemisphere(value: Optional[str]) -> Hemisphere:
    """Any value starting with "s" (case-insensitive) is Southern, anything else Northern."""
    if isinstance(value, Hemisphere):
        return value
    if value and value.strip().lower().startswith("s"):
        return Hemisphere.SOUTHERN
    return Hemisphere.NORTHERN


def _as_date(value: Union[dt.date, str]) -> dt.date:
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    return dt.date.fromisoformat(value)


def resolve_season(day: Union[dt.date, str], hemisphere: Union[Hemisphere, str] = Hemisphere.NORTHERN) -> Season:
    d = _as_date(day)
    md = d.month * 100 + d.day
    if md >= 1201 or md <= 229:
        north = Season.WINTER
    elif 301 <= md <= 531:
        north = Season.SPRING
    elif 601 <= md <= 831:
        north = Season.SUMMER
    else:
        north = Season.AUTUMN
    if parse_hemisphere(hemisphere) is Hemisphere.NORTHERN:
        return north
    return OPPOSITE_SEASON[north]
