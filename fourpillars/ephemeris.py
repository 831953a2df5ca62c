"""
Solar-to-pillar calendar converter backed by Swiss Ephemeris.

This is the default calendar capability. It is loaded lazily by
lunar.load_capability like any third-party converter and exposes the
same entry point, solar_to_lunar(), with both calling conventions:

    solar_to_lunar(datetime)           -> all four pillars
    solar_to_lunar(year, month, day)   -> year/month/day pillars (no hour)

Labels are returned under GanZhiYear / GanZhiMonth / GanZhiDay /
GanZhiHour, the field names lunar calendar libraries commonly use.
"""

from datetime import datetime, timezone
from typing import Optional, Union

import swisseph as swe

from fourpillars.bazi import day_pillar, hour_pillar, month_pillar, year_pillar
from fourpillars.settings import get_settings

_ephe_path = get_settings().ephe_path
if _ephe_path:
    swe.set_ephe_path(_ephe_path)
    _FLAGS = swe.FLG_SWIEPH
else:
    _FLAGS = swe.FLG_MOSEPH


# ============================================================
# SOLAR LONGITUDE
# ============================================================

def sun_longitude(jd_ut: float) -> float:
    """Sun's tropical ecliptic longitude in degrees at a UT Julian Day."""
    result, _flag = swe.calc_ut(jd_ut, swe.SUN, _FLAGS)
    return result[0] % 360.0


def sun_longitude_to_month_branch_index(sun_lon: float) -> int:
    """
    Map Sun's ecliptic longitude to BaZi month branch index.

    Solar term Jie boundaries mark BaZi month transitions:
      315° (Li Chun)    → Yin (Tiger, index 2)
      345° (Jing Zhe)   → Mao (Rabbit, index 3)
       15° (Qing Ming)  → Chen (Dragon, index 4)
      ...
      285° (Xiao Han)   → Chou (Ox, index 1)
    """
    adjusted = (sun_lon - 315) % 360
    month_num = int(adjusted / 30)
    branch_indices = [2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 0, 1]
    return branch_indices[month_num]


def bazi_year(year: int, month: int, sun_lon: float) -> int:
    """
    Gregorian year -> BaZi year.

    The BaZi year starts at Li Chun (Sun at 315°). In January and early
    February the Sun is between the winter solstice (270°) and Li Chun,
    which still belongs to the previous year.
    """
    if month <= 2 and 270.0 <= sun_lon < 315.0:
        return year - 1
    return year


# ============================================================
# CONVERSION
# ============================================================

def _pillars(year: int, month: int, day: int, jd_ut: float,
             hour: Optional[int] = None) -> dict:
    sun_lon = sun_longitude(jd_ut)

    yp = year_pillar(bazi_year(year, month, sun_lon))
    mp = month_pillar(yp.stem.index, sun_longitude_to_month_branch_index(sun_lon))
    dp = day_pillar(int(swe.julday(year, month, day, 12.0)))

    result = {
        "GanZhiYear": yp.label,
        "GanZhiMonth": mp.label,
        "GanZhiDay": dp.label,
    }
    if hour is not None:
        result["GanZhiHour"] = hour_pillar(dp.stem.index, hour).label
    return result


def solar_to_lunar(value: Union[datetime, int], month: Optional[int] = None,
                   day: Optional[int] = None) -> dict:
    """
    Convert a solar date to four pillar labels.

    Args:
        value: a datetime (wall-clock fields are used for the day and hour
            pillars, its UTC moment for the Sun's position), or the year
            when month and day are given as well
        month, day: required with an integer year

    Returns:
        dict with GanZhiYear, GanZhiMonth, GanZhiDay and, for datetimes,
        GanZhiHour
    """
    if isinstance(value, datetime):
        utc = value.astimezone(timezone.utc) if value.tzinfo else value
        jd_ut = swe.julday(utc.year, utc.month, utc.day,
                           utc.hour + utc.minute / 60.0)
        return _pillars(value.year, value.month, value.day, jd_ut, hour=value.hour)

    if isinstance(value, int) and month is not None and day is not None:
        # No time of day: take the Sun at noon UT
        jd_ut = swe.julday(value, month, day, 12.0)
        return _pillars(value, month, day, jd_ut)

    raise ValueError(f"solar_to_lunar expects a datetime or (year, month, day), got {value!r}")


# ============================================================
# TEST / VERIFICATION
# ============================================================

if __name__ == "__main__":
    print("=" * 60)
    print("Sample: March 15, 1990, 10:30 AM")
    print("Expected: 庚午 己卯 己卯 己巳 (Geng Wu, Ji Mao, Ji Mao, Ji Si)")
    print("=" * 60)
    result = solar_to_lunar(datetime(1990, 3, 15, 10, 30))
    for key, label in result.items():
        print(f"  {key:12s}: {label}")
