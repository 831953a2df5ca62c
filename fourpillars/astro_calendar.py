"""
Calendar utilities for profile calculations.
Handles birth-year validation, date/time/offset parsing and
the conversion of wall-clock input into an absolute Instant.

All arithmetic here is integer day counting, so out-of-range fields
(month 13, day 0, hour 25) carry into the neighbouring unit instead
of raising.
"""

import re
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

import structlog

log = structlog.get_logger(__name__)

MIN_YEAR = 1000
MAX_YEAR = 9999

SECONDS_PER_DAY = 86400


# ============================================================
# CIVIL DAY ARITHMETIC
# ============================================================

def days_from_civil(year: int, month: int, day: int) -> int:
    """
    Days since 1970-01-01 for a proleptic Gregorian date.

    Month overflow carries into the year and day overflow carries into
    the month, so days_from_civil(2000, 13, 1) == days_from_civil(2001, 1, 1)
    and days_from_civil(2000, 3, 0) is the last day of February.
    """
    year += (month - 1) // 12
    month = (month - 1) % 12 + 1

    # Count from March so the leap day is the last day of the year
    y = year - 1 if month <= 2 else year
    era = y // 400
    yoe = y - era * 400
    mp = (month + 9) % 12
    doy = (153 * mp + 2) // 5
    doe = yoe * 365 + yoe // 4 - yoe // 100 + doy
    return era * 146097 + doe - 719468 + (day - 1)


def civil_from_days(days: int) -> tuple[int, int, int]:
    """Inverse of days_from_civil: (year, month, day) for a day count."""
    z = days + 719468
    era = z // 146097
    doe = z - era * 146097
    yoe = (doe - doe // 1460 + doe // 36524 - doe // 146096) // 365
    doy = doe - (365 * yoe + yoe // 4 - yoe // 100)
    mp = (5 * doy + 2) // 153
    day = doy - (153 * mp + 2) // 5 + 1
    month = mp + 3 if mp < 10 else mp - 9
    year = yoe + era * 400 + (1 if month <= 2 else 0)
    return year, month, day


# ============================================================
# INSTANT
# ============================================================

@dataclass(frozen=True)
class Instant:
    """An absolute point in time, in whole POSIX seconds. Carries no offset."""

    timestamp: int

    def utc_fields(self) -> tuple[int, int, int, int, int]:
        """(year, month, day, hour, minute) in UTC. Never raises."""
        days, seconds = divmod(self.timestamp, SECONDS_PER_DAY)
        year, month, day = civil_from_days(days)
        return year, month, day, seconds // 3600, (seconds % 3600) // 60

    def local_datetime(self) -> datetime:
        """Aware datetime in the host timezone."""
        return datetime.fromtimestamp(self.timestamp, tz=timezone.utc).astimezone()

    def local_date(self) -> tuple[int, int, int]:
        """
        (year, month, day) of this instant in the host timezone.

        Falls back to the UTC calendar when the platform cannot represent
        the instant as a datetime.
        """
        try:
            local = self.local_datetime()
        except (OverflowError, ValueError, OSError):
            return self.utc_fields()[:3]
        return local.year, local.month, local.day

    def isoformat(self) -> str:
        year, month, day, hour, minute = self.utc_fields()
        return f"{year:04d}-{month:02d}-{day:02d}T{hour:02d}:{minute:02d}:00Z"


# ============================================================
# PARSING
# ============================================================

def _split_ints(text: str, sep: str) -> list[int]:
    """Split text on sep and parse each non-blank part as an int."""
    parts = []
    for part in (text or "").split(sep):
        part = part.strip()
        parts.append(int(part) if part else 0)
    return parts


def parse_date(date_text: str) -> tuple[int, int, int]:
    """Parse 'YYYY-MM-DD' into (year, month, day). Missing parts default to 1."""
    parts = _split_ints(date_text, "-")
    year = parts[0]
    month = parts[1] if len(parts) > 1 else 1
    day = parts[2] if len(parts) > 2 else 1
    return year, month, day


def parse_time(time_text: Optional[str]) -> tuple[int, int]:
    """Parse 'HH:MM' into (hour, minute). Missing hour or minute is 0."""
    parts = _split_ints(time_text or "", ":")
    hour = parts[0] if parts else 0
    minute = parts[1] if len(parts) > 1 else 0
    return hour, minute


def parse_utc_offset(offset_text: str) -> int:
    """
    Parse a signed offset like '+08:00' or '-05:30' into minutes east of UTC.

    The sign is mandatory. Minutes are optional ('+8' is 480).
    """
    text = offset_text.strip()
    if not text or text[0] not in "+-":
        raise ValueError(f"UTC offset must start with '+' or '-': {offset_text!r}")
    sign = -1 if text[0] == "-" else 1
    hours, minutes = parse_time(text[1:])
    return sign * (hours * 60 + minutes)


def _is_digits(text: str) -> bool:
    return text.isascii() and text.isdigit()


def birth_year(date_text: str) -> Optional[int]:
    """Year component of a 'YYYY-MM-DD' string, or None unless it is plain ASCII digits."""
    if not date_text:
        return None
    head = date_text.split("-")[0]
    if not _is_digits(head):
        return None
    return int(head)


def validate_year(date_text: str) -> bool:
    """True when the year of date_text is an integer in [1000, 9999]."""
    year = birth_year(date_text)
    if year is None:
        return False
    return MIN_YEAR <= year <= MAX_YEAR


_OFFSET_PATTERN = re.compile(r"[+-]\d{1,2}(:\d{1,2})?", re.ASCII)


def is_valid_date_text(date_text: str) -> bool:
    """'YYYY', 'YYYY-MM' or 'YYYY-MM-DD' made of ASCII digits. Ranges are not checked."""
    parts = (date_text or "").split("-")
    return 1 <= len(parts) <= 3 and all(_is_digits(p) for p in parts)


def is_valid_time_text(time_text: str) -> bool:
    """'HH', 'HH:MM' or 'HH:MM:SS' made of ASCII digits. Ranges are not checked."""
    parts = (time_text or "").split(":")
    return 1 <= len(parts) <= 3 and all(_is_digits(p) for p in parts)


def is_valid_utc_offset(offset_text: Optional[str]) -> bool:
    """True for an absent or blank offset, or a signed '+HH' / '-HH:MM' offset."""
    if offset_text is None or not offset_text.strip():
        return True
    return _OFFSET_PATTERN.fullmatch(offset_text.strip()) is not None


# ============================================================
# INSTANT BUILDER
# ============================================================

def _wall_clock_seconds(year: int, month: int, day: int, hour: int, minute: int) -> int:
    """Seconds since the epoch treating the wall-clock tuple as if it were UTC."""
    return days_from_civil(year, month, day) * SECONDS_PER_DAY + hour * 3600 + minute * 60


def _host_local_seconds(year: int, month: int, day: int, hour: int, minute: int) -> int:
    """
    Seconds since the epoch treating the wall-clock tuple as host local time.

    mktime normalizes day/hour/minute overflow itself; month is carried
    into the year first so the tuple stays in the range mktime accepts.
    """
    year += (month - 1) // 12
    month = (month - 1) % 12 + 1
    try:
        return int(time.mktime((year, month, day, hour, minute, 0, 0, 0, -1)))
    except (OverflowError, ValueError) as e:
        log.warning("local_time_overflow", year=year, month=month, error=str(e))
        return _wall_clock_seconds(year, month, day, hour, minute)


def build_instant(date_text: str, time_text: Optional[str],
                  utc_offset_text: Optional[str] = None) -> Instant:
    """
    Turn birth date/time strings into an absolute Instant.

    Args:
        date_text: "YYYY-MM-DD"
        time_text: "HH:MM" (missing hour/minute default to 0)
        utc_offset_text: optional "±HH:MM". When absent or blank, the date and time
            are read as wall-clock time in the host's local timezone.

    Returns:
        Instant at whole-second precision.

    Example:
        build_instant("2000-01-01", "00:00", "+08:00") is 1999-12-31T16:00:00Z
    """
    year, month, day = parse_date(date_text)
    hour, minute = parse_time(time_text)

    if not (utc_offset_text or "").strip():
        return Instant(_host_local_seconds(year, month, day, hour, minute))

    offset_minutes = parse_utc_offset(utc_offset_text)
    return Instant(_wall_clock_seconds(year, month, day, hour, minute) - offset_minutes * 60)


# Quick verification
if __name__ == "__main__":
    instant = build_instant("2000-01-01", "00:00", "+08:00")
    print(f"2000-01-01 00:00 +08:00 = {instant.isoformat()}")

    for text in ["0999-01-01", "1000-01-01", "9999-12-31", "10000-01-01"]:
        print(f"  {text:12s} valid year: {validate_year(text)}")
