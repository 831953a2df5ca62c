"""
Western tropical sun-sign lookup.

Maps a calendar (month, day) to one of the twelve zodiac signs using
fixed date ranges rather than the Sun's ecliptic longitude, so the
result only depends on the local calendar date of the birth.
"""

from dataclasses import dataclass

from fourpillars.astro_calendar import Instant


# ============================================================
# CONSTANTS
# ============================================================

@dataclass(frozen=True)
class ZodiacInfo:
    sign: str
    element: str  # "earth", "air", "water", "fire"

    def to_dict(self) -> dict:
        return {"sign": self.sign, "element": self.element}


@dataclass(frozen=True)
class ZodiacRange:
    sign: str
    element: str
    start: tuple[int, int]  # (month, day)
    end: tuple[int, int]

    def matches(self, month: int, day: int) -> bool:
        return ((month == self.start[0] and day >= self.start[1])
                or (month == self.end[0] and day <= self.end[1]))


# Capricorn wraps the year boundary; it is also the no-match default
ZODIAC_RANGES = [
    ZodiacRange("Capricorn", "earth", (12, 22), (1, 19)),
    ZodiacRange("Aquarius", "air", (1, 20), (2, 18)),
    ZodiacRange("Pisces", "water", (2, 19), (3, 20)),
    ZodiacRange("Aries", "fire", (3, 21), (4, 19)),
    ZodiacRange("Taurus", "earth", (4, 20), (5, 20)),
    ZodiacRange("Gemini", "air", (5, 21), (6, 21)),
    ZodiacRange("Cancer", "water", (6, 22), (7, 22)),
    ZodiacRange("Leo", "fire", (7, 23), (8, 22)),
    ZodiacRange("Virgo", "earth", (8, 23), (9, 22)),
    ZodiacRange("Libra", "air", (9, 23), (10, 23)),
    ZodiacRange("Scorpio", "water", (10, 24), (11, 22)),
    ZodiacRange("Sagittarius", "fire", (11, 23), (12, 21)),
]

ZODIAC_SIGNS = [z.sign for z in ZODIAC_RANGES]


# ============================================================
# SIGN LOOKUP
# ============================================================

def zodiac_for(month: int, day: int) -> ZodiacInfo:
    """
    Sun sign for a calendar month (1-12) and day (1-31).

    Ranges are checked in declaration order and the first match wins.
    A date no range matches falls back to Capricorn.
    """
    for zr in ZODIAC_RANGES:
        if zr.matches(month, day):
            return ZodiacInfo(zr.sign, zr.element)
    first = ZODIAC_RANGES[0]
    return ZodiacInfo(first.sign, first.element)


def zodiac_for_instant(instant: Instant) -> ZodiacInfo:
    """Sun sign for the host-local calendar date of an instant."""
    _, month, day = instant.local_date()
    return zodiac_for(month, day)
