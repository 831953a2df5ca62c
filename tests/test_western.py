"""Tests for the sun-sign date ranges."""

from datetime import datetime, timedelta

import pytest

from fourpillars.astro_calendar import build_instant
from fourpillars.western import ZODIAC_SIGNS, zodiac_for, zodiac_for_instant

SIGN_COUNT = 12


def test_capricorn_spans_year_boundary() -> None:
    """Every day from Dec 22 to Jan 19 is Capricorn."""
    day = datetime(2001, 12, 22)
    while day <= datetime(2002, 1, 19):
        assert zodiac_for(day.month, day.day).sign == "Capricorn"
        day += timedelta(days=1)


def test_cusp_between_pisces_and_aries() -> None:
    """March 20 and March 21 fall in different signs."""
    assert zodiac_for(3, 20).sign == "Pisces"
    assert zodiac_for(3, 21).sign == "Aries"


@pytest.mark.parametrize("month,day,sign,element", [
    (1, 20, "Aquarius", "air"),
    (5, 15, "Taurus", "earth"),
    (6, 21, "Gemini", "air"),
    (7, 22, "Cancer", "water"),
    (8, 23, "Virgo", "earth"),
    (10, 24, "Scorpio", "water"),
    (12, 21, "Sagittarius", "fire"),
])
def test_known_signs(month: int, day: int, sign: str, element: str) -> None:
    """Representative dates map to the expected sign and element."""
    info = zodiac_for(month, day)
    assert (info.sign, info.element) == (sign, element)


def test_every_calendar_day_has_a_sign() -> None:
    """A full leap year visits all twelve signs."""
    seen = set()
    day = datetime(2000, 1, 1)
    while day.year == 2000:
        seen.add(zodiac_for(day.month, day.day).sign)
        day += timedelta(days=1)
    assert seen == set(ZODIAC_SIGNS)
    assert len(ZODIAC_SIGNS) == SIGN_COUNT


def test_unmatched_date_defaults_to_capricorn() -> None:
    """Nonsense month values fall back to the first range."""
    assert zodiac_for(13, 40).sign == "Capricorn"


def test_sign_uses_host_local_date(host_tz) -> None:
    """The sign follows the calendar date in the host timezone."""
    instant = build_instant("2000-03-21", "02:00", "+00:00")
    host_tz("UTC0")
    assert zodiac_for_instant(instant).sign == "Aries"
    host_tz("EST5")
    assert zodiac_for_instant(instant).sign == "Pisces"
