"""
Profile creation library.
Validates birth input, resolves BaZi pillars and the Western sun sign,
and assembles the result record handed to the presentation layer.

Usage from Python:
    import asyncio
    from fourpillars.profile import BirthInput, build_profile

    profile = asyncio.run(build_profile(
        BirthInput(name="Alex", date_text="1990-03-15", time_text="10:30",
                   utc_offset_text="-08:00"),
        focus_areas=["career"],
    ))
    print(profile.to_dict())
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Optional

import structlog

from fourpillars.astro_calendar import (
    Instant,
    build_instant,
    is_valid_date_text,
    is_valid_time_text,
    is_valid_utc_offset,
    validate_year,
)
from fourpillars.bazi import ElementAnalysis, PillarSet, analyze
from fourpillars.errors import IncompleteInput, InvalidYear, MalformedInput, ProfileError
from fourpillars.lunar import CalendarCapability, load_capability, resolve_pillars
from fourpillars.settings import Settings, get_settings
from fourpillars.western import ZodiacInfo, zodiac_for_instant

log = structlog.get_logger(__name__)

INCOMPLETE_MESSAGE = ("Please enter a name, birth date and birth time, "
                      "and select at least one focus area.")
INVALID_YEAR_MESSAGE = "Birth year must be a four-digit number between 1000 and 9999."
MALFORMED_MESSAGE = ("Birth date must look like YYYY-MM-DD, birth time like HH:MM "
                     "and a UTC offset like +08:00.")


# ============================================================
# INPUT AND VALIDATION
# ============================================================

@dataclass(frozen=True)
class BirthInput:
    name: str
    date_text: str             # "YYYY-MM-DD"
    time_text: str             # "HH:MM"
    utc_offset_text: Optional[str] = None  # "±HH:MM"


@dataclass(frozen=True)
class ValidationResult:
    ok: bool
    reason: str = ""
    error: Optional[type[ProfileError]] = None


def validate_input(birth: BirthInput, focus_areas: Iterable[str]) -> ValidationResult:
    """Check completeness, the birth year, then date, time and offset syntax. Never raises."""
    if (not (birth.name or "").strip() or not birth.date_text
            or not birth.time_text or not list(focus_areas)):
        return ValidationResult(False, INCOMPLETE_MESSAGE, IncompleteInput)
    if not validate_year(birth.date_text):
        return ValidationResult(False, INVALID_YEAR_MESSAGE, InvalidYear)
    if not (is_valid_date_text(birth.date_text) and is_valid_time_text(birth.time_text)
            and is_valid_utc_offset(birth.utc_offset_text)):
        return ValidationResult(False, MALFORMED_MESSAGE, MalformedInput)
    return ValidationResult(True)


def ensure_valid(birth: BirthInput, focus_areas: Iterable[str]) -> None:
    """
    Raises:
        IncompleteInput: a required field is empty or no focus area is selected
        InvalidYear: the year is not an integer in [1000, 9999]
        MalformedInput: date, time or offset text is not numeric or the offset
            has no sign
    """
    result = validate_input(birth, focus_areas)
    if not result.ok:
        raise result.error(result.reason)


# ============================================================
# RESULT
# ============================================================

@dataclass(frozen=True)
class ProfileResult:
    name: str
    instant: Instant
    pillars: PillarSet
    zodiac: ZodiacInfo
    analysis: ElementAnalysis
    used_fallback: bool
    selected_focus_areas: tuple[str, ...]
    generated_at: datetime = field(default_factory=lambda: datetime.now().astimezone())

    @property
    def summary(self) -> str:
        focus = ", ".join(self.selected_focus_areas)
        return (f"Day master is {self.analysis.strength.value}; favor the "
                f"{self.analysis.favorable_element.value} element to rebalance "
                f"energy. Focus: {focus}.")

    @property
    def recommendations(self) -> list[dict]:
        favorable = self.analysis.favorable_element.value
        return [
            {
                "title": "Everyday objects",
                "detail": f"Bring {favorable} element practices or objects into "
                          f"your routine to help restore balance.",
            },
            {
                "title": "Daily practice",
                "detail": "Ten minutes of guided imagery each day, paired with "
                          "breathing and body awareness.",
            },
        ]

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "instant": self.instant.isoformat(),
            "pillars": self.pillars.to_dict(),
            "zodiac": self.zodiac.to_dict(),
            "analysis": self.analysis.to_dict(),
            "used_fallback": self.used_fallback,
            "selected_focus_areas": list(self.selected_focus_areas),
            "summary": self.summary,
            "recommendations": self.recommendations,
            "generated_at": self.generated_at.isoformat(timespec="seconds"),
        }


# ============================================================
# PROFILE COMPUTATION
# ============================================================

def _ordered_unique(items: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(items))


def compute_profile(birth: BirthInput, focus_areas: Iterable[str],
                    converter: Optional[CalendarCapability] = None,
                    now: Optional[datetime] = None) -> ProfileResult:
    """
    Compute a full profile from validated birth data.

    Args:
        birth: raw birth input
        focus_areas: focus-area tags chosen by the user, in selection order
        converter: calendar capability, or None to use the stub pillars
        now: report timestamp (defaults to the current local time)

    Returns:
        ProfileResult. Converter problems never raise; they show up as
        used_fallback=True.

    Raises:
        IncompleteInput, InvalidYear, MalformedInput
    """
    focus = _ordered_unique(focus_areas)
    ensure_valid(birth, focus)

    instant = build_instant(birth.date_text, birth.time_text, birth.utc_offset_text)
    resolution = resolve_pillars(instant, converter)

    extra = {} if now is None else {"generated_at": now}
    profile = ProfileResult(
        name=birth.name.strip(),
        instant=instant,
        pillars=resolution.pillars,
        zodiac=zodiac_for_instant(instant),
        analysis=analyze(resolution.pillars),
        used_fallback=resolution.used_fallback,
        selected_focus_areas=focus,
        **extra,
    )
    log.debug("profile_computed", instant=instant.isoformat(),
              used_fallback=profile.used_fallback, sign=profile.zodiac.sign)
    return profile


async def build_profile(birth: BirthInput, focus_areas: Iterable[str],
                        settings: Optional[Settings] = None) -> ProfileResult:
    """
    Load the configured calendar converter (bounded wait), then compute.

    Validation runs before the converter is loaded so that bad input
    fails fast.
    """
    settings = settings or get_settings()
    focus = _ordered_unique(focus_areas)
    ensure_valid(birth, focus)

    converter = await load_capability(
        settings.converter_module,
        attribute=settings.converter_attribute,
        timeout=settings.converter_load_timeout,
    )
    return compute_profile(birth, focus, converter)
