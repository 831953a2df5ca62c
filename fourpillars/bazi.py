"""
BaZi (Four Pillars of Destiny) tables and rules.

Handles:
- Heavenly stem / earthly branch definitions and their elements
- Year, month, day and hour pillar rules (Five Tigers / Five Rats)
- The pillar set record shared by the resolver and the analyzer
- The deterministic stub used when no calendar converter is available
- Day-master element analysis and the favorable element heuristic

Design principle: This module COMPUTES. Astronomy (solar longitude,
Julian days) lives in ephemeris.py; reading converter output lives
in lunar.py.
"""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Optional


# ============================================================
# FUNDAMENTAL DATA STRUCTURES
# ============================================================

class Polarity(Enum):
    YANG = "yang"
    YIN = "yin"


class Element(Enum):
    WOOD = "wood"
    FIRE = "fire"
    EARTH = "earth"
    METAL = "metal"
    WATER = "water"


class Strength(Enum):
    DOMINANT = "dominant"
    DEFICIENT = "deficient"


@dataclass(frozen=True)
class HeavenlyStem:
    chinese: str
    pinyin: str
    element: Element
    polarity: Polarity
    index: int  # 0-9 in the cycle


@dataclass(frozen=True)
class EarthlyBranch:
    chinese: str
    pinyin: str
    animal: str
    element: Element
    index: int  # 0-11 in the cycle


@dataclass(frozen=True)
class Pillar:
    stem: HeavenlyStem
    branch: EarthlyBranch
    position: str  # "year", "month", "day", "hour"

    @property
    def label(self) -> str:
        """Two-character label, e.g. '甲子'."""
        return self.stem.chinese + self.branch.chinese


# ============================================================
# STEM AND BRANCH DEFINITIONS
# ============================================================

HEAVENLY_STEMS = [
    HeavenlyStem("甲", "Jia", Element.WOOD, Polarity.YANG, 0),
    HeavenlyStem("乙", "Yi", Element.WOOD, Polarity.YIN, 1),
    HeavenlyStem("丙", "Bing", Element.FIRE, Polarity.YANG, 2),
    HeavenlyStem("丁", "Ding", Element.FIRE, Polarity.YIN, 3),
    HeavenlyStem("戊", "Wu", Element.EARTH, Polarity.YANG, 4),
    HeavenlyStem("己", "Ji", Element.EARTH, Polarity.YIN, 5),
    HeavenlyStem("庚", "Geng", Element.METAL, Polarity.YANG, 6),
    HeavenlyStem("辛", "Xin", Element.METAL, Polarity.YIN, 7),
    HeavenlyStem("壬", "Ren", Element.WATER, Polarity.YANG, 8),
    HeavenlyStem("癸", "Gui", Element.WATER, Polarity.YIN, 9),
]

EARTHLY_BRANCHES = [
    EarthlyBranch("子", "Zi", "Rat", Element.WATER, 0),
    EarthlyBranch("丑", "Chou", "Ox", Element.EARTH, 1),
    EarthlyBranch("寅", "Yin", "Tiger", Element.WOOD, 2),
    EarthlyBranch("卯", "Mao", "Rabbit", Element.WOOD, 3),
    EarthlyBranch("辰", "Chen", "Dragon", Element.EARTH, 4),
    EarthlyBranch("巳", "Si", "Snake", Element.FIRE, 5),
    EarthlyBranch("午", "Wu", "Horse", Element.FIRE, 6),
    EarthlyBranch("未", "Wei", "Goat", Element.EARTH, 7),
    EarthlyBranch("申", "Shen", "Monkey", Element.METAL, 8),
    EarthlyBranch("酉", "You", "Rooster", Element.METAL, 9),
    EarthlyBranch("戌", "Xu", "Dog", Element.EARTH, 10),
    EarthlyBranch("亥", "Hai", "Pig", Element.WATER, 11),
]

# All 22 characters -> element
ELEMENT_BY_CHARACTER = {
    **{s.chinese: s.element for s in HEAVENLY_STEMS},
    **{b.chinese: b.element for b in EARTHLY_BRANCHES},
}

# First ten labels of the sexagenary cycle: 甲子 乙丑 ... 癸酉
STUB_SEQUENCE = [HEAVENLY_STEMS[i].chinese + EARTHLY_BRANCHES[i].chinese
                 for i in range(10)]

STEM_BY_CHINESE = {s.chinese: s for s in HEAVENLY_STEMS}
BRANCH_BY_CHINESE = {b.chinese: b for b in EARTHLY_BRANCHES}


# ============================================================
# PILLAR COMPUTATION
# ============================================================

def year_pillar(year: int) -> Pillar:
    """
    Compute the Year Pillar for a BaZi year.

    The caller decides the BaZi year: births before Li Chun (Start of
    Spring, usually Feb 3-5) belong to the previous Gregorian year.
    """
    # Year 4 CE was Jia Zi, the start of the cycle
    return Pillar(
        stem=HEAVENLY_STEMS[(year - 4) % 10],
        branch=EARTHLY_BRANCHES[(year - 4) % 12],
        position="year"
    )


def month_pillar(year_stem_index: int, month_branch_index: int) -> Pillar:
    """
    Compute the Month Pillar using the Five Tigers Escape (Wu Hu Dun) formula.

    Five Tigers Escape rule:
    - Year stem Jia/Ji → month 1 stem starts at Bing
    - Year stem Yi/Geng → month 1 stem starts at Wu
    - Year stem Bing/Xin → month 1 stem starts at Geng
    - Year stem Ding/Ren → month 1 stem starts at Ren
    - Year stem Wu/Gui → month 1 stem starts at Jia

    Args:
        year_stem_index: index of the year's heavenly stem (0-9)
        month_branch_index: index of the month's earthly branch (0-11)
            Note: month 1 (Tiger/Yin) has branch_index 2
    """
    tiger_start_stems = {
        0: 2, 5: 2,   # Jia/Ji year → Bing Tiger
        1: 4, 6: 4,   # Yi/Geng year → Wu Tiger
        2: 6, 7: 6,   # Bing/Xin year → Geng Tiger
        3: 8, 8: 8,   # Ding/Ren year → Ren Tiger
        4: 0, 9: 0,   # Wu/Gui year → Jia Tiger
    }

    start_stem = tiger_start_stems[year_stem_index]
    months_from_tiger = (month_branch_index - 2) % 12
    stem_index = (start_stem + months_from_tiger) % 10

    return Pillar(
        stem=HEAVENLY_STEMS[stem_index],
        branch=EARTHLY_BRANCHES[month_branch_index],
        position="month"
    )


def day_pillar(jdn: int) -> Pillar:
    """
    Compute the Day Pillar from a Julian Day Number (the integer JD at
    noon of the civil date).

    (jdn + 49) % 60 gives the sexagenary index: 1949-10-01 (JDN 2433191)
    is Jia Zi and 2000-01-01 (JDN 2451545) is Wu Wu.
    """
    sexagenary = (jdn + 49) % 60
    return Pillar(
        stem=HEAVENLY_STEMS[sexagenary % 10],
        branch=EARTHLY_BRANCHES[sexagenary % 12],
        position="day"
    )


def hour_pillar(day_stem_index: int, hour: int) -> Pillar:
    """
    Compute the Hour Pillar using Five Rats Escape (Wu Shu Dun) formula.

    Chinese hours (shi chen) are 2-hour blocks starting at 23:00:
    23:00-00:59 = Zi (Rat), 01:00-02:59 = Chou (Ox), ...
    21:00-22:59 = Hai (Pig).

    Args:
        day_stem_index: index of the day's heavenly stem (0-9)
        hour: hour in 24h format
    """
    if hour == 23 or hour == 0:
        branch_index = 0  # Zi
    else:
        branch_index = ((hour + 1) // 2) % 12

    zi_start_stems = {
        0: 0, 5: 0,   # Jia/Ji day → Jia Zi hour
        1: 2, 6: 2,   # Yi/Geng day → Bing Zi hour
        2: 4, 7: 4,   # Bing/Xin day → Wu Zi hour
        3: 6, 8: 6,   # Ding/Ren day → Geng Zi hour
        4: 8, 9: 8,   # Wu/Gui day → Ren Zi hour
    }

    stem_index = (zi_start_stems[day_stem_index] + branch_index) % 10

    return Pillar(
        stem=HEAVENLY_STEMS[stem_index],
        branch=EARTHLY_BRANCHES[branch_index],
        position="hour"
    )


# ============================================================
# PILLAR SET
# ============================================================

UNKNOWN = "unknown"

PILLAR_POSITIONS = ("year", "month", "day", "hour")


@dataclass(frozen=True)
class PillarSet:
    """Four pillar labels. A field that could not be resolved holds UNKNOWN."""

    year_pillar: str = UNKNOWN
    month_pillar: str = UNKNOWN
    day_pillar: str = UNKNOWN
    hour_pillar: str = UNKNOWN

    def to_dict(self) -> dict:
        return {pos: getattr(self, f"{pos}_pillar") for pos in PILLAR_POSITIONS}


def describe_label(label) -> Optional[str]:
    """
    Readable gloss of a two-character pillar label.

    Returns:
        e.g. "Jia Zi (yang wood Rat)" for '甲子', or None when the label
        is not a stem followed by a branch
    """
    if not isinstance(label, str) or len(label) != 2:
        return None
    stem = STEM_BY_CHINESE.get(label[0])
    branch = BRANCH_BY_CHINESE.get(label[1])
    if stem is None or branch is None:
        return None
    return (f"{stem.pinyin} {branch.pinyin} "
            f"({stem.polarity.value} {stem.element.value} {branch.animal})")


def stub_pillars(year: int) -> PillarSet:
    """
    Deterministic stand-in pillars when no converter result is available.

    A pure function of the year: idx = |year| mod 10, then four consecutive
    labels of STUB_SEQUENCE starting at idx.
    """
    n = len(STUB_SEQUENCE)
    idx = abs(year) % n
    return PillarSet(
        year_pillar=STUB_SEQUENCE[idx],
        month_pillar=STUB_SEQUENCE[(idx + 1) % n],
        day_pillar=STUB_SEQUENCE[(idx + 2) % n],
        hour_pillar=STUB_SEQUENCE[(idx + 3) % n],
    )


# ============================================================
# ELEMENT ANALYSIS
# ============================================================

STRONG_ELEMENTS = (Element.WOOD, Element.FIRE)


@dataclass(frozen=True)
class ElementAnalysis:
    day_master: str
    element: Element
    strength: Strength
    favorable_element: Element

    def to_dict(self) -> dict:
        data = asdict(self)
        data["element"] = self.element.value
        data["strength"] = self.strength.value
        data["favorable_element"] = self.favorable_element.value
        return data


def analyze(pillars: PillarSet) -> ElementAnalysis:
    """
    Derive the day master element and a favorable element.

    The day master is the first character of the day pillar. Characters
    outside the stem/branch table (including UNKNOWN) count as Earth.
    Wood and Fire day masters are read as dominant and balanced with
    Water; everything else is deficient and supported with Wood.
    """
    day = pillars.day_pillar if isinstance(pillars.day_pillar, str) else ""
    if not day or day == UNKNOWN:
        day_master = UNKNOWN
        element = Element.EARTH
    else:
        day_master = day[0]
        element = ELEMENT_BY_CHARACTER.get(day_master, Element.EARTH)

    if element in STRONG_ELEMENTS:
        return ElementAnalysis(day_master, element, Strength.DOMINANT, Element.WATER)
    return ElementAnalysis(day_master, element, Strength.DEFICIENT, Element.WOOD)


# ============================================================
# TEST / VERIFICATION
# ============================================================

if __name__ == "__main__":
    print("Stub pillars for 1990:")
    stub = stub_pillars(1990)
    for pos, label in stub.to_dict().items():
        print(f"  {pos.capitalize():6s}: {label}")

    analysis = analyze(stub)
    print(f"\nDay Master: {analysis.day_master} ({analysis.element.value})")
    print(f"Strength: {analysis.strength.value}, favor {analysis.favorable_element.value}")
