"""Tests for the stem/branch tables, pillar rules, stub pillars and element analysis."""

import pytest

from fourpillars.bazi import (
    EARTHLY_BRANCHES,
    ELEMENT_BY_CHARACTER,
    HEAVENLY_STEMS,
    STUB_SEQUENCE,
    UNKNOWN,
    Element,
    PillarSet,
    Strength,
    analyze,
    day_pillar,
    describe_label,
    hour_pillar,
    month_pillar,
    stub_pillars,
    year_pillar,
)

EXPECTED_CHARACTER_COUNT = 22


def test_stub_sequence_is_start_of_sexagenary_cycle() -> None:
    """The stub uses the first ten labels of the 60-label cycle."""
    assert STUB_SEQUENCE == ["甲子", "乙丑", "丙寅", "丁卯", "戊辰",
                             "己巳", "庚午", "辛未", "壬申", "癸酉"]


def test_stub_pillars_for_1990() -> None:
    """1990 mod 10 is 0, so the stub starts at 甲子."""
    assert stub_pillars(1990) == PillarSet("甲子", "乙丑", "丙寅", "丁卯")


def test_stub_pillars_wrap_around_sequence() -> None:
    """Indices past the end of the sequence wrap to the start."""
    assert stub_pillars(1988) == PillarSet("壬申", "癸酉", "甲子", "乙丑")


@pytest.mark.parametrize("k", [-98, -1, 1, 2, 801])
def test_stub_depends_only_on_year_mod_ten(k: int) -> None:
    """Years ten apart produce identical stub pillars."""
    assert stub_pillars(1984) == stub_pillars(1984 + 10 * k)


def test_stub_uses_absolute_year() -> None:
    """Negative years index by their absolute value."""
    assert stub_pillars(-3).year_pillar == STUB_SEQUENCE[3]


def test_pillar_set_defaults_to_unknown() -> None:
    """Every field is present even when nothing was resolved."""
    assert PillarSet().to_dict() == {"year": UNKNOWN, "month": UNKNOWN,
                                     "day": UNKNOWN, "hour": UNKNOWN}


def test_element_table_covers_stems_and_branches() -> None:
    """All 10 stems and 12 branches have an element."""
    assert len(ELEMENT_BY_CHARACTER) == EXPECTED_CHARACTER_COUNT
    assert ELEMENT_BY_CHARACTER["甲"] is Element.WOOD
    assert ELEMENT_BY_CHARACTER["巳"] is Element.FIRE
    assert ELEMENT_BY_CHARACTER["申"] is Element.METAL
    assert ELEMENT_BY_CHARACTER["亥"] is Element.WATER
    assert ELEMENT_BY_CHARACTER["丑"] is Element.EARTH


@pytest.mark.parametrize("char", sorted(ELEMENT_BY_CHARACTER))
def test_analyze_is_total_over_known_characters(char: str) -> None:
    """Every known leading character gives the two-bucket recommendation."""
    analysis = analyze(PillarSet(day_pillar=char + "子"))
    assert analysis.day_master == char
    assert analysis.element is ELEMENT_BY_CHARACTER[char]
    if analysis.element in (Element.WOOD, Element.FIRE):
        assert analysis.strength is Strength.DOMINANT
        assert analysis.favorable_element is Element.WATER
    else:
        assert analysis.strength is Strength.DEFICIENT
        assert analysis.favorable_element is Element.WOOD


@pytest.mark.parametrize("day", ["X1", "1990", UNKNOWN, ""])
def test_analyze_defaults_unmapped_to_earth(day: str) -> None:
    """Unknown characters and the sentinel count as Earth."""
    analysis = analyze(PillarSet(day_pillar=day))
    assert analysis.element is Element.EARTH
    assert analysis.strength is Strength.DEFICIENT
    assert analysis.favorable_element is Element.WOOD


def test_analyze_sentinel_day_master() -> None:
    """With no day pillar the day master is the sentinel."""
    assert analyze(PillarSet()).day_master == UNKNOWN


def test_analysis_to_dict_uses_plain_values() -> None:
    """Enum members are flattened to their string values."""
    assert analyze(stub_pillars(1990)).to_dict() == {
        "day_master": "丙",
        "element": "fire",
        "strength": "dominant",
        "favorable_element": "water",
    }


def test_year_pillar_cycle() -> None:
    """1984 is 甲子 and 1990 is 庚午."""
    assert year_pillar(1984).label == "甲子"
    assert year_pillar(1990).label == "庚午"


def test_month_pillar_five_tigers() -> None:
    """A Geng year's Rabbit month is 己卯."""
    assert month_pillar(6, 3).label == "己卯"


def test_day_pillar_known_dates() -> None:
    """Julian day numbers for 1949-10-01, 2000-01-01 and 1990-03-15."""
    assert day_pillar(2433191).label == "甲子"
    assert day_pillar(2451545).label == "戊午"
    assert day_pillar(2447966).label == "己卯"


def test_hour_pillar_zi_spans_midnight() -> None:
    """23:00 and 00:00 are both Zi hours; 10:00 on a Ji day is 己巳."""
    assert hour_pillar(0, 23).branch is EARTHLY_BRANCHES[0]
    assert hour_pillar(0, 0).label == "甲子"
    assert hour_pillar(5, 10).label == "己巳"


def test_tables_are_indexed_in_cycle_order() -> None:
    """Table position matches each entry's index."""
    assert [s.index for s in HEAVENLY_STEMS] == list(range(10))
    assert [b.index for b in EARTHLY_BRANCHES] == list(range(12))


@pytest.mark.parametrize("label,expected", [
    ("甲子", "Jia Zi (yang wood Rat)"),
    ("己卯", "Ji Mao (yin earth Rabbit)"),
    ("癸亥", "Gui Hai (yin water Pig)"),
])
def test_describe_label(label: str, expected: str) -> None:
    """Pinyin, stem polarity and element, and the branch animal."""
    assert describe_label(label) == expected


@pytest.mark.parametrize("label", [UNKNOWN, "", "甲", "子甲", "1990", None, 42])
def test_describe_label_rejects_other_text(label) -> None:
    """Anything but a stem followed by a branch has no gloss."""
    assert describe_label(label) is None
