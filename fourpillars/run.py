"""
CLI wrapper for build_profile().

Usage:
    fourpillars --name NAME --birth-date YYYY-MM-DD --birth-time HH:MM \
        --focus AREA [--focus AREA ...] [--utc-offset ±HH:MM] \
        [--format json|text] [--converter MODULE | --no-converter]
"""

import argparse
import asyncio
import json
import sys

from fourpillars.bazi import describe_label
from fourpillars.logging import setup_logging
from fourpillars.profile import BirthInput, ProfileResult, build_profile
from fourpillars.settings import get_settings

FALLBACK_NOTICE = "Calendar converter unavailable; pillars are approximate."


def _pillar_line(title: str, label: str) -> str:
    gloss = describe_label(label)
    line = f"  {title}: {label}"
    return f"{line}  {gloss}" if gloss else line


def format_report(profile: ProfileResult) -> str:
    """Plain-text report of a profile."""
    p = profile.pillars
    a = profile.analysis
    lines = [
        f"Profile for {profile.name}",
        "",
        "Four Pillars:",
        _pillar_line("Year  ", p.year_pillar),
        _pillar_line("Month ", p.month_pillar),
        _pillar_line("Day   ", p.day_pillar),
        _pillar_line("Hour  ", p.hour_pillar),
        "",
        f"Sun sign  : {profile.zodiac.sign} ({profile.zodiac.element})",
        f"Day master: {a.day_master} ({a.element.value})",
        "",
        profile.summary,
        "",
        "Recommendations:",
    ]
    for i, rec in enumerate(profile.recommendations, 1):
        lines.append(f"  {i}. {rec['title']}: {rec['detail']}")
    if profile.used_fallback:
        lines += ["", FALLBACK_NOTICE]
    lines += ["", f"Generated {profile.generated_at.strftime('%Y-%m-%d %H:%M:%S')}"]
    return "\n".join(lines)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Compute a Four Pillars profile.")
    parser.add_argument("--name", required=True)
    parser.add_argument("--birth-date", required=True, dest="birth_date")
    parser.add_argument("--birth-time", required=True, dest="birth_time")
    parser.add_argument("--utc-offset", dest="utc_offset", default=None,
                        help="fixed offset such as +08:00 (write --utc-offset=-05:00 for negative "
                             "offsets); host timezone if omitted")
    parser.add_argument("--focus", action="append", default=[], dest="focus_areas",
                        help="focus area tag (repeatable)")
    parser.add_argument("--format", default="json", choices=["json", "text"])
    converter = parser.add_mutually_exclusive_group()
    converter.add_argument("--converter", default=None,
                           help="dotted module path of the calendar converter")
    converter.add_argument("--no-converter", action="store_true", dest="no_converter")
    parser.add_argument("--log-level", dest="log_level", default=None)

    args = parser.parse_args(argv)

    settings = get_settings()
    updates = {}
    if args.no_converter:
        updates["converter_module"] = ""
    elif args.converter:
        updates["converter_module"] = args.converter
    if args.log_level:
        updates["log_level"] = args.log_level
    settings = settings.model_copy(update=updates)

    setup_logging(settings.log_level)

    birth = BirthInput(
        name=args.name,
        date_text=args.birth_date,
        time_text=args.birth_time,
        utc_offset_text=args.utc_offset,
    )
    try:
        profile = asyncio.run(build_profile(birth, args.focus_areas, settings))
    except ValueError as e:
        print(str(e), file=sys.stderr)
        return 2

    if args.format == "text":
        print(format_report(profile))
    else:
        print(json.dumps(profile.to_dict(), indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
