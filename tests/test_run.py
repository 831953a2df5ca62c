"""Tests for the command-line front end."""

import json
import time

from fourpillars.run import FALLBACK_NOTICE, main

BASE_ARGS = ["--name", "A", "--birth-date", "1990-05-15", "--birth-time", "08:30",
             "--utc-offset", "+00:00", "--focus", "career"]


def test_json_output(capsys) -> None:
    """Default output is the profile as JSON."""
    assert main(BASE_ARGS + ["--no-converter"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["used_fallback"] is True
    assert data["zodiac"]["sign"] == "Taurus"
    assert data["selected_focus_areas"] == ["career"]


def test_text_output_includes_fallback_notice(capsys) -> None:
    """The text report lists the pillars and warns about the fallback."""
    assert main(BASE_ARGS + ["--no-converter", "--format", "text", "--focus", "love"]) == 0
    out = capsys.readouterr().out
    assert "Profile for A" in out
    assert "Year  : 甲子  Jia Zi (yang wood Rat)" in out
    assert "Focus: career, love." in out
    assert FALLBACK_NOTICE in out


def test_missing_converter_module_falls_back(capsys) -> None:
    """An unknown converter module still produces a profile."""
    assert main(BASE_ARGS + ["--converter", "fourpillars_missing_converter"]) == 0
    assert json.loads(capsys.readouterr().out)["used_fallback"] is True


def test_invalid_year_exits_with_status_2(capsys) -> None:
    """Validation failures go to stderr with exit status 2."""
    args = ["--name", "A", "--birth-date", "999-05-15", "--birth-time", "08:30",
            "--focus", "career", "--no-converter"]
    assert main(args) == 2
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "1000 and 9999" in captured.err


def test_no_focus_area_exits_with_status_2(capsys) -> None:
    """At least one focus area is required."""
    args = ["--name", "A", "--birth-date", "1990-05-15", "--birth-time", "08:30",
            "--no-converter"]
    assert main(args) == 2
    assert "focus area" in capsys.readouterr().err


def test_malformed_offset_exits_with_status_2(capsys) -> None:
    """An offset without a sign is reported, not raised."""
    args = BASE_ARGS[:6] + ["--utc-offset", "08:00", "--focus", "career", "--no-converter"]
    assert main(args) == 2
    assert "UTC offset" in capsys.readouterr().err


def test_slow_converter_import_does_not_hold_up_exit(tmp_path, monkeypatch, capsys) -> None:
    """main() returns once the load timeout passes, not when the import finishes."""
    (tmp_path / "fp_cli_slow_conv.py").write_text(
        "import time\n"
        "time.sleep(3)\n"
        "def solar_to_lunar(*args):\n"
        "    return {}\n",
        encoding="utf-8",
    )
    monkeypatch.syspath_prepend(str(tmp_path))
    monkeypatch.setenv("FOURPILLARS_CONVERTER_LOAD_TIMEOUT", "0.1")
    started = time.monotonic()
    assert main(BASE_ARGS + ["--converter", "fp_cli_slow_conv"]) == 0
    assert time.monotonic() - started < 2.0
    assert json.loads(capsys.readouterr().out)["used_fallback"] is True
