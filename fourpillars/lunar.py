"""
Pillar resolution through an optional calendar converter.

Handles:
- Lazy, time-bounded loading of a converter module by dotted path
- Calling the converter with either an instant or (year, month, day)
- Normalizing loosely-shaped converter output into a PillarSet
- Falling back to the deterministic stub when anything goes wrong

Nothing in this module raises to its caller once an Instant exists.
"""

import asyncio
import importlib
import threading
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional, Protocol, runtime_checkable

import structlog

from fourpillars.astro_calendar import Instant
from fourpillars.bazi import PILLAR_POSITIONS, UNKNOWN, PillarSet, stub_pillars
from fourpillars.errors import CapabilityUnavailable, ConversionFailed

log = structlog.get_logger(__name__)


@runtime_checkable
class CalendarCapability(Protocol):
    """
    Anything that converts a solar date into pillar labels.

    solar_to_lunar is called as solar_to_lunar(datetime) first and as
    solar_to_lunar(year, month, day) if that fails. It may return any
    record shape, or None.
    """

    def solar_to_lunar(self, *args: Any) -> Any: ...


@dataclass(frozen=True)
class PillarResolution:
    pillars: PillarSet
    used_fallback: bool


# ============================================================
# RESULT NORMALIZATION
# ============================================================

# Field names tried per pillar, highest priority first
PILLAR_ALIASES = {
    "year": ("GanZhiYear", "ganZhiYear", "yearGanZhi", "year", "yearCn",
             "GanZhi", "ganZhi", "gan_zhi_year", "year_pillar"),
    "month": ("GanZhiMonth", "ganZhiMonth", "month", "monthCn",
              "gan_zhi_month", "month_pillar"),
    "day": ("GanZhiDay", "ganZhiDay", "day", "dayCn",
            "gan_zhi_day", "day_pillar"),
    "hour": ("GanZhiHour", "ganZhiHour", "hour",
             "gan_zhi_hour", "hour_pillar"),
}


def _coerce_label(value: Any) -> Optional[str]:
    """A usable label from a field value, or None."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, (int, float)):
        try:
            return str(value)
        except ValueError:
            # ints past sys.get_int_max_str_digits() refuse to render
            return None
    return None


def _read_field(record: Any, name: str) -> Any:
    try:
        if isinstance(record, Mapping):
            return record.get(name)
        return getattr(record, name, None)
    except Exception:
        # Foreign mappings and properties can raise anything
        return None


def normalize_pillars(record: Any) -> Optional[PillarSet]:
    """
    Read pillar labels out of an arbitrary converter result.

    Each pillar takes the first alias in PILLAR_ALIASES that holds a
    non-empty string or a number. Unresolved pillars are UNKNOWN.

    Returns:
        PillarSet, or None when the record is empty or no pillar resolved
    """
    if record is None or isinstance(record, (str, bytes, bool, int, float)):
        return None

    found = {}
    for position in PILLAR_POSITIONS:
        for name in PILLAR_ALIASES[position]:
            label = _coerce_label(_read_field(record, name))
            if label is not None:
                found[position] = label
                break

    if not found:
        return None
    return PillarSet(**{f"{pos}_pillar": found.get(pos, UNKNOWN)
                        for pos in PILLAR_POSITIONS})


# ============================================================
# CONVERTER CALLS
# ============================================================

def call_converter(converter: CalendarCapability, instant: Instant) -> PillarSet:
    """
    Try both calling conventions and return the first usable PillarSet.

    Raises:
        ConversionFailed: both calls raised or returned nothing usable
    """
    errors = []

    try:
        pillars = normalize_pillars(converter.solar_to_lunar(instant.local_datetime()))
        if pillars is not None:
            return pillars
    except Exception as e:
        errors.append(f"instant: {e!r}")

    year, month, day = instant.local_date()
    try:
        pillars = normalize_pillars(converter.solar_to_lunar(year, month, day))
        if pillars is not None:
            return pillars
    except Exception as e:
        errors.append(f"date: {e!r}")

    raise ConversionFailed("; ".join(errors) or "converter returned no pillars")


def resolve_pillars(instant: Instant,
                    converter: Optional[CalendarCapability] = None) -> PillarResolution:
    """
    Resolve the four pillars for an instant.

    Without a converter, or when the converter fails, the stub for the
    instant's local year is returned with used_fallback=True.
    """
    if converter is not None:
        try:
            return PillarResolution(call_converter(converter, instant), used_fallback=False)
        except ConversionFailed as e:
            log.warning("conversion_failed", instant=instant.isoformat(), error=str(e))
    else:
        log.info("capability_unavailable", instant=instant.isoformat())

    year, _, _ = instant.local_date()
    return PillarResolution(stub_pillars(year), used_fallback=True)


# ============================================================
# CAPABILITY LOADING
# ============================================================

_loaded: dict[str, Any] = {}


def _import_capability(module_path: str, attribute: str) -> Any:
    module = importlib.import_module(module_path)
    if not callable(getattr(module, attribute, None)):
        raise CapabilityUnavailable(f"{module_path} has no callable {attribute!r}")
    if attribute == "solar_to_lunar":
        return module
    # Adapt a differently named entry point to the capability protocol
    return _RenamedCapability(getattr(module, attribute))


class _RenamedCapability:
    def __init__(self, func):
        self._func = func

    def solar_to_lunar(self, *args):
        return self._func(*args)


def _settle(future: asyncio.Future, result: Any, error: Optional[BaseException]) -> None:
    if future.done():
        return
    if error is not None:
        future.set_exception(error)
    else:
        future.set_result(result)


def _import_in_background(module_path: str, attribute: str) -> asyncio.Future:
    """
    Start the import on a daemon thread and return a future for its result.

    A daemon thread is never joined, neither by asyncio.run() nor at
    interpreter exit, so an abandoned import cannot hold up the process.
    """
    loop = asyncio.get_running_loop()
    future = loop.create_future()

    def run():
        try:
            result, error = _import_capability(module_path, attribute), None
        except Exception as e:
            result, error = None, e
        try:
            loop.call_soon_threadsafe(_settle, future, result, error)
        except RuntimeError:
            # The loop closed after the caller stopped waiting
            pass

    threading.Thread(target=run, name=f"load-{module_path}", daemon=True).start()
    return future


async def load_capability(module_path: str, attribute: str = "solar_to_lunar",
                          timeout: float = 2.0) -> Optional[CalendarCapability]:
    """
    Import a calendar converter module without blocking the caller for long.

    The import runs on a daemon thread and is awaited for at most `timeout`
    seconds. A slow import keeps running in its thread but nothing waits
    for it, including asyncio.run() and interpreter shutdown.

    Returns:
        The capability, or None if the module is missing, broken, lacks
        the entry point or did not load in time
    """
    if not module_path:
        return None

    key = f"{module_path}:{attribute}"
    if key in _loaded:
        return _loaded[key]

    try:
        capability = await asyncio.wait_for(
            _import_in_background(module_path, attribute),
            timeout=timeout,
        )
    except asyncio.TimeoutError:
        log.warning("capability_unavailable", module=module_path,
                    reason=f"not loaded within {timeout}s")
        return None
    except Exception as e:
        # Third-party modules can fail at import time with any error
        log.warning("capability_unavailable", module=module_path, reason=repr(e))
        return None

    _loaded[key] = capability
    return capability
