"""Shared pytest fixtures.

Puts the project root on sys.path, isolates the capability cache and
settings between tests, and lets tests pin the host timezone.
"""

import os
import sys
import time

import pytest
import structlog

CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from fourpillars import lunar  # noqa: E402
from fourpillars.settings import get_settings  # noqa: E402


@pytest.fixture(autouse=True)
def clean_state():
    """Empty the capability cache, cached settings and logging configuration."""
    lunar._loaded.clear()
    get_settings.cache_clear()
    yield
    lunar._loaded.clear()
    get_settings.cache_clear()
    structlog.reset_defaults()


@pytest.fixture
def host_tz():
    """Return a setter that switches the process timezone; restored afterwards."""
    original = os.environ.get("TZ")

    def _set(name: str) -> None:
        os.environ["TZ"] = name
        time.tzset()

    yield _set

    if original is None:
        os.environ.pop("TZ", None)
    else:
        os.environ["TZ"] = original
    time.tzset()
