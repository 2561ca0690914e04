"""
Shared pytest fixtures and configuration for wallticker tests.

This module provides:
- Location-based auto-marking (unit / integration)
- The minute-on-the-second scenario used by the replay tests
- Settings cache isolation
"""

import sys
from datetime import datetime, timedelta
from pathlib import Path
from typing import Generator

import pytest

# Ensure wallticker and tests._support are importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent.parent))

from wallticker.settings import clear_settings_cache
from wallticker.timestamps import truncate, utc_now


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location."""
    for item in items:
        test_path = Path(item.fspath).relative_to(Path(__file__).parent)

        if "integration" in str(test_path):
            item.add_marker(pytest.mark.integration)

        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration", "slow"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def clean_settings_cache() -> Generator[None, None, None]:
    """Clear the settings cache before and after each test."""
    clear_settings_cache()
    yield
    clear_settings_cache()


# =============================================================================
# Scenario Fixtures
# =============================================================================


@pytest.fixture
def minute_scenario() -> tuple[timedelta, timedelta, datetime]:
    """Period one minute, accuracy one second, and a start instant.

    The start is nudged at least two accuracy units past its boundary so
    the first sample is neither an exact nor a catch-up match.
    """
    d = timedelta(minutes=1)
    a = timedelta(seconds=1)
    now = utc_now()

    if truncate(now, a) - truncate(now, d) <= a:
        now += a * 2

    return d, a, now
