"""
Pytest fixtures for placement tests.
"""

import sys
from pathlib import Path

import pytest

# Add tests dir and parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent))
sys.path.insert(0, str(Path(__file__).parent.parent))

from helpers import NOW, make_settings

from placement.scheduler import EventScheduler


@pytest.fixture
def scheduler():
    """EventScheduler with default depth and slot size."""
    return EventScheduler()


@pytest.fixture
def settings():
    """09:00-17:00, Sunday off."""
    return make_settings()


@pytest.fixture
def saturday_off():
    """09:00-17:00, Saturday off."""
    return make_settings(rest_day="saturday")


@pytest.fixture
def now():
    """Friday before the test week."""
    return NOW
