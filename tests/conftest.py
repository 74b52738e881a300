"""Pytest configuration and shared fixtures for all tests."""

import os
import sys
from pathlib import Path

# Минимальные переменные окружения для тестов
os.environ.setdefault("OPPORTUNITY_ENVIRONMENT", "test")
os.environ.setdefault("OPPORTUNITY_LOG_TO_STDERR", "false")

# Добавить корень проекта в PYTHONPATH
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from datetime import datetime, timedelta

import pytest

from factories import NOW, RecordingObserver, make_full_network
from opportunity import MemberNetworkSnapshot, build_default_plan


@pytest.fixture
def now() -> datetime:
    """Fixed evaluation instant."""
    return NOW


@pytest.fixture
def now_provider():
    """Clock returning NOW."""
    return lambda: NOW


@pytest.fixture
def plan():
    """Default four-phase plan."""
    return build_default_plan()


@pytest.fixture
def full_network() -> MemberNetworkSnapshot:
    return make_full_network()


@pytest.fixture
def recorder() -> RecordingObserver:
    return RecordingObserver()


@pytest.fixture
def days_ago(now):
    """Factory: datetime N days (and optional seconds) before NOW."""
    def _days_ago(days: int, seconds: int = 0) -> datetime:
        return now - timedelta(days=days, seconds=seconds)
    return _days_ago
