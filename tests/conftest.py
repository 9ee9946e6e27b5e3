"""Shared fixtures for cadence tests."""

import pytest

from cadence.scope import Scope
from cadence.timers import ManualTimerService


@pytest.fixture
def timers():
    return ManualTimerService()


@pytest.fixture
def scope(timers):
    with Scope(timers=timers) as s:
        yield s
