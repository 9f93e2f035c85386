"""
Scenario test infrastructure.

Scenarios drive the StateStore through realistic multi-step workflows
with a controllable clock.
"""

from datetime import timedelta

import pytest

from agency_os.state_store import StateStore
from tests.fixtures import NOW, seeded_snapshot


class Clock:
    """Manually advanced clock."""

    def __init__(self, start=NOW):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, **delta):
        self.now += timedelta(**delta)


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def store(clock):
    return StateStore(seeded_snapshot(), clock=clock)
