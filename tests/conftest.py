"""Shared pytest fixtures.

Backend modules are imported the way the API and frontend import them: with
``backend/`` on ``sys.path``. Stores get a fixed, stepping clock so keys and
timestamps are deterministic.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

BACKEND_DIR = Path(__file__).resolve().parent.parent / "backend"
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from storage.transaction_store import InMemoryTransactionStore  # noqa: E402

BASE_MILLIS = 1_700_000_000_000


class SteppingClock:
    """Returns BASE_MILLIS, BASE_MILLIS + step, ... on successive calls."""

    def __init__(self, start: int = BASE_MILLIS, step: int = 1000) -> None:
        self.now = start
        self.step = step

    def __call__(self) -> int:
        value = self.now
        self.now += self.step
        return value


@pytest.fixture
def clock() -> SteppingClock:
    return SteppingClock()


@pytest.fixture
def memory_store(clock: SteppingClock) -> InMemoryTransactionStore:
    return InMemoryTransactionStore(clock=clock)
