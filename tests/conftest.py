"""Shared fixtures for the board game tests."""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from chat_games.state import GameRegistry  # noqa: E402


class FakeClock:
    """Manually advanced replacement for the registry clock."""

    def __init__(self) -> None:
        self.now = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> datetime:
        self.now += timedelta(seconds=seconds)
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def registry(clock: FakeClock) -> GameRegistry:
    return GameRegistry(clock=clock)


@pytest.fixture
def anyio_backend() -> str:
    """Telegram handlers run on asyncio only."""

    return "asyncio"
