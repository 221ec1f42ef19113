# tests/conftest.py
import random
import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

# Add project root to sys.path so "algorithms", "engine", "grid" can be imported in tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config import AppConfig  # noqa: E402
from engine.scheduler import TickScheduler  # noqa: E402
from services.gemini import GeminiClient  # noqa: E402


PUZZLE = [
    [5, 3, 0, 0, 7, 0, 0, 0, 0],
    [6, 0, 0, 1, 9, 5, 0, 0, 0],
    [0, 9, 8, 0, 0, 0, 0, 6, 0],
    [8, 0, 0, 0, 6, 0, 0, 0, 3],
    [4, 0, 0, 8, 0, 3, 0, 0, 1],
    [7, 0, 0, 0, 2, 0, 0, 0, 6],
    [0, 6, 0, 0, 0, 0, 2, 8, 0],
    [0, 0, 0, 4, 1, 9, 0, 0, 5],
    [0, 0, 0, 0, 8, 0, 0, 7, 9],
]

SOLUTION = [
    [5, 3, 4, 6, 7, 8, 9, 1, 2],
    [6, 7, 2, 1, 9, 5, 3, 4, 8],
    [1, 9, 8, 3, 4, 2, 5, 6, 7],
    [8, 5, 9, 7, 6, 1, 4, 2, 3],
    [4, 2, 6, 8, 5, 3, 7, 9, 1],
    [7, 1, 3, 9, 2, 4, 8, 5, 6],
    [9, 6, 1, 5, 3, 7, 2, 8, 4],
    [2, 8, 7, 4, 1, 9, 6, 3, 5],
    [3, 4, 5, 2, 8, 6, 1, 7, 9],
]


class FakeClock:
    """Manually advanced clock in seconds."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms / 1000.0


class FakeModels:
    """Stands in for genai.Client().models; records every request."""

    def __init__(self, reply=None):
        self.reply = reply
        self.calls = []

    def generate_content(self, model, contents, config=None):
        self.calls.append({"model": model, "contents": contents, "config": config})
        reply = self.reply(contents) if callable(self.reply) else self.reply
        if isinstance(reply, Exception):
            raise reply
        return SimpleNamespace(text=reply)


@pytest.fixture
def puzzle():
    return [list(r) for r in PUZZLE]


@pytest.fixture
def solution():
    return [list(r) for r in SOLUTION]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def scheduler(clock):
    return TickScheduler(clock)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def config():
    return AppConfig(api_key="test-key", grid_rows=5, grid_cols=5, array_size=8, secret_key="test")


@pytest.fixture
def offline_config():
    return AppConfig(grid_rows=5, grid_cols=5, array_size=8, secret_key="test")


@pytest.fixture
def fake_models():
    return FakeModels()


@pytest.fixture
def gemini(config, fake_models):
    return GeminiClient(config, client=SimpleNamespace(models=fake_models))


def drain(session, clock, limit=100000, step_ms=1000):
    """Advance time and tick until the session's run is over."""
    for _ in range(limit):
        if not session.running:
            return
        clock.advance(step_ms)
        session.tick()
    raise AssertionError("run did not finish")
