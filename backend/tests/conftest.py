import pytest

from backend.app.core.session_store import SessionStore
from backend.app.models.recipe import Recipe, Step


class FakeClock:
    def __init__(self, start_ms: int = 1_700_000_000_000):
        self.ms = start_ms

    def __call__(self) -> int:
        return self.ms

    def advance(self, ms: int) -> None:
        self.ms += ms


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return SessionStore(clock=clock)


@pytest.fixture
def two_step_recipe():
    return Recipe(
        id="soup",
        title="Soup",
        steps=[
            Step(description="Chop vegetables", duration_minutes=5),
            Step(description="Simmer", duration_minutes=10),
        ],
    )
