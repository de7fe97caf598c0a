import pytest

from volleyscout.models import Lineup, TeamConfig
from volleyscout.state import GameState, TeamState


class FakeClock:
    """
    Manually advanced clock, usable for both wall time and monotonic time.
    """

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


MY_LINEUP = Lineup.of("5", "2", "3", "4", "1", "6")
OP_LINEUP = Lineup.of("11", "12", "13", "14", "15", "16")
CONFIG = TeamConfig(match_name="G1", my_name="Home", op_name="Away")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def config():
    return CONFIG


@pytest.fixture
def game():
    return GameState(
        me=TeamState(lineup=MY_LINEUP, libero="99"),
        op=TeamState(lineup=OP_LINEUP, libero="88"),
    )
