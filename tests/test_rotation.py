import pytest

from volleyscout.models import Lineup, ResultType, TeamSide
from volleyscout.rotation import (
    LineupUpdate,
    ScoreUpdate,
    point_winner,
    rotate,
    rotate_back,
    score_update_for,
    side_out,
)


LINEUP = Lineup.of("1", "2", "3", "4", "5", "6")


# ---------------------------------------------------------
# Rotation permutation
# ---------------------------------------------------------

def test_rotate_moves_each_position():
    rotated = rotate(LINEUP)

    assert rotated[1] == "2"
    assert rotated[6] == "1"
    assert rotated[5] == "6"
    assert rotated[4] == "5"
    assert rotated[3] == "4"
    assert rotated[2] == "3"


def test_rotate_does_not_mutate_input():
    rotate(LINEUP)

    assert LINEUP.to_dict() == {"1": "1", "2": "2", "3": "3", "4": "4", "5": "5", "6": "6"}


@pytest.mark.parametrize("lineup", [
    LINEUP,
    Lineup.of("7", "10", "13", "2", "9", "17"),
    Lineup.of("", "", "", "", "", ""),
])
def test_six_rotations_return_to_start(lineup):
    current = lineup
    for _ in range(6):
        current = rotate(current)

    assert current == lineup


def test_fewer_than_six_rotations_differ():
    current = LINEUP
    for _ in range(5):
        current = rotate(current)
        assert current != LINEUP


def test_rotate_back_is_inverse():
    assert rotate_back(rotate(LINEUP)) == LINEUP
    assert rotate(rotate_back(LINEUP)) == LINEUP


# ---------------------------------------------------------
# Rally outcome
# ---------------------------------------------------------

@pytest.mark.parametrize("side, result, winner", [
    (TeamSide.ME, ResultType.POINT, TeamSide.ME),
    (TeamSide.ME, ResultType.ERROR, TeamSide.OP),
    (TeamSide.OP, ResultType.POINT, TeamSide.OP),
    (TeamSide.OP, ResultType.ERROR, TeamSide.ME),
    (TeamSide.ME, ResultType.NORMAL, None),
])
def test_point_winner(side, result, winner):
    assert point_winner(side, result) is winner


def test_score_update_for():
    assert score_update_for(TeamSide.ME, ResultType.POINT) == ScoreUpdate(1, 0)
    assert score_update_for(TeamSide.ME, ResultType.ERROR) == ScoreUpdate(0, 1)
    assert score_update_for(TeamSide.OP, ResultType.ERROR) == ScoreUpdate(1, 0)
    assert score_update_for(TeamSide.OP, ResultType.NORMAL) is None


def test_score_update_accepts_raw_strings():
    assert score_update_for("op", "Point") == ScoreUpdate(0, 1)


# ---------------------------------------------------------
# Side-out rule
# ---------------------------------------------------------

def test_side_out_retained_service():
    serving, update = side_out(TeamSide.ME, TeamSide.ME, LINEUP)

    assert serving is None
    assert update is None


def test_side_out_rotates_new_server():
    serving, update = side_out(TeamSide.OP, TeamSide.ME, LINEUP)

    assert serving is TeamSide.OP
    assert update == LineupUpdate(side=TeamSide.OP, lineup=rotate(LINEUP))
    assert update.libero is None
