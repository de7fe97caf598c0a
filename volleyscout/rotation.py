from dataclasses import dataclass
from typing import Optional, Tuple

from volleyscout.models import Lineup, ResultType, TeamSide


# new[p] = old[ROTATION_ORDER[p - 1]]
ROTATION_ORDER: Tuple[int, ...] = (2, 3, 4, 5, 6, 1)
REVERSE_ORDER: Tuple[int, ...] = (6, 1, 2, 3, 4, 5)


@dataclass(frozen=True)
class ScoreUpdate:
    my_delta: int = 0
    op_delta: int = 0

    @staticmethod
    def for_side(side: TeamSide, delta: int = 1) -> "ScoreUpdate":
        if TeamSide(side) is TeamSide.ME:
            return ScoreUpdate(my_delta=delta, op_delta=0)
        return ScoreUpdate(my_delta=0, op_delta=delta)


@dataclass(frozen=True)
class LineupUpdate:
    """
    Replacement lineup for one team; libero is None when unchanged.
    """
    side: TeamSide
    lineup: Lineup
    libero: Optional[str] = None


def _permute(lineup: Lineup, order: Tuple[int, ...]) -> Lineup:
    return Lineup(tuple(lineup[source] for source in order))


def rotate(lineup: Lineup) -> Lineup:
    """
    One clockwise serve rotation: the player in 2 moves to 1 (serves),
    1 moves to 6, 6 to 5, 5 to 4, 4 to 3 and 3 to 2.
    """
    return _permute(lineup, ROTATION_ORDER)


def rotate_back(lineup: Lineup) -> Lineup:
    return _permute(lineup, REVERSE_ORDER)


# =========================================================
# RALLY OUTCOME
# =========================================================

def point_winner(acting_side: TeamSide, result: ResultType) -> Optional[TeamSide]:
    """
    Point -> acting team wins the rally, Error -> the other team does,
    Normal -> rally continues, nobody scores.
    """
    acting_side = TeamSide(acting_side)
    result = ResultType(result)

    if result is ResultType.POINT:
        return acting_side
    if result is ResultType.ERROR:
        return acting_side.other()
    return None


def score_update_for(acting_side: TeamSide, result: ResultType) -> Optional[ScoreUpdate]:
    winner = point_winner(acting_side, result)
    if winner is None:
        return None
    return ScoreUpdate.for_side(winner, 1)


def side_out(
    winner: TeamSide,
    serving_team: TeamSide,
    winner_lineup: Lineup,
) -> Tuple[Optional[TeamSide], Optional[LineupUpdate]]:
    """
    Apply the side-out rule against the serve state *before* the point.

    Returns (new serving team, lineup update), both None when the
    winner already held serve.
    """
    winner = TeamSide(winner)
    if winner is TeamSide(serving_team):
        return None, None
    return winner, LineupUpdate(side=winner, lineup=rotate(winner_lineup))
