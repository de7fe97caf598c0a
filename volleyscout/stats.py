from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from volleyscout.models import ActionType, LogEntry, ResultType, TeamConfig, TeamSide


@dataclass(frozen=True)
class StatSummary:
    attack_total: int = 0
    attack_kills: int = 0
    blocks: int = 0
    serve_aces: int = 0
    serve_errors: int = 0
    digs: int = 0

    @property
    def total_points(self) -> int:
        return self.attack_kills + self.blocks + self.serve_aces

    @property
    def kill_rate(self) -> float:
        if not self.attack_total:
            return 0.0
        return self.attack_kills / self.attack_total


@dataclass(frozen=True)
class PlayerRanking:
    players: List[str]
    top1: Optional[str]
    top2: Optional[str]


# ---------------------------------------------------------
# Filters
# ---------------------------------------------------------

def team_entries(entries: Iterable[LogEntry], side: TeamSide, config: TeamConfig) -> List[LogEntry]:
    """
    Player actions carry the acting team's display name in `note`.

    Manual score adjustments belong to neither side.
    """
    name = config.team_name(side)
    return [e for e in entries if not e.manual and e.note == name]


def player_entries(
    entries: Iterable[LogEntry],
    side: TeamSide,
    config: TeamConfig,
    number: str,
) -> List[LogEntry]:
    return [e for e in team_entries(entries, side, config) if e.player_number == number]


def shot_chart_entries(entries: Iterable[LogEntry]) -> List[LogEntry]:
    """
    Attacks and serves that recorded a full trajectory.
    """
    return [
        e for e in entries
        if e.action in (ActionType.ATTACK, ActionType.SERVE) and e.has_trajectory()
    ]


# ---------------------------------------------------------
# Aggregation
# ---------------------------------------------------------

def calculate_stats(entries: Iterable[LogEntry]) -> StatSummary:
    attack_total = attack_kills = blocks = serve_aces = serve_errors = digs = 0

    for e in entries:
        if e.action is ActionType.ATTACK:
            attack_total += 1
            if e.result is ResultType.POINT:
                attack_kills += 1
        elif e.action is ActionType.BLOCK:
            if e.result is ResultType.POINT:
                blocks += 1
        elif e.action is ActionType.SERVE:
            if e.result is ResultType.POINT:
                serve_aces += 1
            elif e.result is ResultType.ERROR:
                serve_errors += 1
        elif e.action is ActionType.DIG:
            digs += 1

    return StatSummary(
        attack_total=attack_total,
        attack_kills=attack_kills,
        blocks=blocks,
        serve_aces=serve_aces,
        serve_errors=serve_errors,
        digs=digs,
    )


def team_summary(entries: Iterable[LogEntry], config: TeamConfig) -> Dict[TeamSide, StatSummary]:
    entries = list(entries)
    return {
        side: calculate_stats(team_entries(entries, side, config))
        for side in (TeamSide.ME, TeamSide.OP)
    }


def _jersey_key(number: str) -> Tuple[int, int, str]:
    if number.isdigit():
        return 0, int(number), number
    return 1, 0, number


def team_players(entries: Iterable[LogEntry], side: TeamSide, config: TeamConfig) -> List[str]:
    numbers = {e.player_number for e in team_entries(entries, side, config) if e.player_number}
    return sorted(numbers, key=_jersey_key)


def rank_players(entries: Iterable[LogEntry], side: TeamSide, config: TeamConfig) -> PlayerRanking:
    """
    Players ordered by jersey number plus the two top scorers.

    Equal totals rank the lower jersey number first; a player only
    qualifies as top scorer with at least one point.
    """
    mine = team_entries(entries, side, config)
    players = team_players(mine, side, config)

    points = {
        number: calculate_stats(e for e in mine if e.player_number == number).total_points
        for number in players
    }
    # players is already in jersey order and sorted() is stable
    by_points = sorted(players, key=lambda n: -points[n])

    top1 = by_points[0] if len(by_points) > 0 and points[by_points[0]] > 0 else None
    top2 = by_points[1] if len(by_points) > 1 and points[by_points[1]] > 0 else None

    return PlayerRanking(players=players, top1=top1, top2=top2)
