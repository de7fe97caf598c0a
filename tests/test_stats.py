import pytest

from volleyscout.models import ActionQuality, ActionType, Coordinate, LogEntry, ResultType, TeamSide
from volleyscout.stats import (
    StatSummary,
    calculate_stats,
    player_entries,
    rank_players,
    shot_chart_entries,
    team_entries,
    team_players,
    team_summary,
)

from conftest import CONFIG


# ---------------------------------------------------------
# Helpers
# ---------------------------------------------------------

def make_entry(number, action, result, note="Home", manual=False, coords=False):
    return LogEntry(
        id=f"{number}-{action}-{result}",
        timestamp=0,
        set_number=1,
        my_score=0,
        op_score=0,
        player_number=number,
        position=1,
        action=action,
        quality=ActionQuality.NORMAL,
        result=result,
        serving_team=TeamSide.ME,
        note=note,
        start_coord=Coordinate(10, 10) if coords else None,
        end_coord=Coordinate(70, 40) if coords else None,
        manual=manual,
    )


A, B, S, D = ActionType.ATTACK, ActionType.BLOCK, ActionType.SERVE, ActionType.DIG
P, E, N = ResultType.POINT, ResultType.ERROR, ResultType.NORMAL

LEDGER = [
    make_entry("7", A, P),
    make_entry("7", A, E),
    make_entry("7", A, N),
    make_entry("3", B, P),
    make_entry("3", B, N),
    make_entry("10", S, P),
    make_entry("10", S, E),
    make_entry("10", D, N),
    make_entry("12", A, P, note="Away"),
    make_entry("", A, P, note="Manual Adjust +1", manual=True),
]


# ---------------------------------------------------------
# Aggregation
# ---------------------------------------------------------

def test_team_stats():
    stats = calculate_stats(team_entries(LEDGER, TeamSide.ME, CONFIG))

    assert stats == StatSummary(
        attack_total=3,
        attack_kills=1,
        blocks=1,
        serve_aces=1,
        serve_errors=1,
        digs=1,
    )
    assert stats.total_points == 3


def test_opponent_stats_exclude_manual_entries():
    stats = calculate_stats(team_entries(LEDGER, TeamSide.OP, CONFIG))

    assert stats.attack_total == 1
    assert stats.total_points == 1


def test_player_stats():
    stats = calculate_stats(player_entries(LEDGER, TeamSide.ME, CONFIG, "7"))

    assert stats.attack_total == 3
    assert stats.attack_kills == 1
    assert stats.kill_rate == pytest.approx(1 / 3)


def test_player_filter_is_per_team():
    assert player_entries(LEDGER, TeamSide.OP, CONFIG, "7") == []


def test_empty_ledger():
    stats = calculate_stats([])

    assert stats == StatSummary()
    assert stats.total_points == 0
    assert stats.kill_rate == 0.0


def test_stats_are_idempotent():
    first = team_summary(LEDGER, CONFIG)
    second = team_summary(LEDGER, CONFIG)

    assert first == second
    assert first[TeamSide.ME].total_points == 3


# ---------------------------------------------------------
# Ranking
# ---------------------------------------------------------

def test_team_players_sorted_numerically():
    assert team_players(LEDGER, TeamSide.ME, CONFIG) == ["3", "7", "10"]


def test_ranking_ties_go_to_lower_jersey():
    ranking = rank_players(LEDGER, TeamSide.ME, CONFIG)

    # 3, 7 and 10 all have one point
    assert ranking.top1 == "3"
    assert ranking.top2 == "7"


def test_ranking_by_points():
    ledger = LEDGER + [make_entry("10", S, P), make_entry("10", A, P), make_entry("7", B, P)]

    ranking = rank_players(ledger, TeamSide.ME, CONFIG)

    assert ranking.top1 == "10"
    assert ranking.top2 == "7"


def test_ranking_requires_points():
    ledger = [make_entry("4", D, N), make_entry("9", A, P)]

    ranking = rank_players(ledger, TeamSide.ME, CONFIG)

    assert ranking.players == ["4", "9"]
    assert ranking.top1 == "9"
    assert ranking.top2 is None


def test_ranking_empty_team():
    ranking = rank_players([], TeamSide.OP, CONFIG)

    assert ranking.players == []
    assert ranking.top1 is None
    assert ranking.top2 is None


# ---------------------------------------------------------
# Shot chart
# ---------------------------------------------------------

def test_shot_chart_keeps_attacks_and_serves_with_trajectory():
    ledger = [
        make_entry("7", A, P, coords=True),
        make_entry("7", S, E, coords=True),
        make_entry("7", D, N, coords=True),
        make_entry("7", A, N),
    ]

    chart = shot_chart_entries(ledger)

    assert [e.action for e in chart] == [A, S]
