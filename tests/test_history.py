from dataclasses import replace

from volleyscout.history import HistoryManager
from volleyscout.ledger import EventLedger
from volleyscout.state import GameState

S0 = GameState()
S1 = replace(S0, my_score=1)
S2 = replace(S1, op_score=1)


def test_push_undo_redo():
    history = HistoryManager()
    history.push(S0)

    assert history.undo(S1) == S0
    assert history.redo(S0) == S1
    assert history.undo_depth == 1
    assert history.redo_depth == 0


def test_push_clears_future():
    history = HistoryManager()
    history.push(S0)
    history.undo(S1)
    assert history.can_redo

    history.push(S0)

    assert not history.can_redo


def test_empty_stacks_return_none():
    history = HistoryManager()

    assert history.undo(S0) is None
    assert history.redo(S0) is None


def test_multi_level_undo_order():
    history = HistoryManager()
    history.push(S0)
    history.push(S1)

    assert history.undo(S2) == S1
    assert history.undo(S1) == S0
    assert history.redo(S0) == S1
    assert history.redo(S1) == S2


def test_clear():
    history = HistoryManager()
    history.push(S0)
    history.undo(S1)

    history.clear()

    assert not history.can_undo
    assert not history.can_redo


def test_snapshots_share_unchanged_ledger():
    history = HistoryManager()
    ledger = EventLedger()
    before = replace(S0, ledger=ledger)
    history.push(before)

    after = replace(before, my_score=1)

    restored = history.undo(after)
    assert restored.ledger is after.ledger
    assert restored.my_score == 0
