from typing import List, Optional

from volleyscout.state import GameState


class HistoryManager:
    """
    Linear undo/redo over full GameState snapshots.

    Responsibilities:
    - push the pre-action snapshot before every mutation
    - drop the redo branch whenever a new action is pushed
    - swap snapshots atomically on undo/redo
    """

    def __init__(self):
        self._past: List[GameState] = []
        self._future: List[GameState] = []

    def push(self, state: GameState) -> None:
        self._past.append(state)
        self._future.clear()

    def undo(self, current: GameState) -> Optional[GameState]:
        if not self._past:
            return None
        previous = self._past.pop()
        self._future.append(current)
        return previous

    def redo(self, current: GameState) -> Optional[GameState]:
        if not self._future:
            return None
        following = self._future.pop()
        self._past.append(current)
        return following

    def clear(self) -> None:
        self._past.clear()
        self._future.clear()

    @property
    def can_undo(self) -> bool:
        return bool(self._past)

    @property
    def can_redo(self) -> bool:
        return bool(self._future)

    @property
    def undo_depth(self) -> int:
        return len(self._past)

    @property
    def redo_depth(self) -> int:
        return len(self._future)
