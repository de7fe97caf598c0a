import logging
import time
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, List, Optional

from volleyscout.config import SAVE_PREFIX
from volleyscout.coordinates import Point
from volleyscout.exceptions import LoadError, MatchNotStartedError, SaveError, SetupValidationError
from volleyscout.export import export_csv
from volleyscout.history import HistoryManager
from volleyscout.interaction import (
    Commit,
    InteractionMachine,
    InteractionState,
    LongPressDetector,
    Phase,
    PressResult,
)
from volleyscout.ledger import new_entry_id, now_millis
from volleyscout.models import (
    LIBERO,
    ActionQuality,
    ActionType,
    Coordinate,
    Lineup,
    LogEntry,
    Position,
    ResultType,
    RoleMapping,
    TeamConfig,
    TeamSide,
    parse_position,
)
from volleyscout.persistence import (
    MemoryStore,
    PersistencePort,
    SavedFile,
    decode_saved_match,
    encode_saved_match,
)
from volleyscout.rotation import LineupUpdate, ScoreUpdate, rotate, side_out
from volleyscout.state import GameState, TeamState
from volleyscout.stats import (
    PlayerRanking,
    StatSummary,
    calculate_stats,
    player_entries,
    rank_players,
    team_entries,
)
from volleyscout.timeline import ScoreSnapshot, build_score_timeline
from volleyscout.validation import validate_setup

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchView:
    """
    Read-only picture handed to the rendering surface.
    """
    config: TeamConfig
    state: GameState
    interaction: InteractionState
    can_undo: bool
    can_redo: bool
    started: bool

    @property
    def phase(self) -> Phase:
        return self.interaction.phase


@dataclass(frozen=True)
class SubstitutionRequest:
    side: TeamSide
    position: Position


class MatchStore:
    """
    Authoritative match state.

    Responsibilities:
    - Own the current GameState and team config
    - Route every mutation through push-then-apply on the history
    - Drive the interaction flow and commit its results
    - Save / load / export through injected collaborators
    """

    def __init__(
        self,
        persistence: Optional[PersistencePort] = None,
        clock: Callable[[], float] = time.time,
        press_clock: Callable[[], float] = time.monotonic,
    ):
        self.persistence = persistence if persistence is not None else MemoryStore()
        self._clock = clock
        self.config = TeamConfig()
        self.state = GameState()
        self.history = HistoryManager()
        self.interaction = InteractionMachine()
        self.long_press = LongPressDetector(clock=press_clock)
        self.started = False

    # =========================================================
    # LIFECYCLE
    # =========================================================

    def start_match(
        self,
        config: TeamConfig,
        my_lineup: Lineup,
        op_lineup: Lineup,
        my_roles: Optional[RoleMapping] = None,
        op_roles: Optional[RoleMapping] = None,
        my_libero: str = "",
        op_libero: str = "",
        first_serve: TeamSide = TeamSide.ME,
    ) -> GameState:
        """
        Fresh match from the setup form. Clears undo/redo history.
        """
        problem = validate_setup(my_lineup, op_lineup, my_libero, op_libero)
        if problem:
            raise SetupValidationError(problem)

        self.config = config.with_defaults()
        self.state = GameState(
            me=TeamState(my_lineup.stripped(), my_roles or RoleMapping(), my_libero.strip()),
            op=TeamState(op_lineup.stripped(), op_roles or RoleMapping(), op_libero.strip()),
            serving_team=TeamSide(first_serve),
        )
        self.history.clear()
        self.interaction.reset()
        self.long_press.cancel()
        self.started = True

        logger.info(
            "Match started: %s vs %s, %s serves first",
            self.config.my_name, self.config.op_name, self.state.serving_team.value,
        )
        return self.state

    def begin_set(
        self,
        my_lineup: Lineup,
        op_lineup: Lineup,
        my_roles: Optional[RoleMapping] = None,
        op_roles: Optional[RoleMapping] = None,
        my_libero: str = "",
        op_libero: str = "",
        first_serve: TeamSide = TeamSide.ME,
    ) -> GameState:
        """
        Install the lineups of the set opened by next_set() and zero the
        scores. Ledger, set counter and set wins carry over.
        """
        self._require_started()
        problem = validate_setup(my_lineup, op_lineup, my_libero, op_libero)
        if problem:
            raise SetupValidationError(problem)

        state = self.state
        self._push_and_set(replace(
            state,
            me=TeamState(my_lineup.stripped(), my_roles or state.me.roles, my_libero.strip()),
            op=TeamState(op_lineup.stripped(), op_roles or state.op.roles, op_libero.strip()),
            my_score=0,
            op_score=0,
            serving_team=TeamSide(first_serve),
        ))
        logger.info("Set %d lineups installed", self.state.current_set)
        return self.state

    def next_set(self) -> GameState:
        """
        Credit the set to the leader and open the next one.

        A tied score credits nobody. Scores stay as they are until
        begin_set() installs the new set.
        """
        self._require_started()
        state = self.state

        my_wins, op_wins = state.my_set_wins, state.op_set_wins
        if state.my_score > state.op_score:
            my_wins += 1
        elif state.op_score > state.my_score:
            op_wins += 1
        else:
            logger.warning(
                "Set %d advanced on a tie (%d-%d); no set credited",
                state.current_set, state.my_score, state.op_score,
            )

        self._push_and_set(replace(
            state,
            my_set_wins=my_wins,
            op_set_wins=op_wins,
            current_set=state.current_set + 1,
        ))
        self.interaction.reset()

        logger.info(
            "Set %d finished %d-%d, sets %d-%d",
            state.current_set, state.my_score, state.op_score, my_wins, op_wins,
        )
        return self.state

    def new_match(self) -> None:
        """
        Full reset: empty config and state, no history.
        """
        self.config = TeamConfig()
        self.state = GameState()
        self.history.clear()
        self.interaction.reset()
        self.long_press.cancel()
        self.started = False
        logger.info("Match reset")

    # =========================================================
    # MUTATIONS
    # =========================================================

    def _require_started(self) -> None:
        if not self.started:
            raise MatchNotStartedError("Start a match first")

    def _push_and_set(self, new_state: GameState) -> None:
        self.history.push(self.state)
        self.state = new_state

    def apply(self, commit: Commit) -> GameState:
        """
        Snapshot the current state, then apply every part of the commit.
        """
        self._require_started()
        state = self.state

        ledger = state.ledger
        if commit.entry is not None:
            ledger = ledger.append(commit.entry)

        my_score, op_score = state.my_score, state.op_score
        if commit.score_update is not None:
            my_score += commit.score_update.my_delta
            op_score += commit.score_update.op_delta

        new_state = replace(
            state,
            ledger=ledger,
            my_score=my_score,
            op_score=op_score,
            serving_team=commit.serving_team or state.serving_team,
        )

        update = commit.lineup_update
        if update is not None:
            team = new_state.team(update.side)
            team = replace(
                team,
                lineup=update.lineup,
                libero=team.libero if update.libero is None else update.libero,
            )
            new_state = new_state.with_team(update.side, team)

        self._push_and_set(new_state)
        logger.debug(
            "Committed %s: %d-%d, %s serving",
            commit.entry.action.value if commit.entry and commit.entry.action else "update",
            my_score, op_score, new_state.serving_team.value,
        )
        return self.state

    def adjust_score(self, side: TeamSide, delta: int) -> Optional[LogEntry]:
        """
        Manual +1/-1 correction outside the rally flow.

        Going below zero is a silent no-op. A +1 follows the side-out
        rule; a -1 never rotates.
        """
        self._require_started()
        if delta not in (1, -1):
            raise ValueError(f"Score adjustment must be +1 or -1, got {delta}")

        side = TeamSide(side)
        state = self.state
        if state.score(side) + delta < 0:
            return None

        new_serving: Optional[TeamSide] = None
        lineup_update: Optional[LineupUpdate] = None
        if delta > 0:
            new_serving, lineup_update = side_out(side, state.serving_team, state.team(side).lineup)

        score_update = ScoreUpdate.for_side(side, delta)
        entry = LogEntry(
            id=new_entry_id(),
            timestamp=now_millis(self._clock),
            set_number=state.current_set,
            my_score=state.my_score + score_update.my_delta,
            op_score=state.op_score + score_update.op_delta,
            player_number="",
            position=None,
            action=None,
            quality=ActionQuality.NORMAL,
            result=ResultType.POINT if delta > 0 else ResultType.NORMAL,
            serving_team=new_serving or state.serving_team,
            note=f"Manual Adjust {delta:+d}",
            manual=True,
        )

        self.apply(Commit(entry, score_update, lineup_update, new_serving))
        return entry

    def substitute(self, side: TeamSide, position: Position, number: str) -> bool:
        """
        Replace the jersey at a rotation position or the libero slot.
        No ledger entry. A blank number leaves everything unchanged.
        """
        self._require_started()
        number = (number or "").strip()
        if not number:
            return False

        side = TeamSide(side)
        position = parse_position(position)
        lineup = self.state.team(side).lineup

        if position == LIBERO:
            update = LineupUpdate(side=side, lineup=lineup, libero=number)
        else:
            update = LineupUpdate(side=side, lineup=lineup.replace(position, number))

        self.apply(Commit(lineup_update=update))
        return True

    def rotate(self, side: TeamSide) -> GameState:
        self._require_started()
        side = TeamSide(side)
        update = LineupUpdate(side=side, lineup=rotate(self.state.team(side).lineup))
        return self.apply(Commit(lineup_update=update))

    def undo(self) -> bool:
        restored = self.history.undo(self.state)
        if restored is None:
            return False
        self.state = restored
        self.interaction.reset()
        logger.debug("Undo -> set %d, %d-%d", restored.current_set, restored.my_score, restored.op_score)
        return True

    def redo(self) -> bool:
        restored = self.history.redo(self.state)
        if restored is None:
            return False
        self.state = restored
        self.interaction.reset()
        logger.debug("Redo -> set %d, %d-%d", restored.current_set, restored.my_score, restored.op_score)
        return True

    # =========================================================
    # INTERACTION FLOW
    # =========================================================

    def select_player(self, side: TeamSide, position: Position) -> InteractionState:
        self._require_started()
        return self.interaction.select_player(side, position)

    def select_action(self, action: ActionType) -> InteractionState:
        return self.interaction.select_action(action)

    def pointer_down(self, point: Point) -> InteractionState:
        return self.interaction.pointer_down(point)

    def pointer_move(self, point: Point) -> InteractionState:
        return self.interaction.pointer_move(point)

    def pointer_up(self) -> InteractionState:
        return self.interaction.pointer_up()

    def complete_drawing(self, start: Coordinate, end: Coordinate) -> InteractionState:
        return self.interaction.complete_drawing(start, end)

    def cancel(self) -> None:
        self.interaction.cancel()

    def pick_result(
        self,
        result: ResultType,
        quality: ActionQuality = ActionQuality.NORMAL,
    ) -> LogEntry:
        self._require_started()
        commit = self.interaction.pick_result(
            result,
            self.state,
            self.config,
            timestamp=now_millis(self._clock),
            quality=quality,
        )
        self.apply(commit)
        return commit.entry

    # ---------------------------------------------------------
    # Sidebar press / long press
    # ---------------------------------------------------------

    def press_slot(self, side: TeamSide, position: Position) -> None:
        self._require_started()
        self.long_press.press(SubstitutionRequest(TeamSide(side), parse_position(position)))

    def poll_long_press(self) -> Optional[SubstitutionRequest]:
        """
        Call periodically while a slot is held; returns the substitution
        target once, when the hold reaches the long-press threshold.
        """
        return self.long_press.poll()

    def release_slot(self) -> Optional[SubstitutionRequest]:
        """
        A short press selects the player. A hold that expired without
        being polled is returned as a substitution target.
        """
        key = self.long_press.key
        outcome = self.long_press.release()
        if outcome is PressResult.CLICK:
            self.select_player(key.side, key.position)
        elif outcome is PressResult.LONG_PRESS:
            return key
        return None

    # =========================================================
    # PERSISTENCE
    # =========================================================

    def default_save_name(self) -> str:
        stamp = datetime.fromtimestamp(self._clock()).strftime("%m%d%H%M")
        return f"{self.config.file_stem()}_{stamp}"

    def save(self, name: Optional[str] = None) -> str:
        self._require_started()
        name = (name if name is not None else self.default_save_name()).strip()
        if not name:
            raise ValueError("Save name must not be blank")

        key = f"{SAVE_PREFIX}{name}"
        blob = encode_saved_match(self.config, self.state, now_millis(self._clock))
        try:
            self.persistence.set(key, blob)
        except Exception as exc:
            raise SaveError(f"Could not save match {name!r}: {exc}") from exc

        logger.info("Saved match as %s (%d entries)", key, len(self.state.ledger))
        return key

    def list_saves(self) -> List[SavedFile]:
        return [
            SavedFile(key=key, name=key[len(SAVE_PREFIX):])
            for key in self.persistence.list_by_prefix(SAVE_PREFIX)
        ]

    def load(self, key: str) -> GameState:
        """
        Replace the match with a saved one and clear history.
        On any failure the current match is left untouched.
        """
        if not key.startswith(SAVE_PREFIX):
            key = f"{SAVE_PREFIX}{key}"

        try:
            text = self.persistence.get(key)
        except Exception as exc:
            raise LoadError(f"Could not read {key!r}: {exc}") from exc
        if text is None:
            raise LoadError(f"No saved match under {key!r}")

        saved = decode_saved_match(text)

        self.config = saved.config
        self.state = saved.state
        self.history.clear()
        self.interaction.reset()
        self.long_press.cancel()
        self.started = True

        logger.info("Loaded %s (%d entries)", key, len(self.state.ledger))
        return self.state

    # =========================================================
    # READ-ONLY VIEWS
    # =========================================================

    def snapshot(self) -> MatchView:
        return MatchView(
            config=self.config,
            state=self.state,
            interaction=self.interaction.state,
            can_undo=self.history.can_undo,
            can_redo=self.history.can_redo,
            started=self.started,
        )

    def stats(self, side: TeamSide, number: Optional[str] = None) -> StatSummary:
        if number is None:
            return calculate_stats(team_entries(self.state.ledger, side, self.config))
        return calculate_stats(player_entries(self.state.ledger, side, self.config, number))

    def ranking(self, side: TeamSide) -> PlayerRanking:
        return rank_players(self.state.ledger, side, self.config)

    def timeline(self, set_number: Optional[int] = None) -> List[ScoreSnapshot]:
        return build_score_timeline(self.state.ledger, set_number)

    def export_csv(self) -> bytes:
        return export_csv(self.state.ledger, self.config)
