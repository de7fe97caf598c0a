import time
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Hashable, Optional, Union

from volleyscout.config import LONG_PRESS_SECONDS
from volleyscout.coordinates import Point, denormalize, hit_test, normalize, zone_center
from volleyscout.exceptions import InvalidTransitionError
from volleyscout.ledger import new_entry_id
from volleyscout.models import (
    LIBERO,
    ActionQuality,
    ActionType,
    Coordinate,
    LogEntry,
    Position,
    ResultType,
    TeamConfig,
    TeamSide,
    parse_position,
)
from volleyscout.rotation import (
    LineupUpdate,
    ScoreUpdate,
    point_winner,
    score_update_for,
    side_out,
)
from volleyscout.state import GameState


class Phase(str, Enum):
    IDLE = "IDLE"
    PLAYER_SELECTED = "PLAYER_SELECTED"
    DRAWING = "DRAWING"
    RESULT_PENDING = "RESULT_PENDING"


# =========================================================
# STATES
# =========================================================

@dataclass(frozen=True)
class Idle:
    @property
    def phase(self) -> Phase:
        return Phase.IDLE


@dataclass(frozen=True)
class PlayerSelected:
    side: TeamSide
    position: Position

    @property
    def phase(self) -> Phase:
        return Phase.PLAYER_SELECTED


@dataclass(frozen=True)
class Drawing:
    """
    Trajectory being drawn, in logical court units.

    drag names the handle under the pointer ("start" or "end").
    """
    side: TeamSide
    position: Position
    action: ActionType
    start: Point
    end: Optional[Point] = None
    drag: Optional[str] = None

    @property
    def phase(self) -> Phase:
        return Phase.DRAWING


@dataclass(frozen=True)
class ResultPending:
    side: TeamSide
    position: Position
    action: ActionType
    start_coord: Coordinate
    end_coord: Coordinate
    start: Optional[Point] = None
    end: Optional[Point] = None

    @property
    def phase(self) -> Phase:
        return Phase.RESULT_PENDING


InteractionState = Union[Idle, PlayerSelected, Drawing, ResultPending]


@dataclass(frozen=True)
class Commit:
    """
    Everything one committed action changes. Any part may be None.
    """
    entry: Optional[LogEntry] = None
    score_update: Optional[ScoreUpdate] = None
    lineup_update: Optional[LineupUpdate] = None
    serving_team: Optional[TeamSide] = None


# =========================================================
# COMMIT BUILDER
# =========================================================

def player_number_for(state: GameState, side: TeamSide, position: Position) -> str:
    team = state.team(side)
    if position == LIBERO:
        return team.libero
    return team.lineup[position]


def build_commit(
    state: GameState,
    config: TeamConfig,
    side: TeamSide,
    position: Position,
    action: ActionType,
    result: ResultType,
    timestamp: int,
    start_coord: Optional[Coordinate] = None,
    end_coord: Optional[Coordinate] = None,
    quality: ActionQuality = ActionQuality.NORMAL,
) -> Commit:
    """
    Turn a finished selection into ledger entry + score/lineup/serve deltas.

    The side-out rule is checked against state.serving_team, i.e. the
    serve before this rally. The entry records the serve after it.
    """
    side = TeamSide(side)
    result = ResultType(result)

    score_update = score_update_for(side, result)
    winner = point_winner(side, result)

    new_serving: Optional[TeamSide] = None
    lineup_update: Optional[LineupUpdate] = None
    if winner is not None:
        new_serving, lineup_update = side_out(
            winner, state.serving_team, state.team(winner).lineup
        )

    my_score = state.my_score + (score_update.my_delta if score_update else 0)
    op_score = state.op_score + (score_update.op_delta if score_update else 0)

    entry = LogEntry(
        id=new_entry_id(),
        timestamp=timestamp,
        set_number=state.current_set,
        my_score=my_score,
        op_score=op_score,
        player_number=player_number_for(state, side, position),
        position=position,
        action=ActionType(action),
        quality=ActionQuality(quality),
        result=result,
        serving_team=new_serving or state.serving_team,
        note=config.team_name(side),
        start_coord=start_coord,
        end_coord=end_coord,
    )

    return Commit(
        entry=entry,
        score_update=score_update,
        lineup_update=lineup_update,
        serving_team=new_serving,
    )


# =========================================================
# STATE MACHINE
# =========================================================

class InteractionMachine:
    """
    IDLE -> PLAYER_SELECTED -> DRAWING -> RESULT_PENDING -> (commit) -> IDLE

    Pointer events outside the drawing phases are ignored, the same way
    the court ignores touches when nothing is being drawn. Selection and
    result events in a phase that does not accept them raise
    InvalidTransitionError.
    """

    def __init__(self):
        self.state: InteractionState = Idle()

    @property
    def phase(self) -> Phase:
        return self.state.phase

    def reset(self) -> None:
        self.state = Idle()

    # ---------------------------------------------------------
    # Selection
    # ---------------------------------------------------------

    def select_player(self, side: TeamSide, position: Position) -> PlayerSelected:
        # Always allowed: a new selection discards any partial flow
        self.state = PlayerSelected(side=TeamSide(side), position=parse_position(position))
        return self.state

    def select_action(self, action: ActionType) -> Drawing:
        current = self.state
        if not isinstance(current, PlayerSelected):
            raise InvalidTransitionError(f"Cannot choose an action in {current.phase.value}")

        action = ActionType(action)
        self.state = Drawing(
            side=current.side,
            position=current.position,
            action=action,
            start=zone_center(current.side, current.position, action),
        )
        return self.state

    def cancel(self) -> None:
        self.state = Idle()

    # ---------------------------------------------------------
    # Trajectory gestures
    # ---------------------------------------------------------

    def _drawing_view(self) -> Optional[Drawing]:
        current = self.state
        if isinstance(current, Drawing):
            return current
        if isinstance(current, ResultPending):
            return Drawing(
                side=current.side,
                position=current.position,
                action=current.action,
                start=current.start or denormalize(current.start_coord),
                end=current.end or denormalize(current.end_coord),
            )
        return None

    def pointer_down(self, point: Point) -> InteractionState:
        drawing = self._drawing_view()
        if drawing is None:
            return self.state

        if hit_test(point, drawing.end):
            self.state = replace(drawing, drag="end")
        elif hit_test(point, drawing.start):
            self.state = replace(drawing, drag="start")
        else:
            self.state = replace(drawing, end=tuple(point), drag="end")
        return self.state

    def pointer_move(self, point: Point) -> InteractionState:
        current = self.state
        if not isinstance(current, Drawing) or current.drag is None:
            return current

        if current.drag == "start":
            self.state = replace(current, start=tuple(point))
        else:
            self.state = replace(current, end=tuple(point))
        return self.state

    def pointer_up(self) -> InteractionState:
        current = self.state
        if not isinstance(current, Drawing):
            return current

        current = replace(current, drag=None)
        if current.end is None:
            self.state = current
            return current

        self.state = ResultPending(
            side=current.side,
            position=current.position,
            action=current.action,
            start_coord=normalize(current.start),
            end_coord=normalize(current.end),
            start=current.start,
            end=current.end,
        )
        return self.state

    def complete_drawing(self, start: Coordinate, end: Coordinate) -> ResultPending:
        """
        Accept an already-normalized trajectory from the drawing surface.
        """
        current = self.state
        if not isinstance(current, (Drawing, ResultPending)):
            raise InvalidTransitionError(f"Cannot complete a drawing in {current.phase.value}")

        self.state = ResultPending(
            side=current.side,
            position=current.position,
            action=current.action,
            start_coord=start,
            end_coord=end,
        )
        return self.state

    # ---------------------------------------------------------
    # Result
    # ---------------------------------------------------------

    def pick_result(
        self,
        result: ResultType,
        game: GameState,
        config: TeamConfig,
        timestamp: int,
        quality: ActionQuality = ActionQuality.NORMAL,
    ) -> Commit:
        current = self.state
        if not isinstance(current, ResultPending):
            raise InvalidTransitionError(f"Cannot pick a result in {current.phase.value}")

        commit = build_commit(
            game,
            config,
            side=current.side,
            position=current.position,
            action=current.action,
            result=result,
            timestamp=timestamp,
            start_coord=current.start_coord,
            end_coord=current.end_coord,
            quality=quality,
        )
        self.state = Idle()
        return commit


# =========================================================
# LONG PRESS
# =========================================================

class PressResult(str, Enum):
    CLICK = "click"
    LONG_PRESS = "long_press"


class LongPressDetector:
    """
    Cancellable fire-once timer for sidebar slots.

    press() arms it, release() before the deadline reports a CLICK.
    Once the deadline passes the press fires exactly once, delivered by
    whichever of poll() or release() observes it first.
    """

    def __init__(
        self,
        delay: float = LONG_PRESS_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.delay = delay
        self._clock = clock
        self._key: Optional[Hashable] = None
        self._deadline: Optional[float] = None
        self._fired = False

    @property
    def key(self) -> Optional[Hashable]:
        return self._key

    @property
    def armed(self) -> bool:
        return self._key is not None and not self._fired

    def press(self, key: Hashable) -> None:
        self._key = key
        self._deadline = self._clock() + self.delay
        self._fired = False

    def poll(self) -> Optional[Hashable]:
        if not self.armed or self._clock() < self._deadline:
            return None
        self._fired = True
        return self._key

    def release(self) -> Optional[PressResult]:
        if self._key is None:
            return None

        if self._fired:
            outcome = None
        elif self._clock() >= self._deadline:
            outcome = PressResult.LONG_PRESS
        else:
            outcome = PressResult.CLICK

        self.cancel()
        return outcome

    def cancel(self) -> None:
        self._key = None
        self._deadline = None
        self._fired = False
